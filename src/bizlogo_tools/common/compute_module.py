"""ComputeModule - Abstract base class for logo job tasks."""

from abc import ABC, abstractmethod
from typing import Callable, Generic

from loguru import logger
from pydantic import ValidationError

from .errors import BizlogoError
from .job_storage import JobStorage
from .schema_job import P, Q
from .schema_job_record import JobRecord, JobRecordUpdate


class ComputeModule(ABC, Generic[P, Q]):
    """
    Stateless, template-method based compute module.

    - Params are validated once and passed through
    - run() owns persistence through the storage
    - Q contains metadata only
    """

    schema: type[P]

    @property
    @abstractmethod
    def task_type(self) -> str: ...

    @abstractmethod
    async def run(
        self,
        job_id: str,
        params: P,
        storage: JobStorage,
        progress_callback: Callable[[int], None] | None = None,
    ) -> Q:
        """
        Execute task.

        - May persist data via storage
        - Must return metadata only
        """
        ...

    async def execute(
        self,
        job_record: JobRecord,
        storage: JobStorage,
        progress_callback: Callable[[int], None] | None = None,
    ) -> JobRecordUpdate:
        """Run ``job_record`` and describe the outcome; never raises for task failures.

        Log records emitted while the task runs, including ``@timed``
        algorithm timings in worker threads, carry ``job_id`` and
        ``task_type`` in their extra dict.
        """
        job_id = job_record.job_id
        with logger.contextualize(job_id=job_id, task_type=self.task_type):
            try:
                params = self.schema.model_validate(job_record.params)
                output = await self.run(job_id, params, storage, progress_callback)
            except (ValidationError, BizlogoError, FileNotFoundError) as exc:
                logger.warning(f"{self.task_type} job {job_id} rejected: {exc}")
                return JobRecordUpdate.failed(str(exc))
            except Exception as exc:
                logger.exception(f"{self.task_type} job {job_id} failed")
                return JobRecordUpdate.failed(str(exc))

            return JobRecordUpdate.completed(output.model_dump(mode="json"))
