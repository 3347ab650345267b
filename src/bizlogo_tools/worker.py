"""Worker runtime - orchestrates logo job execution."""

from importlib.metadata import entry_points
from typing import cast

from loguru import logger

from .common.compute_module import ComputeModule
from .common.job_repository import JobRepository
from .common.job_storage import JobStorage
from .common.schema_job import BaseJobParams, TaskOutput
from .common.schema_job_record import JobRecordUpdate, JobStatus
from .utils.profiling import stopwatch

TASKS_GROUP = "bizlogo_tools.tasks"

TaskRegistry = dict[str, ComputeModule[BaseJobParams, TaskOutput]]


def get_task_registry() -> TaskRegistry:
    """Instantiate every task registered under the ``bizlogo_tools.tasks`` group.

    Returns:
        Dict mapping task_type -> ComputeModule instance

    Raises:
        RuntimeError: If a plugin fails to load (missing dependency, etc.)
    """
    registry: TaskRegistry = {}

    for ep in entry_points(group=TASKS_GROUP):
        try:
            task_class = cast(type[ComputeModule[BaseJobParams, TaskOutput]], ep.load())
            task = task_class()
            registry[task.task_type] = task
        except Exception as e:
            raise RuntimeError(f"Failed to load task '{ep.name}': {e}") from e

    return registry


class Worker:
    """Worker runtime that orchestrates job execution.

    Responsibilities:
    - Maintains task registry (auto-discovered from entry points)
    - Claims jobs from the repository (atomic claim prevents double work)
    - Dispatches jobs to the matching ComputeModule
    - Records completion or failure on the job

    Example:
        worker = Worker(repository, LocalFileStorage("./media"))

        while True:
            if not await worker.run_once():
                await asyncio.sleep(1.0)
    """

    def __init__(
        self,
        repository: JobRepository,
        job_storage: JobStorage,
        task_registry: TaskRegistry | None = None,
    ):
        self.repository: JobRepository = repository
        self.job_storage: JobStorage = job_storage
        self.task_registry: TaskRegistry = (
            task_registry if task_registry is not None else get_task_registry()
        )

    def get_supported_task_types(self) -> list[str]:
        return list(self.task_registry.keys())

    async def run_once(self, task_types: list[str] | None = None) -> bool:
        """Process one job and return.

        Args:
            task_types: Task types to process. If None, all registered types.

        Returns:
            True if a job was processed, False if no jobs were available.
        """
        if task_types is None:
            valid_types = self.get_supported_task_types()
        else:
            valid_types = [t for t in task_types if t in self.task_registry]

        if not valid_types:
            return False

        job_record = self.repository.fetch_next_job(valid_types)
        if not job_record:
            return False

        job_id = job_record.job_id
        task = self.task_registry[job_record.task_type]
        logger.info(f"Claimed {job_record.task_type} job {job_id}")

        def progress_callback(pct: int) -> None:
            # 100 is reserved for the final status update
            _ = self.repository.update_job(job_id, JobRecordUpdate.progressed(min(99, pct)))

        with stopwatch(f"{job_record.task_type} job {job_id}"):
            try:
                result = await task.execute(job_record, self.job_storage, progress_callback)
            except Exception as e:
                logger.exception(f"Job {job_id} crashed outside its task")
                result = JobRecordUpdate.failed(str(e))

        _ = self.repository.update_job(job_id, result)
        if result.status == JobStatus.completed:
            logger.info(f"Job {job_id} completed")
        else:
            logger.warning(f"Job {job_id} failed: {result.error_message}")

        # A failed job is still a processed job
        return True
