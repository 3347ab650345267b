"""Persistence interface for queued logo resize/export jobs."""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from .schema_job_record import JobRecord, JobRecordUpdate


@runtime_checkable
class JobRepository(Protocol):
    """Where routes queue logo jobs and workers claim them.

    The host application supplies the backing store. Records are plain
    ``JobRecord`` models whose ``params`` and ``output`` are JSON values,
    so any document or SQL store can hold them.

    Claim order is the implementation's choice; higher ``priority`` first,
    then oldest, is what the bundled routes expect.
    """

    def add_job(
        self,
        job: JobRecord,
        created_by: str | None = None,
        priority: int | None = None,
    ) -> bool:
        """Queue ``job``; False tells the caller to discard the uploaded logo."""
        ...

    def get_job(self, job_id: str) -> JobRecord | None: ...

    def update_job(self, job_id: str, updates: JobRecordUpdate) -> bool:
        """Merge the non-None fields of ``updates``; False for an unknown job."""
        ...

    def fetch_next_job(self, task_types: Sequence[str]) -> JobRecord | None:
        """Claim one queued job of ``task_types``.

        Selecting the job and moving it to ``processing`` must be a single
        atomic step, so two workers never render the same logo.
        """
        ...

    def delete_job(self, job_id: str) -> bool: ...
