"""Typed job models: a plugin's params and output around a JobRecord."""

from typing import Generic, TypeVar
from uuid import uuid4

from pydantic import BaseModel, Field

from .schema_job_record import JobRecord, JobStatus


class BaseJobParams(BaseModel):
    """Parameters every logo job carries.

    Both paths are relative to the job's storage directory.
    """

    input_path: str = Field(description="Job-relative path of the uploaded source image")
    output_path: str = Field(description="Job-relative path of the output file or directory")


class TaskOutput(BaseModel):
    """Metadata a task reports back; the encoded images stay in job storage."""


P = TypeVar("P", bound=BaseJobParams)
Q = TypeVar("Q", bound=TaskOutput)


class Job(BaseModel, Generic[P, Q]):
    """A new logo job, before it is handed to a repository."""

    job_id: str = Field(default_factory=lambda: str(uuid4()))
    task_type: str

    params: P
    output: Q | None = None
    status: JobStatus = JobStatus.queued

    def to_record(self) -> JobRecord:
        # Dump from the instances, not the field types, so plugin-specific
        # params (width, presets, ...) survive an unparametrized Job
        return JobRecord(
            job_id=self.job_id,
            task_type=self.task_type,
            params=self.params.model_dump(mode="json"),
            output=None if self.output is None else self.output.model_dump(mode="json"),
            status=self.status,
        )
