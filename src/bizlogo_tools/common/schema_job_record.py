"""Persisted form of a logo job, as a JobRepository stores it."""

from enum import StrEnum
from typing import ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, JsonValue

JsonObject = dict[str, JsonValue]


class JobStatus(StrEnum):
    queued = "queued"
    processing = "processing"
    completed = "completed"
    error = "error"

    @property
    def is_final(self) -> bool:
        return self in (JobStatus.completed, JobStatus.error)


class JobRecordUpdate(BaseModel):
    """Partial change to a JobRecord; fields left as None are not touched."""

    status: JobStatus | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    output: JsonObject | None = None
    error_message: str | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    @classmethod
    def progressed(cls, percent: int) -> Self:
        return cls(progress=percent)

    @classmethod
    def completed(cls, output: JsonObject) -> Self:
        return cls(status=JobStatus.completed, output=output, progress=100)

    @classmethod
    def failed(cls, message: str) -> Self:
        """Error outcome; progress stays where the task got to."""
        return cls(status=JobStatus.error, error_message=message)


class JobRecord(BaseModel):
    """
    One logo job as stored by the host application.

    ``params`` is the JSON dump of the plugin's params model (for example
    LogoResizeParams) and ``output`` the dump of its output model once the
    job has completed, so any document or SQL store can hold a record.
    """

    job_id: str
    task_type: str

    params: JsonObject
    output: JsonObject | None = None

    status: JobStatus = JobStatus.queued
    progress: int = Field(default=0, ge=0, le=100)
    error_message: str | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    def apply(self, update: JobRecordUpdate) -> "JobRecord":
        """Copy of this record with the fields ``update`` sets."""
        return self.model_copy(update=update.model_dump(exclude_none=True))


class JobCreatedResponse(BaseModel):
    """Body returned by the ``POST /jobs/<task_type>`` routes."""

    job_id: str
    status: JobStatus
    task_type: str

    @classmethod
    def for_record(cls, record: JobRecord) -> Self:
        return cls(job_id=record.job_id, status=record.status, task_type=record.task_type)
