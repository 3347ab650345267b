"""Common module - protocols, schemas, and base classes."""

from .compute_module import ComputeModule
from .errors import BizlogoError, InvalidTargetError, SourceDecodeError, UnknownPresetError
from .file_storage_impl import LocalFileStorage
from .job_repository import JobRepository
from .job_storage import JobStorage
from .schema_job import BaseJobParams, Job, TaskOutput

__all__ = [
    "Job",
    "BaseJobParams",
    "TaskOutput",
    "ComputeModule",
    "JobRepository",
    "JobStorage",
    "LocalFileStorage",
    "BizlogoError",
    "InvalidTargetError",
    "SourceDecodeError",
    "UnknownPresetError",
]
