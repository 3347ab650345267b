"""bizlogo_tools - Exact-size logo resize and multi-size export, as library and job plugins."""

from .common.compute_module import ComputeModule
from .common.errors import BizlogoError, InvalidTargetError, SourceDecodeError, UnknownPresetError
from .common.file_storage_impl import LocalFileStorage
from .common.job_repository import JobRepository
from .common.job_storage import AsyncFileLike, FileLike, JobStorage, SavedJobFile
from .common.schema_job import BaseJobParams, Job, TaskOutput
from .common.schema_job_record import JobCreatedResponse, JobRecord, JobRecordUpdate, JobStatus
from .master import create_master_router
from .worker import Worker

__version__ = "0.1.0"

__all__ = [
    "Job",
    "BaseJobParams",
    "TaskOutput",
    "JobRecord",
    "JobRecordUpdate",
    "JobStatus",
    "JobCreatedResponse",
    "AsyncFileLike",
    "FileLike",
    "SavedJobFile",
    "ComputeModule",
    "JobRepository",
    "JobStorage",
    "LocalFileStorage",
    "BizlogoError",
    "InvalidTargetError",
    "SourceDecodeError",
    "UnknownPresetError",
    "__version__",
    "Worker",
    "create_master_router",
]
