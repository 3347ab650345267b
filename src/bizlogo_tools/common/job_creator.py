from pathlib import PurePath
from typing import Callable

from fastapi import UploadFile

from .job_repository import JobRepository
from .job_storage import JobStorage
from .schema_job import Job, P, TaskOutput
from .schema_job_record import JobCreatedResponse
from .user import UserLike


async def create_job_from_upload(
    *,
    task_type: str,
    repository: JobRepository,
    file_storage: JobStorage,
    file: UploadFile,
    params_factory: Callable[[str], P],
    priority: int,
    user: UserLike | None,
) -> JobCreatedResponse:
    """Store an uploaded logo under ``input/`` and queue a job for it.

    ``params_factory`` receives the job-relative input path and builds the
    task parameters; it runs before anything is written so that invalid
    parameters never leave an orphaned job directory behind. A failed save
    or a refused ``add_job`` removes the job directory again.
    """
    if not file.filename:
        raise ValueError("Uploaded file has no filename")

    # Strip any client-supplied directories
    filename = PurePath(file.filename).name
    input_path = f"input/{filename}"
    job = Job[P, TaskOutput](task_type=task_type, params=params_factory(input_path))

    try:
        file_storage.create_directory(job.job_id)
        _ = await file_storage.save(job.job_id, input_path, file)
    except BaseException:
        _ = file_storage.remove(job.job_id)
        raise

    record = job.to_record()
    ok = repository.add_job(
        record,
        created_by=user.id if user else None,
        priority=priority,
    )
    if not ok:
        _ = file_storage.remove(job.job_id)
        raise ValueError("Failed to create job")

    return JobCreatedResponse.for_record(record)
