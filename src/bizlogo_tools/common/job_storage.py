"""
JobStorage Protocol - job-scoped file storage for uploaded logos and exports.

Storage is the single authority over paths: callers address files by
job_id and a job-relative path only.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path
from typing import ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


class JobStorageError(Exception):
    """Base class for storage-related errors."""


class JobDirectoryCreationError(JobStorageError):
    def __init__(self, job_id: str):
        self.job_id: str = job_id
        super().__init__(f"Failed to create storage directory for job '{job_id}'")


class PathTraversalError(JobStorageError, ValueError):
    def __init__(self, relative_path: str):
        self.relative_path: str = relative_path
        super().__init__(f"Invalid relative path (path traversal detected): {relative_path}")


class SavedJobFile(BaseModel):
    """Metadata of a saved job file."""

    relative_path: str = Field(
        ...,
        description="Relative path of the saved file within the job storage",
    )
    size: int = Field(..., ge=0, description="File size in bytes")
    hash: str | None = Field(None, description="SHA256 of the content")

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")


class AsyncFileLike(Protocol):
    """Minimal async file-like interface (UploadFile, aiofiles handles)."""

    async def read(self, size: int, /) -> bytes: ...


FileLike = AsyncFileLike | bytes | str | PathLike[str]


@runtime_checkable
class JobStorage(Protocol):
    """
    Protocol for job-scoped file storage.

    Implementations own the storage root, directory layout and cleanup.
    """

    def create_directory(self, job_id: str) -> None:
        """Create storage directory for a job (idempotent)."""
        ...

    def remove(self, job_id: str) -> bool:
        """Remove all files associated with a job."""
        ...

    async def save(
        self,
        job_id: str,
        relative_path: str,
        file: FileLike,
        *,
        mkdirs: bool = True,
    ) -> SavedJobFile:
        """
        Save a file into job storage.

        `file` may be an async file-like object, raw bytes, or the path of an
        existing file to copy.
        """
        ...

    def allocate_path(
        self,
        job_id: str,
        relative_path: str,
        *,
        mkdirs: bool = True,
    ) -> Path:
        """
        Allocate a filesystem path for writing.

        Storage retains control of layout; caller owns writing.
        """
        ...

    async def open(self, job_id: str, relative_path: str) -> AsyncFileLike:
        ...

    def resolve_path(self, job_id: str, relative_path: str | None = None) -> Path:
        """
        Resolve a job-relative path to an absolute filesystem path.

        Only for filesystem-bound libraries such as Pillow.
        """
        ...
