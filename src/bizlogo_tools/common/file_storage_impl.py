from __future__ import annotations

import hashlib
import shutil
from os import PathLike
from pathlib import Path
from typing import Final

from typing_extensions import override

import aiofiles
from aiofiles.threadpool.binary import AsyncBufferedReader

from .job_storage import (
    AsyncFileLike,
    FileLike,
    JobDirectoryCreationError,
    JobStorage,
    PathTraversalError,
    SavedJobFile,
)


class LocalFileStorage(JobStorage):
    """
    JobStorage on the local filesystem.

    Layout:
        base_dir/
            <job_id>/
                input/<uploaded logo>
                output/<resized or exported logos>

    Every job id and job-relative path is resolved and checked against
    its parent before use; anything escaping it raises PathTraversalError.
    """

    _CHUNK_SIZE: Final[int] = 1024 * 1024

    def __init__(self, base_dir: str | PathLike[str]):
        self._base_dir: Path = Path(base_dir).expanduser().resolve()
        self._base_dir.mkdir(parents=True, exist_ok=True)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def _job_root(self, job_id: str) -> Path:
        root = (self._base_dir / job_id).resolve()
        if root.parent != self._base_dir:
            raise PathTraversalError(job_id)
        return root

    def _safe_path(self, job_id: str, relative_path: str | None = None) -> Path:
        root = self._job_root(job_id)
        if relative_path is None:
            return root

        resolved = (root / relative_path).resolve()
        if resolved != root and root not in resolved.parents:
            raise PathTraversalError(relative_path)
        return resolved

    def _file_path(self, job_id: str, relative_path: str, mkdirs: bool) -> Path:
        path = self._safe_path(job_id, relative_path)
        if path == self._job_root(job_id):
            raise PathTraversalError(relative_path)
        if mkdirs:
            path.parent.mkdir(parents=True, exist_ok=True)
        return path

    @override
    def create_directory(self, job_id: str) -> None:
        root = self._job_root(job_id)
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise JobDirectoryCreationError(job_id) from exc

    @override
    def remove(self, job_id: str) -> bool:
        try:
            shutil.rmtree(self._job_root(job_id))
        except OSError:
            return False
        return True

    @override
    async def save(
        self,
        job_id: str,
        relative_path: str,
        file: FileLike,
        *,
        mkdirs: bool = True,
    ) -> SavedJobFile:
        self.create_directory(job_id)
        dst = self._file_path(job_id, relative_path, mkdirs)

        if isinstance(file, (bytes, bytearray)):
            data = bytes(file)
            async with aiofiles.open(dst, "wb") as out:
                _ = await out.write(data)
            return SavedJobFile(
                relative_path=relative_path,
                size=len(data),
                hash=hashlib.sha256(data).hexdigest(),
            )

        if isinstance(file, (str, PathLike)):
            src = Path(file).expanduser().resolve()
            if not src.is_file():
                raise FileNotFoundError(src)
            async with aiofiles.open(src, "rb") as source:
                size, digest = await self._copy(source, dst)
        else:
            size, digest = await self._copy(file, dst)

        return SavedJobFile(relative_path=relative_path, size=size, hash=digest)

    async def _copy(self, source: AsyncFileLike, dst: Path) -> tuple[int, str]:
        size = 0
        hasher = hashlib.sha256()
        async with aiofiles.open(dst, "wb") as out:
            while chunk := await source.read(self._CHUNK_SIZE):
                _ = await out.write(chunk)
                size += len(chunk)
                hasher.update(chunk)
        return size, hasher.hexdigest()

    @override
    def allocate_path(
        self,
        job_id: str,
        relative_path: str,
        *,
        mkdirs: bool = True,
    ) -> Path:
        self.create_directory(job_id)
        return self._file_path(job_id, relative_path, mkdirs)

    @override
    async def open(self, job_id: str, relative_path: str) -> AsyncBufferedReader:
        return await aiofiles.open(self._safe_path(job_id, relative_path), "rb")

    @override
    def resolve_path(self, job_id: str, relative_path: str | None = None) -> Path:
        return self._safe_path(job_id, relative_path)
