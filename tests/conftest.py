"""Test configuration and fixtures for bizlogo_tools.

This module provides:
- Pytest configuration (dependency checks)
- Synthetic logo fixtures built with Pillow
- Mock services (in-memory job repository, local file storage)
- Integration fixtures (API client, worker)
"""

import os
from collections.abc import Sequence
from io import BytesIO
from pathlib import Path

from typing_extensions import override

import pytest
from fastapi.testclient import TestClient
from PIL import Image, ImageDraw

# Colors of the three bands in the striped fixtures
RED = (220, 30, 30)
GREEN = (30, 200, 60)
BLUE = (30, 60, 220)


# ============================================================================
# Pytest Configuration
# ============================================================================


def _libmagic_available() -> bool:
    try:
        import magic

        _ = magic.Magic(mime=True).from_buffer(b"\x89PNG\r\n\x1a\n")
    except Exception:
        return False
    return True


def pytest_runtest_setup(item):
    if item.get_closest_marker("requires_libmagic") and not _libmagic_available():
        pytest.skip(
            "libmagic not installed. "
            "Install: brew install libmagic (macOS) or apt-get install libmagic1 (Linux)"
        )


# ============================================================================
# Image helpers
# ============================================================================


def png_bytes(img: Image.Image) -> bytes:
    buffer = BytesIO()
    img.save(buffer, "PNG")
    return buffer.getvalue()


def striped_image(width: int, height: int, *, horizontal: bool, mode: str = "RGB") -> Image.Image:
    """Three equal bands: red, green, blue (left to right, or top to bottom)."""
    fill_alpha = (255,) if mode == "RGBA" else ()
    img = Image.new(mode, (width, height), RED + fill_alpha)
    draw = ImageDraw.Draw(img)
    if horizontal:
        third = width // 3
        draw.rectangle([third, 0, 2 * third - 1, height - 1], fill=GREEN + fill_alpha)
        draw.rectangle([2 * third, 0, width - 1, height - 1], fill=BLUE + fill_alpha)
    else:
        third = height // 3
        draw.rectangle([0, third, width - 1, 2 * third - 1], fill=GREEN + fill_alpha)
        draw.rectangle([0, 2 * third, width - 1, height - 1], fill=BLUE + fill_alpha)
    return img


# ============================================================================
# Image Fixtures
# ============================================================================


@pytest.fixture
def encode_png():
    return png_bytes


@pytest.fixture
def make_striped():
    return striped_image


@pytest.fixture
def wide_logo() -> Image.Image:
    """600x200 opaque RGBA logo with red/green/blue vertical bands."""
    return striped_image(600, 200, horizontal=True, mode="RGBA")


@pytest.fixture
def tall_logo() -> Image.Image:
    """200x600 RGB logo with red/green/blue horizontal bands."""
    return striped_image(200, 600, horizontal=False)


@pytest.fixture
def square_logo() -> Image.Image:
    """512x512 RGBA logo: transparent background with a filled circle."""
    img = Image.new("RGBA", (512, 512), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw.ellipse([64, 64, 448, 448], fill=(200, 100, 100, 255))
    draw.rectangle([224, 224, 288, 288], fill=(255, 255, 255, 255))
    return img


@pytest.fixture
def logo_png_bytes(square_logo: Image.Image) -> bytes:
    return png_bytes(square_logo)


@pytest.fixture
def logo_png_path(tmp_path: Path, logo_png_bytes: bytes) -> Path:
    path = tmp_path / "logo.png"
    _ = path.write_bytes(logo_png_bytes)
    return path


@pytest.fixture
def temp_output_dir(tmp_path: Path) -> Path:
    """Provide clean temporary directory for test outputs."""
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    return output_dir


# ============================================================================
# Mock Service Fixtures
# ============================================================================


@pytest.fixture
def job_repository():
    """Provide in-memory job repository for testing."""
    from bizlogo_tools.common.job_repository import JobRepository
    from bizlogo_tools.common.schema_job_record import JobRecord, JobRecordUpdate, JobStatus

    class InMemoryJobRepository(JobRepository):
        """In-memory implementation for testing."""

        def __init__(self):
            self._jobs: dict[str, JobRecord] = {}
            self.priorities: dict[str, int | None] = {}

        def get(self, job_id: str) -> JobRecord | None:
            return self._jobs.get(job_id)

        @override
        def add_job(
            self,
            job: JobRecord,
            created_by: str | None = None,
            priority: int | None = None,
        ) -> bool:
            self._jobs[job.job_id] = job
            self.priorities[job.job_id] = priority
            return True

        @override
        def get_job(self, job_id: str) -> JobRecord | None:
            return self._jobs.get(job_id)

        @override
        def update_job(self, job_id: str, updates: JobRecordUpdate) -> bool:
            if job_id not in self._jobs:
                return False
            self._jobs[job_id] = self._jobs[job_id].apply(updates)
            return True

        @override
        def fetch_next_job(self, task_types: Sequence[str]) -> JobRecord | None:
            for job_id, job in self._jobs.items():
                if job.status == JobStatus.queued and job.task_type in task_types:
                    claimed = job.model_copy(update={"status": JobStatus.processing})
                    self._jobs[job_id] = claimed
                    return claimed
            return None

        @override
        def delete_job(self, job_id: str) -> bool:
            return self._jobs.pop(job_id, None) is not None

    return InMemoryJobRepository()


@pytest.fixture
def file_storage(tmp_path: Path):
    """Provide file storage for testing.

    Uses the TEST_STORAGE_DIR environment variable when set,
    otherwise tmp_path / "file_storage".
    """
    from bizlogo_tools.common.file_storage_impl import LocalFileStorage

    env_storage = os.environ.get("TEST_STORAGE_DIR")
    storage_dir = Path(env_storage) if env_storage else tmp_path / "file_storage"
    storage_dir.mkdir(parents=True, exist_ok=True)

    return LocalFileStorage(base_dir=storage_dir)


@pytest.fixture
def task_registry():
    from bizlogo_tools.plugins.logo_export.task import LogoExportTask
    from bizlogo_tools.plugins.logo_resize.task import LogoResizeTask

    return {task.task_type: task for task in (LogoResizeTask(), LogoExportTask())}


@pytest.fixture
def worker(job_repository, file_storage, task_registry):
    """Provide Worker instance for integration tests."""
    from bizlogo_tools import Worker

    return Worker(
        repository=job_repository,
        job_storage=file_storage,
        task_registry=task_registry,
    )


@pytest.fixture
def api_client(job_repository, file_storage):
    """Provide FastAPI TestClient for route testing."""
    from fastapi import FastAPI

    from bizlogo_tools import create_master_router
    from bizlogo_tools.plugins.logo_export.routes import create_router as create_export_router
    from bizlogo_tools.plugins.logo_resize.routes import create_router as create_resize_router

    app = FastAPI()

    def get_current_user():
        return None

    router = create_master_router(
        repository=job_repository,
        file_storage=file_storage,
        get_current_user=get_current_user,
        route_factories={
            "logo_resize": create_resize_router,
            "logo_export": create_export_router,
        },
    )

    app.include_router(router)

    return TestClient(app)
