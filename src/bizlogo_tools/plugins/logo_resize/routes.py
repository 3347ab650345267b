"""Logo resize route factory."""

from pathlib import PurePath
from typing import Annotated, Callable, Literal

from fastapi import APIRouter, Depends, File, Form, UploadFile

from ...common.job_creator import create_job_from_upload
from ...common.job_repository import JobRepository
from ...common.job_storage import JobStorage
from ...common.schema_job_record import JobCreatedResponse
from ...common.user import UserLike
from .algo.fit_crop import ImageFormat
from .schema import LogoResizeParams


def create_router(
    repository: JobRepository,
    file_storage: JobStorage,
    get_current_user: Callable[[], UserLike | None],
) -> APIRouter:
    router = APIRouter()

    @router.post("/jobs/logo_resize", response_model=JobCreatedResponse)
    async def create_logo_resize_job(
        file: Annotated[UploadFile, File(description="Logo image to resize")],
        width: Annotated[int, Form(gt=0, description="Target width in pixels")],
        height: Annotated[int, Form(gt=0, description="Target height in pixels")],
        format: Annotated[
            Literal["png", "jpg", "jpeg", "webp", "gif", "bmp", "tiff"],
            Form(description="Output format"),
        ] = "png",
        quality: Annotated[int | None, Form(ge=1, le=100, description="Output quality (1-100)")] = None,
        priority: Annotated[int, Form(ge=0, le=10, description="Job priority (0-10)")] = 5,
        user: Annotated[UserLike | None, Depends(get_current_user)] = None,
    ) -> JobCreatedResponse:
        fmt = ImageFormat.parse(format)

        return await create_job_from_upload(
            task_type="logo_resize",
            repository=repository,
            file_storage=file_storage,
            file=file,
            priority=priority,
            user=user,
            params_factory=lambda path: LogoResizeParams(
                input_path=path,
                output_path=f"output/{PurePath(path).stem}_{width}x{height}.{fmt.extension}",
                width=width,
                height=height,
                format=fmt,
                quality=quality,
            ),
        )

    _ = create_logo_resize_job
    return router
