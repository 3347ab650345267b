"""Logo export route factory."""

from typing import Annotated, Callable

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from ...common.errors import UnknownPresetError
from ...common.job_creator import create_job_from_upload
from ...common.job_repository import JobRepository
from ...common.job_storage import JobStorage
from ...common.schema_job_record import JobCreatedResponse
from ...common.user import UserLike
from .algo.presets import DEFAULT_PRESETS, Preset, resolve_presets
from .schema import LogoExportParams


def create_router(
    repository: JobRepository,
    file_storage: JobStorage,
    get_current_user: Callable[[], UserLike | None],
) -> APIRouter:
    router = APIRouter()

    @router.get("/presets/logo_export", response_model=list[Preset])
    async def list_export_presets() -> list[Preset]:
        """Preset menu offered for multi-size export."""
        return list(DEFAULT_PRESETS)

    @router.post("/jobs/logo_export", response_model=JobCreatedResponse)
    async def create_logo_export_job(
        file: Annotated[UploadFile, File(description="Logo image to export")],
        brand_name: Annotated[str, Form(max_length=50, description="Brand name for filenames")] = "",
        presets: Annotated[
            str, Form(description="Comma separated preset names; empty exports all")
        ] = "",
        quality: Annotated[int | None, Form(ge=1, le=100, description="Output quality (1-100)")] = None,
        priority: Annotated[int, Form(ge=0, le=10, description="Job priority (0-10)")] = 5,
        user: Annotated[UserLike | None, Depends(get_current_user)] = None,
    ) -> JobCreatedResponse:
        names = [name.strip() for name in presets.split(",") if name.strip()]
        try:
            selected = list(dict.fromkeys(preset.name for preset in resolve_presets(names)))
        except UnknownPresetError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

        return await create_job_from_upload(
            task_type="logo_export",
            repository=repository,
            file_storage=file_storage,
            file=file,
            priority=priority,
            user=user,
            params_factory=lambda path: LogoExportParams(
                input_path=path,
                output_path="output",
                brand_name=brand_name,
                presets=selected,
                quality=quality,
            ),
        )

    _ = (list_export_presets, create_logo_export_job)
    return router
