"""Logo export task implementation."""

import asyncio
from io import BytesIO
from pathlib import PurePosixPath
from typing import Callable

from typing_extensions import override

from ...common.compute_module import ComputeModule
from ...common.errors import SourceDecodeError
from ...common.job_storage import JobStorage
from ...utils.media_types import MediaType, determine_mime
from ..logo_resize.algo.source import load_source
from .algo.export import brand_slug, export_presets
from .algo.presets import resolve_presets
from .schema import ExportedFile, LogoExportOutput, LogoExportParams


class LogoExportTask(ComputeModule[LogoExportParams, LogoExportOutput]):
    """Compute module for exporting a logo at every requested preset size."""

    schema: type[LogoExportParams] = LogoExportParams

    @property
    @override
    def task_type(self) -> str:
        return "logo_export"

    @override
    async def run(
        self,
        job_id: str,
        params: LogoExportParams,
        storage: JobStorage,
        progress_callback: Callable[[int], None] | None = None,
    ) -> LogoExportOutput:
        presets = resolve_presets(params.presets)

        input_path = storage.resolve_path(job_id, params.input_path)
        if not input_path.exists():
            raise FileNotFoundError("Input file not found: " + str(input_path))

        data = input_path.read_bytes()
        if determine_mime(BytesIO(data)) != MediaType.IMAGE:
            raise SourceDecodeError("Uploaded file is not an image: " + input_path.name)

        image = await load_source(data)
        exported = await asyncio.to_thread(
            export_presets, image, params.brand_name, presets, params.quality
        )

        files: list[ExportedFile] = []
        attempted: list[str] = []
        try:
            for index, item in enumerate(exported):
                relative_path = str(PurePosixPath(params.output_path) / item.filename)
                attempted.append(relative_path)
                saved = await storage.save(job_id, relative_path, item.image.data)
                files.append(
                    ExportedFile(
                        preset=item.preset.name,
                        filename=item.filename,
                        relative_path=saved.relative_path,
                        width=item.image.width,
                        height=item.image.height,
                        format=item.image.format,
                        size=saved.size,
                    )
                )

                if progress_callback:
                    progress_callback(int((index + 1) / len(exported) * 100))
        except BaseException:
            # Either every preset is exported or none is left behind
            for relative_path in attempted:
                storage.resolve_path(job_id, relative_path).unlink(missing_ok=True)
            raise

        return LogoExportOutput(brand_name=brand_slug(params.brand_name), files=files)
