"""Logo resize task implementation."""

import asyncio
from io import BytesIO
from typing import Callable

from typing_extensions import override

from ...common.compute_module import ComputeModule
from ...common.errors import SourceDecodeError
from ...common.job_storage import JobStorage
from ...utils.media_types import MediaType, determine_mime
from .algo.fit_crop import TargetSpec, plan_fit_crop, resize_image
from .algo.source import load_source
from .schema import LogoResizeOutput, LogoResizeParams


class LogoResizeTask(ComputeModule[LogoResizeParams, LogoResizeOutput]):
    """Compute module for resizing one logo to exact dimensions."""

    schema: type[LogoResizeParams] = LogoResizeParams

    @property
    @override
    def task_type(self) -> str:
        return "logo_resize"

    @override
    async def run(
        self,
        job_id: str,
        params: LogoResizeParams,
        storage: JobStorage,
        progress_callback: Callable[[int], None] | None = None,
    ) -> LogoResizeOutput:
        target = TargetSpec.of(params.width, params.height, params.format)

        input_path = storage.resolve_path(job_id, params.input_path)
        if not input_path.exists():
            raise FileNotFoundError("Input file not found: " + str(input_path))

        data = input_path.read_bytes()
        if determine_mime(BytesIO(data)) != MediaType.IMAGE:
            raise SourceDecodeError("Uploaded file is not an image: " + input_path.name)

        image = await load_source(data)
        output = await asyncio.to_thread(resize_image, image, target, params.quality)

        # Encoded fully in memory above; storage only ever sees a complete image
        saved = await storage.save(job_id, params.output_path, output.data)

        if progress_callback:
            progress_callback(100)

        return LogoResizeOutput(
            width=output.width,
            height=output.height,
            format=output.format,
            render_plan=plan_fit_crop(*image.size, target.width, target.height),
            size=saved.size,
        )
