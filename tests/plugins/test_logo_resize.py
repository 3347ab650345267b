"""Unit and integration tests for the logo resize plugin.

Covers render planning, cover-then-crop resizing, encoding, the path-based
algorithm, params schema, task execution, routes and the full job lifecycle.
"""

import math
from fractions import Fraction
from io import BytesIO
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from bizlogo_tools.common.errors import InvalidTargetError, SourceDecodeError
from bizlogo_tools.common.schema_job_record import JobRecord, JobStatus
from bizlogo_tools.plugins.logo_resize.algo.fit_crop import (
    ImageFormat,
    RenderPlan,
    TargetSpec,
    check_target_dimensions,
    fit_crop,
    logo_resize,
    plan_fit_crop,
    resize_image,
)
from bizlogo_tools.plugins.logo_resize.schema import LogoResizeOutput, LogoResizeParams
from bizlogo_tools.plugins.logo_resize.task import LogoResizeTask

GREEN = (30, 200, 60)


def assert_color(img: Image.Image, xy: tuple[int, int], expected: tuple[int, int, int], tol: int = 3):
    actual = img.getpixel(xy)
    assert isinstance(actual, tuple)
    for a, e in zip(actual[:3], expected):
        assert abs(a - e) <= tol, f"pixel {xy} = {actual}, expected ~{expected}"


# ============================================================================
# ALGORITHM TESTS - Target validation
# ============================================================================


@pytest.mark.parametrize(
    "width,height",
    [
        (0, 100),
        (100, 0),
        (-1, 100),
        (100, float("nan")),
        (float("inf"), 100),
        (12.5, 100),
        (True, 100),
        ("100", 100),
        (None, 100),
    ],
)
def test_check_target_dimensions_rejects_invalid(width: object, height: object):
    with pytest.raises(InvalidTargetError):
        _ = check_target_dimensions(width, height)


def test_check_target_dimensions_accepts_integral_floats():
    assert check_target_dimensions(320.0, 100) == (320, 100)


def test_check_target_dimensions_keeps_large_ints_exact():
    assert check_target_dimensions(2**53 + 1, 10) == (2**53 + 1, 10)
    assert check_target_dimensions(np.int64(250), np.uint16(100)) == (250, 100)


@pytest.mark.parametrize("width", [Fraction(10**400, 3), Fraction(7, 2)])
def test_check_target_dimensions_rejects_unrepresentable(width: object):
    with pytest.raises(InvalidTargetError):
        _ = check_target_dimensions(width, 10)


def test_invalid_target_error_is_value_error():
    with pytest.raises(ValueError, match="positive integers"):
        _ = check_target_dimensions(0, 100)


def test_target_spec_of_raises_invalid_target():
    with pytest.raises(InvalidTargetError):
        _ = TargetSpec.of(0, 100)

    target = TargetSpec.of(250, 100, "JPG")
    assert target.format is ImageFormat.JPEG


# ============================================================================
# ALGORITHM TESTS - Render planning
# ============================================================================


def test_plan_wider_source_crops_horizontally():
    plan = plan_fit_crop(1000, 500, 800, 800)

    assert plan == RenderPlan(draw_width=1600, draw_height=800, offset_x=-400, offset_y=0)


def test_plan_taller_target_aspect_crops_vertically():
    plan = plan_fit_crop(400, 400, 250, 100)

    assert plan == RenderPlan(draw_width=250, draw_height=250, offset_x=0, offset_y=-75)


def test_plan_identity_target():
    plan = plan_fit_crop(300, 300, 300, 300)

    assert plan == RenderPlan(draw_width=300, draw_height=300, offset_x=0, offset_y=0)


def test_plan_equal_aspect_scales_without_crop():
    plan = plan_fit_crop(200, 100, 400, 200)

    assert plan.draw_width == 400
    assert plan.draw_height == 200
    assert plan.offset_x == 0
    assert plan.offset_y == 0


def test_plan_rejects_invalid_target_before_computing():
    with pytest.raises(InvalidTargetError):
        _ = plan_fit_crop(100, 100, 0, 100)


@pytest.mark.parametrize(
    "source,target",
    [
        ((1000, 500), (800, 800)),
        ((400, 400), (250, 100)),
        ((333, 777), (120, 60)),
        ((7, 3), (32, 32)),
        ((1024, 1024), (180, 180)),
        ((1920, 1080), (250, 100)),
        ((100, 1000), (320, 320)),
    ],
)
def test_plan_covers_target_and_preserves_aspect(
    source: tuple[int, int], target: tuple[int, int]
):
    (sw, sh), (tw, th) = source, target
    plan = plan_fit_crop(sw, sh, tw, th)

    # Uniform scale
    assert math.isclose(plan.draw_width / sw, plan.draw_height / sh, rel_tol=1e-9)

    # Full coverage, with one axis matching exactly
    assert plan.draw_width >= tw - 1e-9
    assert plan.draw_height >= th - 1e-9
    assert math.isclose(plan.draw_width, tw) or math.isclose(plan.draw_height, th)

    # Symmetric overflow on the cropped axis only
    assert plan.offset_x <= 0 and plan.offset_y <= 0
    assert math.isclose(2 * plan.offset_x + plan.draw_width, tw)
    assert math.isclose(2 * plan.offset_y + plan.draw_height, th)
    assert plan.offset_x == 0 or plan.offset_y == 0


# ============================================================================
# ALGORITHM TESTS - Fit and crop
# ============================================================================


@pytest.mark.parametrize(
    "width,height",
    [(800, 800), (320, 320), (180, 180), (250, 100), (120, 60), (32, 32), (1, 1), (999, 3)],
)
def test_fit_crop_output_has_exact_dimensions(square_logo: Image.Image, width: int, height: int):
    result = fit_crop(square_logo, width, height)

    assert result.size == (width, height)


def test_fit_crop_wide_source_keeps_horizontal_center(wide_logo: Image.Image):
    # 600x200 -> 100x100 keeps source columns 200..400 (the green band)
    result = fit_crop(wide_logo, 100, 100)

    for xy in [(50, 50), (5, 5), (94, 94), (10, 90)]:
        assert_color(result, xy, GREEN)


def test_fit_crop_tall_source_keeps_vertical_center(tall_logo: Image.Image):
    result = fit_crop(tall_logo, 100, 100)

    for xy in [(50, 50), (5, 5), (94, 94)]:
        assert_color(result, xy, GREEN)


def test_fit_crop_wide_target_crops_top_and_bottom():
    # 400x400 -> 250x100 keeps rows 120..280 of the source
    source = Image.new("RGB", (400, 400), (220, 30, 30))
    source.paste(GREEN, (0, 120, 400, 280))
    source.paste((30, 60, 220), (0, 280, 400, 400))

    result = fit_crop(source, 250, 100)

    assert result.size == (250, 100)
    for xy in [(125, 50), (0, 5), (249, 94)]:
        assert_color(result, xy, GREEN)


def test_fit_crop_never_leaves_transparent_border(wide_logo: Image.Image):
    for width, height in [(800, 800), (250, 100), (120, 60), (32, 32), (17, 91)]:
        result = fit_crop(wide_logo, width, height)
        alpha = np.asarray(result.getchannel("A"))
        assert alpha.min() == 255, f"transparent pixels at {width}x{height}"


def test_fit_crop_identity_is_pixel_exact():
    rng = np.random.default_rng(7)
    pixels = rng.integers(0, 256, size=(48, 64, 3), dtype=np.uint8)
    source = Image.fromarray(pixels)

    result = fit_crop(source, 64, 48)

    assert result is not source
    assert np.array_equal(np.asarray(result), pixels)


def test_fit_crop_converts_palette_images(square_logo: Image.Image):
    palette = square_logo.convert("RGB").convert("P")

    result = fit_crop(palette, 50, 20)

    assert result.mode == "RGB"
    assert result.size == (50, 20)


def test_fit_crop_rejects_invalid_target(square_logo: Image.Image):
    with pytest.raises(InvalidTargetError):
        _ = fit_crop(square_logo, 0, 100)


# ============================================================================
# ALGORITHM TESTS - Encoding
# ============================================================================


def test_resize_image_png_keeps_alpha(square_logo: Image.Image):
    output = resize_image(square_logo, TargetSpec(width=180, height=180))

    assert output.width == 180
    assert output.height == 180
    assert output.mime_type == "image/png"
    assert output.extension == "png"
    assert output.to_data_uri().startswith("data:image/png;base64,")

    with Image.open(BytesIO(output.data)) as img:
        assert img.format == "PNG"
        assert img.mode == "RGBA"
        assert img.size == (180, 180)


def test_resize_image_jpeg_flattens_alpha(square_logo: Image.Image):
    output = resize_image(square_logo, TargetSpec(width=250, height=100, format="jpeg"), quality=90)

    assert output.extension == "jpg"
    with Image.open(BytesIO(output.data)) as img:
        assert img.format == "JPEG"
        assert img.mode == "RGB"
        assert img.size == (250, 100)


def test_resize_image_webp(square_logo: Image.Image):
    output = resize_image(square_logo, TargetSpec(width=32, height=32, format=ImageFormat.WEBP))

    with Image.open(BytesIO(output.data)) as img:
        assert img.format == "WEBP"
        assert img.size == (32, 32)


def test_image_format_parse():
    assert ImageFormat.parse("JPG") is ImageFormat.JPEG
    assert ImageFormat.parse(".png") is ImageFormat.PNG
    assert ImageFormat.parse("tif") is ImageFormat.TIFF
    with pytest.raises(ValueError, match="Unsupported image format"):
        _ = ImageFormat.parse("svg")


# ============================================================================
# ALGORITHM TESTS - Path based resize
# ============================================================================


def test_logo_resize_writes_exact_size(logo_png_path: Path, temp_output_dir: Path):
    output_path = temp_output_dir / "header.png"

    result = logo_resize(input_path=logo_png_path, output_path=output_path, width=250, height=100)

    assert result == str(output_path)
    with Image.open(output_path) as img:
        assert img.size == (250, 100)
        assert img.format == "PNG"
    assert not list(temp_output_dir.glob(".*.tmp"))


def test_logo_resize_infers_format_from_suffix(logo_png_path: Path, temp_output_dir: Path):
    output_path = temp_output_dir / "social.jpg"

    _ = logo_resize(input_path=logo_png_path, output_path=output_path, width=320, height=320)

    with Image.open(output_path) as img:
        assert img.format == "JPEG"


def test_logo_resize_validates_target_before_decoding(temp_output_dir: Path):
    with pytest.raises(InvalidTargetError):
        _ = logo_resize(
            input_path="/nonexistent/logo.png",
            output_path=temp_output_dir / "out.png",
            width=0,
            height=100,
        )


def test_logo_resize_source_decode_failure_writes_nothing(tmp_path: Path, temp_output_dir: Path):
    bad_input = tmp_path / "not_an_image.png"
    _ = bad_input.write_bytes(b"definitely not a png")
    output_path = temp_output_dir / "out.png"

    with pytest.raises(SourceDecodeError):
        _ = logo_resize(input_path=bad_input, output_path=output_path, width=32, height=32)

    assert list(temp_output_dir.iterdir()) == []


def test_logo_resize_output_directory_not_found(logo_png_path: Path, tmp_path: Path):
    with pytest.raises(FileNotFoundError, match="Output directory does not exist"):
        _ = logo_resize(
            input_path=logo_png_path,
            output_path=tmp_path / "missing" / "out.png",
            width=32,
            height=32,
        )


# ============================================================================
# SCHEMA TESTS
# ============================================================================


def test_logo_resize_params_defaults():
    params = LogoResizeParams(
        input_path="input/logo.png",
        output_path="output/logo_32x32.png",
        width=32,
        height=32,
    )

    assert params.format is ImageFormat.PNG
    assert params.quality is None


def test_logo_resize_params_normalizes_format():
    params = LogoResizeParams(
        input_path="input/logo.png",
        output_path="output/logo.jpg",
        width=32,
        height=32,
        format="JPG",  # type: ignore[arg-type]
    )

    assert params.format is ImageFormat.JPEG


@pytest.mark.parametrize("field,value", [("width", 0), ("height", -5), ("quality", 101)])
def test_logo_resize_params_validation(field: str, value: int):
    data: dict[str, object] = {
        "input_path": "input/logo.png",
        "output_path": "output/out.png",
        "width": 32,
        "height": 32,
    }
    data[field] = value

    with pytest.raises(ValueError):
        _ = LogoResizeParams.model_validate(data)


# ============================================================================
# TASK TESTS
# ============================================================================


@pytest.mark.requires_libmagic
async def test_logo_resize_task_run_success(file_storage, logo_png_bytes: bytes):
    job_id = "test-job-resize"
    _ = await file_storage.save(job_id, "input/logo.png", logo_png_bytes)

    params = LogoResizeParams(
        input_path="input/logo.png",
        output_path="output/logo_250x100.png",
        width=250,
        height=100,
    )
    progress_values: list[int] = []

    output = await LogoResizeTask().run(job_id, params, file_storage, progress_values.append)

    assert isinstance(output, LogoResizeOutput)
    assert output.render_plan == plan_fit_crop(512, 512, 250, 100)
    assert 100 in progress_values

    output_file = file_storage.resolve_path(job_id, "output/logo_250x100.png")
    assert output_file.stat().st_size == output.size
    with Image.open(output_file) as img:
        assert img.size == (250, 100)


async def test_logo_resize_task_run_file_not_found(file_storage):
    params = LogoResizeParams(
        input_path="input/missing.png",
        output_path="output/out.png",
        width=32,
        height=32,
    )

    with pytest.raises(FileNotFoundError):
        _ = await LogoResizeTask().run("test-job-missing", params, file_storage)


@pytest.mark.requires_libmagic
async def test_logo_resize_task_rejects_non_image(file_storage):
    job_id = "test-job-text"
    _ = await file_storage.save(job_id, "input/notes.png", b"just some text, not pixels\n")
    params = LogoResizeParams(
        input_path="input/notes.png",
        output_path="output/out.png",
        width=32,
        height=32,
    )

    with pytest.raises(SourceDecodeError):
        _ = await LogoResizeTask().run(job_id, params, file_storage)

    assert not file_storage.resolve_path(job_id, "output/out.png").exists()


async def test_logo_resize_task_execute_reports_invalid_params(file_storage):
    record = JobRecord(
        job_id="test-job-invalid",
        task_type="logo_resize",
        params={
            "input_path": "input/logo.png",
            "output_path": "output/out.png",
            "width": 0,
            "height": 100,
        },
    )

    update = await LogoResizeTask().execute(record, file_storage)

    assert update.status == JobStatus.error
    assert update.error_message is not None
    assert "width" in update.error_message


# ============================================================================
# ROUTE TESTS
# ============================================================================


def test_logo_resize_route_creation(api_client):
    response = api_client.get("/openapi.json")
    assert response.status_code == 200

    assert "/jobs/logo_resize" in response.json()["paths"]


def test_logo_resize_route_job_submission(api_client, job_repository, logo_png_bytes: bytes):
    response = api_client.post(
        "/jobs/logo_resize",
        files={"file": ("brand logo.png", logo_png_bytes, "image/png")},
        data={"width": 250, "height": 100, "format": "jpg", "priority": 7},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "queued"
    assert data["task_type"] == "logo_resize"

    job = job_repository.get_job(data["job_id"])
    assert job is not None
    assert job.params["output_path"] == "output/brand logo_250x100.jpg"
    assert job.params["format"] == "jpeg"
    assert job_repository.priorities[data["job_id"]] == 7


def test_logo_resize_route_rejects_non_positive_width(api_client, logo_png_bytes: bytes):
    response = api_client.post(
        "/jobs/logo_resize",
        files={"file": ("logo.png", logo_png_bytes, "image/png")},
        data={"width": 0, "height": 100},
    )

    assert response.status_code == 422


# ============================================================================
# INTEGRATION TEST (API → Worker)
# ============================================================================


@pytest.mark.integration
@pytest.mark.requires_libmagic
async def test_logo_resize_full_job_lifecycle(
    api_client, worker, job_repository, file_storage, logo_png_bytes: bytes
):
    response = api_client.post(
        "/jobs/logo_resize",
        files={"file": ("logo.png", logo_png_bytes, "image/png")},
        data={"width": 120, "height": 60, "format": "png"},
    )
    assert response.status_code == 200
    job_id = response.json()["job_id"]

    processed = await worker.run_once()
    assert processed is True

    job = job_repository.get_job(job_id)
    assert job is not None
    assert job.status == JobStatus.completed
    assert job.progress == 100

    assert job.output is not None
    output = LogoResizeOutput.model_validate(job.output)
    assert (output.width, output.height) == (120, 60)

    with Image.open(file_storage.resolve_path(job_id, "output/logo_120x60.png")) as img:
        assert img.size == (120, 60)
