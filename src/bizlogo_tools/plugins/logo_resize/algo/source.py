"""Decoding of source logos from bytes, files and data URIs."""

import asyncio
import base64
import binascii
import re
from io import BytesIO
from os import PathLike
from pathlib import Path

from PIL import Image, ImageOps

from ....common.errors import SourceDecodeError
from ....utils.media_types import get_extension_from_mime

ImageSource = bytes | bytearray | str | PathLike[str]

_DATA_URI_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(?:;[\w.+-]+=[^;,]*)*);base64,(?P<payload>.*)$",
    re.DOTALL | re.IGNORECASE,
)


def parse_data_uri(uri: str) -> tuple[str, bytes]:
    """Split ``data:<mime>;base64,<payload>`` into MIME type and raw bytes.

    A missing MIME type defaults to ``application/octet-stream``.

    Raises:
        SourceDecodeError: If the URI is not base64 data URI or the payload is corrupt
    """
    match = _DATA_URI_RE.match(uri.strip())
    if match is None:
        raise SourceDecodeError("Not a base64 data URI")

    mime_type = (match.group("mime") or "application/octet-stream").lower()
    payload = re.sub(r"\s+", "", match.group("payload"))
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SourceDecodeError(f"Corrupt base64 payload in data URI: {exc}") from exc

    return mime_type, data


def to_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def extension_from_data_uri(uri: str) -> str:
    """File extension for a data URI's MIME type, ``png`` when it has none."""
    match = _DATA_URI_RE.match(uri.strip())
    if match is None or not match.group("mime"):
        return "png"
    return get_extension_from_mime(match.group("mime"))


def _read_source_bytes(source: ImageSource) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)

    if isinstance(source, str) and source[:5].lower() == "data:":
        _, data = parse_data_uri(source)
        return data

    path = Path(source)
    try:
        return path.read_bytes()
    except (OSError, ValueError) as exc:
        # ValueError: paths the OS cannot represent, e.g. an embedded NUL
        raise SourceDecodeError(f"Cannot read source image {path!r}: {exc}") from exc


def decode_image(source: ImageSource) -> Image.Image:
    """
    Decode a source logo into a fully loaded Pillow image.

    Args:
        source: Raw encoded bytes, a ``data:`` URI, or a file path

    Returns:
        Decoded image with EXIF orientation applied and pixels loaded,
        independent of any open file handle

    Raises:
        SourceDecodeError: If the source cannot be read or is not a decodable image
    """
    data = _read_source_bytes(source)
    if not data:
        raise SourceDecodeError("Source image is empty")

    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            decoded = ImageOps.exif_transpose(img)
            if decoded is img:
                decoded = img.copy()
    except Image.DecompressionBombError as exc:
        raise SourceDecodeError(f"Source image is too large: {exc}") from exc
    except (OSError, EOFError, SyntaxError, ValueError) as exc:
        raise SourceDecodeError(f"Cannot decode source image: {exc}") from exc

    return decoded


async def load_source(source: ImageSource) -> Image.Image:
    """Decode ``source`` off the event loop.

    Cancelling the awaiting task abandons the decode with no side effects.
    """
    return await asyncio.to_thread(decode_image, source)
