from enum import StrEnum
from io import BytesIO

_MIME_EXTENSIONS: dict[str, str] = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/bmp": "bmp",
    "image/tiff": "tiff",
    "image/svg+xml": "svg",
}


class MediaType(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    FILE = "file"

    @classmethod
    def from_mime(cls, file_type: str) -> "MediaType":
        if file_type.startswith("image"):
            return MediaType.IMAGE
        elif file_type.startswith("video"):
            return MediaType.VIDEO
        elif file_type.startswith("audio"):
            return MediaType.AUDIO
        elif file_type.startswith("text"):
            return MediaType.TEXT
        else:
            return MediaType.FILE


def detect_mime(data: bytes) -> str:
    import magic  # needs the libmagic system library

    mime = magic.Magic(mime=True)
    return mime.from_buffer(data) or "application/octet-stream"


def determine_mime(bytes_io: BytesIO, file_type: str | None = None) -> MediaType:
    if not file_type:
        _ = bytes_io.seek(0)
        file_type = detect_mime(bytes_io.getvalue())
    return MediaType.from_mime(file_type)


def get_extension_from_mime(mime_type: str) -> str:
    """Extension for an image MIME type; unknown subtypes fall back to the subtype."""
    mime_type = mime_type.split(";", 1)[0].strip().lower()
    if mime_type in _MIME_EXTENSIONS:
        return _MIME_EXTENSIONS[mime_type]
    _, _, subtype = mime_type.partition("/")
    return subtype or "png"
