"""Exception hierarchy for logo resize and export."""


class BizlogoError(Exception):
    """Base class for all bizlogo_tools errors."""


class InvalidTargetError(BizlogoError, ValueError):
    """Target width/height is non-positive, non-finite or not an integer."""

    def __init__(self, width: object, height: object):
        self.width: object = width
        self.height: object = height
        super().__init__(
            f"Invalid target dimensions {width!r}x{height!r}: "
            + "width and height must be positive integers"
        )


class SourceDecodeError(BizlogoError):
    """Source image could not be read or decoded."""


class UnknownPresetError(BizlogoError, KeyError):
    def __init__(self, name: str):
        self.name: str = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unknown export preset: {self.name!r}"
