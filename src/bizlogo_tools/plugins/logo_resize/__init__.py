"""Logo resize plugin."""

from .schema import LogoResizeOutput, LogoResizeParams
from .task import LogoResizeTask

__all__ = ["LogoResizeTask", "LogoResizeParams", "LogoResizeOutput"]
