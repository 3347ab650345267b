"""Logo multi-size export plugin."""

from .schema import ExportedFile, LogoExportOutput, LogoExportParams
from .task import LogoExportTask

__all__ = ["LogoExportTask", "LogoExportParams", "LogoExportOutput", "ExportedFile"]
