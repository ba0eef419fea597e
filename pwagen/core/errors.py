"""
Generation errors — one class per pipeline stage family.

Every error carries the failing stage (filled in by the runner when the
raising code does not know it) and the underlying exception as ``cause``.
The cause is also chained through ``raise ... from`` so tracebacks show
the root failure.
"""

from __future__ import annotations

from pwagen.core.models.pipeline import Stage


class GenerationError(Exception):
    """Base class for all pipeline failures."""

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        stage: Stage | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.stage = stage

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "stage": self.stage.value if self.stage else None,
            "cause": repr(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} ({self.cause})"
        return self.message


class InvalidManifestFormatError(GenerationError):
    """The manifest descriptor is not in the canonical format."""


class InvalidConfigError(GenerationError):
    """The generator options do not validate."""


class DirectoryCreationError(GenerationError):
    """The output directory tree could not be created."""


class DownloadError(GenerationError):
    """The icon downloader failed."""


class DocumentationError(GenerationError):
    """The documentation copier failed."""


class TelemetryError(GenerationError):
    """Writing generation info failed."""


class TemplateCopyError(GenerationError):
    """The project template could not be materialized."""


class IconPlacementError(GenerationError):
    """Downloaded icons could not be copied into their resource buckets."""


class XmlPatchError(GenerationError):
    """A resource XML file could not be parsed or rewritten."""

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        stage: Stage | None = None,
        path: str | None = None,
    ):
        super().__init__(message, cause, stage)
        self.path = path


class ManifestPersistError(GenerationError):
    """The manifest could not be written into the project."""
