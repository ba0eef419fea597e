"""
Pipeline models — per-run context, stage records and the run report.

StageRecord and PipelineReport play the part of receipts: one record per
executed stage, aggregated into a report the caller can print or dump.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Stage(str, Enum):
    """Pipeline stages, in execution order."""

    VALIDATE_MANIFEST_FORMAT = "ValidateManifestFormat"
    CREATE_OUTPUT_DIR = "CreateOutputDir"
    DOWNLOAD_ICONS = "DownloadIcons"
    COPY_DOCS = "CopyDocs"
    WRITE_TELEMETRY = "WriteTelemetry"
    MATERIALIZE_TEMPLATE = "MaterializeTemplate"
    PLACE_ICONS = "PlaceIcons"
    PATCH_STRINGS = "PatchStrings"
    PATCH_COLORS = "PatchColors"
    WRITE_MANIFEST = "WriteManifest"


class PipelineContext(BaseModel):
    """Directories of one pipeline run.

    All paths derive from ``output_root``. A context belongs to exactly
    one run and is never shared.
    """

    model_config = ConfigDict(frozen=True)

    output_root: Path
    source_dir: Path
    images_dir: Path
    resource_dir: Path
    assets_dir: Path

    @classmethod
    def from_root(cls, output_root: Path | str) -> PipelineContext:
        root = Path(output_root)
        source_dir = root / "source"
        main_dir = source_dir / "app" / "src" / "main"
        return cls(
            output_root=root,
            source_dir=source_dir,
            images_dir=root / "images",
            resource_dir=main_dir / "res",
            assets_dir=main_dir / "assets",
        )

    @property
    def manifest_path(self) -> Path:
        return self.assets_dir / "manifest.json"

    @property
    def strings_path(self) -> Path:
        return self.resource_dir / "values" / "strings.xml"

    @property
    def colors_path(self) -> Path:
        return self.resource_dir / "values" / "colors.xml"


class StageRecord(BaseModel):
    """Outcome of a single stage."""

    stage: Stage
    status: Literal["ok", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    detail: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


class PipelineReport(BaseModel):
    """Result of a pipeline run."""

    generator: str = ""
    output_root: str = ""
    records: list[StageRecord] = Field(default_factory=list)

    @property
    def stages(self) -> list[Stage]:
        return [r.stage for r in self.records]

    @property
    def failed(self) -> StageRecord | None:
        for record in self.records:
            if not record.ok:
                return record
        return None

    @property
    def status(self) -> str:
        return "failed" if self.failed else "ok"

    def to_dict(self) -> dict[str, Any]:
        return {
            "generator": self.generator,
            "output_root": self.output_root,
            "status": self.status,
            "stages": [r.model_dump(mode="json") for r in self.records],
        }
