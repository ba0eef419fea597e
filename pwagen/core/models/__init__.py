"""
Domain models — Pydantic types for the generator.

All models are re-exported here for convenient access:

    from pwagen.core.models import ManifestDescriptor, PipelineContext, Stage
"""

from pwagen.core.models.config import VARIANTS, GeneratorConfig, TemplateMode, Variant
from pwagen.core.models.manifest import (
    BASE_MANIFEST_FORMAT,
    IconRef,
    ManifestContent,
    ManifestDescriptor,
)
from pwagen.core.models.pipeline import (
    PipelineContext,
    PipelineReport,
    Stage,
    StageRecord,
)

__all__ = [
    # config.py
    "GeneratorConfig",
    "TemplateMode",
    "VARIANTS",
    "Variant",
    # manifest.py
    "BASE_MANIFEST_FORMAT",
    "IconRef",
    "ManifestContent",
    "ManifestDescriptor",
    # pipeline.py
    "PipelineContext",
    "PipelineReport",
    "Stage",
    "StageRecord",
]
