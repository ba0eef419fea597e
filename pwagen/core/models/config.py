"""
Generator configuration — options recognized by the Android generators.

Loaded from pwagen.yml or built from a plain dict. Options a generator
does not know about are ignored.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

Variant = Literal["basic", "icons", "resources"]
TemplateMode = Literal["copy", "sync"]

VARIANTS: tuple[str, ...] = ("basic", "icons", "resources")


class GeneratorConfig(BaseModel):
    """Options for one generation run.

    Attributes:
        variant:          Which generator variant to run.
        template_dir:     Project template to materialize (default: bundled).
        template_mode:    ``copy`` or ``sync``; ``None`` picks the variant default.
        docs_dir:         Documentation folder copied next to the project.
        download_icons:   Whether to fetch manifest icons at all.
        request_timeout:  Per-icon HTTP timeout, in seconds.
        generated_from:   Origin recorded in generationInfo.json.
    """

    model_config = ConfigDict(extra="ignore")

    variant: Variant = "resources"
    template_dir: str | None = None
    template_mode: TemplateMode | None = None
    docs_dir: str | None = None
    download_icons: bool = True
    request_timeout: float = 30.0
    generated_from: str = "CLI"

    def effective_template_mode(self) -> TemplateMode:
        if self.template_mode:
            return self.template_mode
        return "sync" if self.variant == "resources" else "copy"
