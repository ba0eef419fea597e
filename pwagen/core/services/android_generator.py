"""
Android project generation — the pipeline orchestrator.

One AndroidGenerator per variant:

    basic      template copy only
    icons      + launcher icons remapped into mipmap-<density> (square keys)
    resources  + launcher/splash icons (exact "WxH" keys)
               + app_name / colorPrimary patched into the resource XML

Every variant runs the same ordered stages, minus the ones it does not
carry. The first failing stage aborts the run.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Any, Callable, Protocol

from pydantic import ValidationError

from pwagen.core.engine.runner import PipelineStep, run_pipeline
from pwagen.core.errors import (
    DirectoryCreationError,
    DocumentationError,
    DownloadError,
    GenerationError,
    IconPlacementError,
    InvalidConfigError,
    InvalidManifestFormatError,
    ManifestPersistError,
    TelemetryError,
    TemplateCopyError,
    XmlPatchError,
)
from pwagen.core.models.config import GeneratorConfig, Variant
from pwagen.core.models.manifest import IconRef, ManifestContent, ManifestDescriptor
from pwagen.core.models.pipeline import PipelineContext, PipelineReport, Stage, StageRecord
from pwagen.core.services.collaborators import (
    DocumentationCopier,
    FolderDocumentationCopier,
    GenerationInfoWriter,
    HttpIconDownloader,
    IconDownloader,
    JsonManifestWriter,
    ManifestWriter,
    TelemetryWriter,
)
from pwagen.core.services.colors import name_color
from pwagen.core.services.icons import (
    LAUNCHER_SPLASH_TABLE,
    LAUNCHER_TABLE,
    BucketTable,
    list_icon_references,
)
from pwagen.core.services.template_ops import (
    TEMPLATE_COPY_FAILED,
    bundled_template,
    materialize,
)
from pwagen.core.services.xml_resources import patch_element

logger = logging.getLogger(__name__)

PLATFORM_ID = "android"
PLATFORM_NAME = "Android"

GenerationCallback = Callable[[GenerationError | None, PipelineReport | None], Any]


class PlatformGenerator(Protocol):
    """What a platform generator offers to the host tooling."""

    name: str

    async def create(
        self,
        descriptor: ManifestDescriptor,
        output_root: Path | str,
        config: GeneratorConfig | dict | None = None,
    ) -> PipelineReport:
        ...

    async def create_with_callback(
        self,
        descriptor: ManifestDescriptor,
        output_root: Path | str,
        config: GeneratorConfig | dict | None,
        callback: GenerationCallback,
    ) -> None:
        ...

    def list_manifest_icons(self, manifest: ManifestContent) -> list[tuple[str, str]]:
        ...

    def resolve_manifest_icon(self, manifest: ManifestContent, size_key: str) -> IconRef | None:
        ...


# ── Variants ────────────────────────────────────────────────────


VARIANT_TABLES: dict[str, BucketTable] = {
    "basic": LAUNCHER_TABLE,
    "icons": LAUNCHER_TABLE,
    "resources": LAUNCHER_SPLASH_TABLE,
}

VARIANT_STAGES: dict[str, tuple[Stage, ...]] = {
    "basic": (
        Stage.CREATE_OUTPUT_DIR,
        Stage.DOWNLOAD_ICONS,
        Stage.COPY_DOCS,
        Stage.WRITE_TELEMETRY,
        Stage.MATERIALIZE_TEMPLATE,
        Stage.WRITE_MANIFEST,
    ),
    "icons": (
        Stage.CREATE_OUTPUT_DIR,
        Stage.DOWNLOAD_ICONS,
        Stage.COPY_DOCS,
        Stage.WRITE_TELEMETRY,
        Stage.MATERIALIZE_TEMPLATE,
        Stage.PLACE_ICONS,
        Stage.WRITE_MANIFEST,
    ),
    "resources": (
        Stage.CREATE_OUTPUT_DIR,
        Stage.DOWNLOAD_ICONS,
        Stage.COPY_DOCS,
        Stage.WRITE_TELEMETRY,
        Stage.MATERIALIZE_TEMPLATE,
        Stage.PLACE_ICONS,
        Stage.PATCH_STRINGS,
        Stage.PATCH_COLORS,
        Stage.WRITE_MANIFEST,
    ),
}


def _coerce_config(config: GeneratorConfig | dict | None, variant: Variant) -> GeneratorConfig:
    if isinstance(config, GeneratorConfig):
        if config.variant == variant:
            return config
        return config.model_copy(update={"variant": variant})
    data = dict(config or {})
    data["variant"] = variant
    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as e:
        raise InvalidConfigError("The generator configuration is not valid.", e) from e


def place_icons(images_dir: Path, resource_dir: Path, table: BucketTable) -> int:
    """Copy downloaded icons into their resource buckets.

    Files whose stem is not a bucket key are skipped. A missing
    ``images_dir`` means nothing was downloaded.

    Returns:
        Number of icons placed.
    """
    try:
        files = sorted(p for p in images_dir.iterdir() if p.is_file())
    except FileNotFoundError:
        logger.debug("No images folder at %s, no icons to place", images_dir)
        return 0

    placed = 0
    for file in files:
        bucket = table.lookup(file.stem)
        if bucket is None:
            logger.debug("Skipping %s (no matching bucket)", file.name)
            continue
        target = resource_dir / bucket.folder / bucket.file_name
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(file, target)
        placed += 1
    return placed


# ── Generator ───────────────────────────────────────────────────


class AndroidGenerator:
    """Generate an Android WebView project from a web app manifest.

    Collaborators left as ``None`` are built from the run's config when
    ``create`` is called.
    """

    def __init__(
        self,
        variant: Variant = "resources",
        *,
        downloader: IconDownloader | None = None,
        docs_copier: DocumentationCopier | None = None,
        telemetry: TelemetryWriter | None = None,
        manifest_writer: ManifestWriter | None = None,
    ):
        if variant not in VARIANT_STAGES:
            raise ValueError(f"Unknown generator variant: {variant!r}")
        self.variant: Variant = variant
        self.name = f"{PLATFORM_ID}-{variant}"
        self.table = VARIANT_TABLES[variant]
        self.stages = VARIANT_STAGES[variant]
        self._downloader = downloader
        self._docs_copier = docs_copier
        self._telemetry = telemetry
        self._manifest_writer = manifest_writer

    def __repr__(self) -> str:
        return f"<AndroidGenerator variant={self.variant!r}>"

    # ── Icons ───────────────────────────────────────────────────

    def list_manifest_icons(self, manifest: ManifestContent) -> list[tuple[str, str]]:
        """``(file_name, url)`` of every icon this variant would download."""
        return list_icon_references(manifest, self.table)

    def resolve_manifest_icon(self, manifest: ManifestContent, size_key: str) -> IconRef | None:
        return self.table.resolve(manifest.icons, size_key)

    # ── Entry points ────────────────────────────────────────────

    def validate_manifest(self, descriptor: ManifestDescriptor) -> None:
        if not descriptor.is_base_format:
            raise InvalidManifestFormatError(
                f"The '{descriptor.format}' manifest format is not valid for this platform.",
                stage=Stage.VALIDATE_MANIFEST_FORMAT,
            )

    async def create(
        self,
        descriptor: ManifestDescriptor,
        output_root: Path | str,
        config: GeneratorConfig | dict | None = None,
    ) -> PipelineReport:
        """Run the pipeline.

        Returns:
            PipelineReport with one record per executed stage.

        Raises:
            GenerationError: The first failing stage, with ``stage`` and
                ``cause`` set.
        """
        self.validate_manifest(descriptor)
        cfg = _coerce_config(config, self.variant)
        ctx = PipelineContext.from_root(output_root)
        report = PipelineReport(generator=self.name, output_root=str(ctx.output_root))
        report.records.append(StageRecord(stage=Stage.VALIDATE_MANIFEST_FORMAT))

        logger.info("Generating the %s app (%s) in %s", PLATFORM_NAME, self.variant, ctx.output_root)
        steps = self.build_steps(descriptor, cfg)
        return await run_pipeline(steps, ctx, report)

    async def create_with_callback(
        self,
        descriptor: ManifestDescriptor,
        output_root: Path | str,
        config: GeneratorConfig | dict | None,
        callback: GenerationCallback,
    ) -> None:
        """Callback flavour of :meth:`create`; ``callback(error, report)`` runs once."""
        try:
            report = await self.create(descriptor, output_root, config)
        except GenerationError as e:
            callback(e, None)
            return
        callback(None, report)

    # ── Steps ───────────────────────────────────────────────────

    def build_steps(self, descriptor: ManifestDescriptor, cfg: GeneratorConfig) -> list[PipelineStep]:
        """The variant's stages, bound to this run's manifest and config."""
        content = descriptor.content
        downloader = self._downloader or HttpIconDownloader(
            self.list_manifest_icons, timeout=cfg.request_timeout, base_dir=descriptor.base_dir
        )
        docs_copier = self._docs_copier or FolderDocumentationCopier(
            Path(cfg.docs_dir) if cfg.docs_dir else bundled_template("docs")
        )
        telemetry = self._telemetry or GenerationInfoWriter(cfg.generated_from)
        manifest_writer = self._manifest_writer or JsonManifestWriter()
        template_dir = Path(cfg.template_dir) if cfg.template_dir else bundled_template(PLATFORM_ID)
        template_mode = cfg.effective_template_mode()
        table = self.table

        async def create_output_dir(ctx: PipelineContext) -> str:
            logger.debug("Creating the %s app folder...", PLATFORM_NAME)
            await asyncio.to_thread(ctx.output_root.mkdir, parents=True, exist_ok=True)
            return str(ctx.output_root)

        async def download_icons(ctx: PipelineContext) -> str | None:
            if not cfg.download_icons:
                return "skipped"
            await downloader.download_icons(content, content.start_url, ctx.images_dir)
            return None

        async def copy_docs(ctx: PipelineContext) -> None:
            await docs_copier.copy_documentation(ctx.output_root)

        async def write_telemetry(ctx: PipelineContext) -> None:
            await telemetry.write_generation_info(descriptor, ctx.output_root)

        async def materialize_template(ctx: PipelineContext) -> str:
            written = await materialize(template_dir, ctx.source_dir, template_mode)
            return f"{len(written)} file(s)"

        async def place(ctx: PipelineContext) -> str:
            placed = await asyncio.to_thread(place_icons, ctx.images_dir, ctx.resource_dir, table)
            logger.info(
                "Placed %d icon(s) into %s", placed, ctx.resource_dir,
                extra={"stage": Stage.PLACE_ICONS.value},
            )
            return f"{placed} icon(s)"

        async def patch_strings(ctx: PipelineContext) -> str:
            matched = await patch_element(
                ctx.strings_path, "string", "name", "app_name", content.display_name
            )
            return f"{matched} element(s)"

        async def patch_colors(ctx: PipelineContext) -> str:
            color = name_color([content.theme_color, content.background_color])
            matched = await patch_element(
                ctx.colors_path, "color", "name", "colorPrimary", color
            )
            return f"{matched} element(s)"

        async def write_manifest(ctx: PipelineContext) -> str:
            logger.debug("Copying the %s manifest to the app folder...", PLATFORM_NAME)
            await asyncio.to_thread(ctx.assets_dir.mkdir, parents=True, exist_ok=True)
            await manifest_writer.write_manifest(descriptor, ctx.manifest_path)
            return str(ctx.manifest_path)

        available = {
            Stage.CREATE_OUTPUT_DIR: PipelineStep(
                Stage.CREATE_OUTPUT_DIR, create_output_dir, DirectoryCreationError,
                f"Failed to create the {PLATFORM_NAME} app folder.",
            ),
            Stage.DOWNLOAD_ICONS: PipelineStep(
                Stage.DOWNLOAD_ICONS, download_icons, DownloadError,
                "Failed to download the manifest icons.",
            ),
            Stage.COPY_DOCS: PipelineStep(
                Stage.COPY_DOCS, copy_docs, DocumentationError,
                "Failed to copy the documentation.",
            ),
            Stage.WRITE_TELEMETRY: PipelineStep(
                Stage.WRITE_TELEMETRY, write_telemetry, TelemetryError,
                "Failed to write the generation info.",
            ),
            Stage.MATERIALIZE_TEMPLATE: PipelineStep(
                Stage.MATERIALIZE_TEMPLATE, materialize_template, TemplateCopyError,
                TEMPLATE_COPY_FAILED,
            ),
            Stage.PLACE_ICONS: PipelineStep(
                Stage.PLACE_ICONS, place, IconPlacementError,
                "Failed to copy the icons to the resource folders.",
            ),
            Stage.PATCH_STRINGS: PipelineStep(
                Stage.PATCH_STRINGS, patch_strings, XmlPatchError,
                "Failed to update the strings.xml resource file.",
            ),
            Stage.PATCH_COLORS: PipelineStep(
                Stage.PATCH_COLORS, patch_colors, XmlPatchError,
                "Failed to update the colors.xml resource file.",
            ),
            Stage.WRITE_MANIFEST: PipelineStep(
                Stage.WRITE_MANIFEST, write_manifest, ManifestPersistError,
                f"Failed to copy the {PLATFORM_NAME} manifest to the app folder.",
            ),
        }
        return [available[stage] for stage in self.stages]


# ── Registry & sync entry ───────────────────────────────────────


def get_generator(variant: Variant = "resources", **collaborators: Any) -> AndroidGenerator:
    """Build the generator for a variant."""
    return AndroidGenerator(variant, **collaborators)


def run_generation(
    descriptor: ManifestDescriptor,
    output_root: Path | str,
    config: GeneratorConfig | None = None,
    **collaborators: Any,
) -> PipelineReport:
    """Blocking wrapper around :meth:`AndroidGenerator.create` for the CLI."""
    cfg = config or GeneratorConfig()
    generator = get_generator(cfg.variant, **collaborators)
    return asyncio.run(generator.create(descriptor, output_root, cfg))
