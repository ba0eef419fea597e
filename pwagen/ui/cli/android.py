"""
CLI commands for Android project generation.

Thin wrappers over ``pwagen.core.services.android_generator``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from pwagen.core.models.config import VARIANTS

_VARIANT_CHOICE = click.Choice(list(VARIANTS))


def _load_manifest_or_exit(manifest_file: str):
    from pwagen.core.config.loader import ConfigError, load_manifest

    try:
        return load_manifest(Path(manifest_file))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


@click.command()
@click.argument("manifest_file", type=click.Path(exists=False))
@click.argument("output_dir", type=click.Path(file_okay=False))
@click.option("--variant", type=_VARIANT_CHOICE, default=None, help="Generator variant.")
@click.option("--template", "template_dir", default=None, help="Project template folder.")
@click.option("--no-download", is_flag=True, help="Do not download manifest icons.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def generate(
    ctx: click.Context,
    manifest_file: str,
    output_dir: str,
    variant: str | None,
    template_dir: str | None,
    no_download: bool,
    as_json: bool,
) -> None:
    """Generate an Android project from MANIFEST_FILE into OUTPUT_DIR."""
    from pwagen.core.config.loader import ConfigError, load_config
    from pwagen.core.errors import GenerationError
    from pwagen.core.services.android_generator import run_generation

    try:
        cfg = load_config(
            ctx.obj.get("config_path"),
            overrides={
                "variant": variant,
                "template_dir": template_dir,
                "download_icons": False if no_download else None,
            },
        )
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    descriptor = _load_manifest_or_exit(manifest_file)

    try:
        report = run_generation(descriptor, Path(output_dir), cfg)
    except GenerationError as e:
        if as_json:
            click.echo(json.dumps({"status": "failed", **e.to_dict()}, indent=2))
        else:
            stage = e.stage.value if e.stage else "?"
            click.secho(f"❌ [{stage}] {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    if not ctx.obj.get("quiet"):
        click.secho(f"📱 {report.generator}", fg="cyan", bold=True)
        for record in report.records:
            detail = f"  {record.detail}" if record.detail else ""
            click.echo(f"   ✓ {record.stage.value}{detail}")
    click.secho(f"✅ Project generated in {report.output_root}", fg="green")


@click.command()
@click.argument("manifest_file", type=click.Path(exists=False))
@click.option("--variant", type=_VARIANT_CHOICE, default="resources", help="Generator variant.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def icons(manifest_file: str, variant: str, as_json: bool) -> None:
    """List the manifest icons a variant would download."""
    from pwagen.core.services.android_generator import get_generator

    descriptor = _load_manifest_or_exit(manifest_file)
    generator = get_generator(variant)
    references = generator.list_manifest_icons(descriptor.content)

    if as_json:
        click.echo(json.dumps([{"fileName": f, "url": u} for f, u in references], indent=2))
        return

    if not references:
        click.secho("No matching icons in the manifest.", fg="yellow")
        return

    click.secho(f"🖼  Icons ({len(references)}):", fg="cyan", bold=True)
    for file_name, url in references:
        bucket = generator.table.lookup(file_name.rsplit(".", 1)[0])
        slot = f"{bucket.folder}/{bucket.file_name}" if bucket else "?"
        click.echo(f"   {file_name:<14} {slot:<28} {url}")


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def variants(as_json: bool) -> None:
    """List generator variants and the stages they run."""
    from pwagen.core.services.android_generator import VARIANT_STAGES, VARIANT_TABLES

    if as_json:
        payload = {
            name: {
                "match_mode": VARIANT_TABLES[name].mode,
                "stages": [s.value for s in stages],
            }
            for name, stages in VARIANT_STAGES.items()
        }
        click.echo(json.dumps(payload, indent=2))
        return

    for name, stages in VARIANT_STAGES.items():
        click.secho(f"• {name}", fg="cyan", bold=True, nl=False)
        click.echo(f"  ({VARIANT_TABLES[name].mode} matching)")
        click.echo(f"   {' → '.join(s.value for s in stages)}")
