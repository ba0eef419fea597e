"""
pwagen — CLI entrypoint.

Usage:
    python -m pwagen.main --help
    pwagen generate manifest.json out/
    pwagen icons manifest.json --variant icons
    pwagen config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from pwagen import __version__
from pwagen.core.observability.logging_config import configure_cli_logging


@click.group()
@click.version_option(version=__version__, prog_name="pwagen")
@click.option("--verbose", "-v", is_flag=True, help="Show stage progress.")
@click.option("--quiet", "-q", is_flag=True, help="Only report errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to pwagen.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """pwagen — generate native Android projects from web app manifests."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    configure_cli_logging(verbose, quiet, debug)


@cli.group()
def config() -> None:
    """Generator configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate pwagen.yml and show the effective options."""
    from pwagen.core.config.loader import ConfigError, load_config

    try:
        cfg = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"valid": False, "error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({"valid": True, "config": cfg.model_dump()}, indent=2))
        return

    click.secho("✅ Configuration is valid", fg="green")
    for key, value in cfg.model_dump().items():
        click.echo(f"   {key}: {value}")


# ── Register commands from pwagen/ui/cli/ ───────────────────────

from pwagen.ui.cli.android import generate, icons, variants  # noqa: E402

cli.add_command(generate)
cli.add_command(icons)
cli.add_command(variants)


if __name__ == "__main__":
    cli()
