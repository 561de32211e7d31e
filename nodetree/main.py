"""
nodetree — CLI entrypoint.

Usage:
    python -m nodetree.main --help
    python -m nodetree.main module show users profile
    python -m nodetree.main module populate users profile --stage dev --region us-east-1
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from nodetree import __version__
from nodetree.core.config.loader import ConfigError, find_project_root, load_settings
from nodetree.core.observability.logging_config import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="nodetree")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--project",
    "-p",
    "project_path",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project root containing s-project.json (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    project_path: Path | None,
) -> None:
    """nodetree — manage module and function descriptors of a project."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet

    root = project_path.resolve() if project_path else find_project_root()
    ctx.obj["project_root"] = root

    try:
        settings = load_settings(root)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)
    ctx.obj["settings"] = settings

    if debug:
        flag_level = "DEBUG"
    elif verbose:
        flag_level = "INFO"
    elif quiet:
        flag_level = "ERROR"
    else:
        flag_level = None

    setup_logging(level=resolve_level(flag_level, settings.log_level))


def _context(ctx: click.Context):
    from nodetree.core.use_cases.modules import project_context

    try:
        return project_context(ctx.obj.get("project_root"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


def _fail(error: str) -> None:
    click.secho(f"❌ {error}", fg="red")
    sys.exit(1)


@cli.group()
def module() -> None:
    """Module commands."""


@module.command("show")
@click.argument("component")
@click.argument("module_name", metavar="MODULE")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def module_show(ctx: click.Context, component: str, module_name: str, as_json: bool) -> None:
    """Load a module and print its descriptor."""
    from nodetree.core.use_cases.modules import show_module

    result = show_module(_context(ctx), component, module_name)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        _fail(result.error)

    data = result.data
    assert data is not None  # guaranteed after error check above

    click.secho(f"\n📦 {result.spath}", fg="cyan", bold=True)
    if not ctx.obj.get("quiet"):
        click.echo(f"   {data.get('description', '')}")
        click.echo(f"   version {data.get('version')} · runtime {data.get('runtime')}")
        click.echo(f"   → {result.path}")
    click.echo()
    click.secho(f"   Functions: {len(result.functions)}", fg="white", bold=True)
    for name in result.functions:
        fn = data["functions"][name]
        click.echo(f"     • {name}  ({fn.get('handler', '')})")
    click.echo()


@module.command("populate")
@click.argument("component")
@click.argument("module_name", metavar="MODULE")
@click.option("--stage", "-s", default=None, help="Target stage (default: from nodetree.yml).")
@click.option("--region", "-r", default=None, help="Target region (default: from nodetree.yml).")
@click.pass_context
def module_populate(
    ctx: click.Context,
    component: str,
    module_name: str,
    stage: str | None,
    region: str | None,
) -> None:
    """Print a module with templates and variables resolved."""
    from nodetree.core.use_cases.modules import populate_module

    settings = ctx.obj["settings"]
    result = populate_module(
        _context(ctx),
        component,
        module_name,
        stage=stage or settings.stage,
        region=region or settings.region,
    )

    if result.error:
        _fail(result.error)

    click.echo(json.dumps(result.data, indent=2))


@module.command("create")
@click.argument("component")
@click.argument("module_name", metavar="MODULE")
@click.option("--runtime", default=None, help="Runtime for the module.")
@click.option("--description", default=None, help="Module description.")
@click.option("--function", "-f", "functions", multiple=True, help="Scaffold a function too.")
@click.pass_context
def module_create(
    ctx: click.Context,
    component: str,
    module_name: str,
    runtime: str | None,
    description: str | None,
    functions: tuple[str, ...],
) -> None:
    """Scaffold a new module in the project."""
    from nodetree.core.use_cases.modules import create_module

    overrides = {}
    if runtime:
        overrides["runtime"] = runtime
    if description:
        overrides["description"] = description

    result = create_module(_context(ctx), component, module_name, overrides, list(functions))

    if result.error:
        _fail(result.error)

    click.secho(f"✅ Created module {result.spath}", fg="green", bold=True)
    for name in result.functions:
        click.echo(f"   • {name}")


@module.command("templates")
@click.argument("component")
@click.argument("module_name", metavar="MODULE")
@click.pass_context
def module_templates_cmd(ctx: click.Context, component: str, module_name: str) -> None:
    """Print the module's s-templates.json."""
    from nodetree.core.use_cases.modules import module_templates

    result = module_templates(_context(ctx), component, module_name)

    if result.error:
        _fail(result.error)

    click.echo(json.dumps(result.data, indent=2))


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
