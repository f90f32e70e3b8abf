"""kitn-registry CLI — build, validate and stage the component registry."""

import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from kitn_registry import __version__
from kitn_registry.errors import ComponentsDirError, ConfigError

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

EXIT_FAILED = 1
EXIT_FATAL = 2


def _fatal(message: str):
    err_console.print(f"[red]Error:[/] {escape(message)}")
    sys.exit(EXIT_FATAL)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--root",
    default=".",
    envvar="KITN_REGISTRY_ROOT",
    type=click.Path(file_okay=False),
    help="Registry root containing the components directory",
)
@click.option(
    "--log-level",
    default="warning",
    type=click.Choice(["error", "warning", "info", "debug"]),
    help="Logging verbosity",
)
@click.pass_context
def main(ctx, root: str, log_level: str):
    """kitn registry tooling.

    Bundles component manifests into static registry JSON and checks that
    every import still resolves once components are installed into a
    consumer project.
    """
    from kitn_registry.config import load_config
    from kitn_registry.utils.logging import setup_logging

    setup_logging(log_level)
    try:
        ctx.obj = load_config(root)
    except ConfigError as e:
        _fatal(str(e))


# ── Build ────────────────────────────────────────────────────────────


def _run_build(config) -> bool:
    from kitn_registry.registry.builder import RegistryBuilder

    try:
        result = RegistryBuilder(config).build()
    except ComponentsDirError as e:
        _fatal(str(e))

    for built in result.built:
        type_dir = built.latest_path.parent.name
        console.print(f"  [green]v[/] Built {type_dir}/{built.latest_path.name}")
        if built.snapshot_written:
            console.print(f"    + {type_dir}/{built.snapshot_path.name} (versioned)")

    for failure in result.failures:
        err_console.print(f"  [red]x[/] {escape(failure.component)}: {escape(failure.reason)}")

    console.print(f"\n[green]v[/] Registry index: {len(result.built)} components")
    if not result.passed:
        err_console.print(f"[red]{len(result.failures)} component(s) failed to build[/]")
    return result.passed


@main.command()
@click.pass_obj
def build(config):
    """Build registry item files and the registry index."""
    console.print(f"\n[bold blue]kitn[/] — Building registry: {config.components_path}\n")
    if not _run_build(config):
        sys.exit(EXIT_FAILED)


# ── Validate ─────────────────────────────────────────────────────────


@main.command()
@click.pass_obj
def validate(config):
    """Check that all component imports resolve in the installed layout."""
    from kitn_registry.validation.checker import validate_registry

    try:
        report = validate_registry(config)
    except ComponentsDirError as e:
        _fatal(str(e))

    for finding in report.findings:
        location = f" → {finding.path}" if finding.path else ""
        err_console.print(f"[red]x[/] {escape(finding.component)}{escape(location)}")
        err_console.print(f"  {escape(finding.message)}")
        for hint in finding.hints:
            err_console.print(f"  [yellow]hint[/]: {escape(hint)}")
        err_console.print()

    console.print(f"\n{report.summary()}")

    if not report.passed:
        err_console.print(f"\n[red]x {report.error_count} error(s) found[/]")
        sys.exit(EXIT_FAILED)
    console.print("[green]v All imports resolve correctly in the installed layout[/]")


# ── Stage ────────────────────────────────────────────────────────────


@main.command()
@click.pass_obj
def stage(config):
    """Mirror the installed layout with symlinks for type-checking."""
    from kitn_registry.staging import stage_components

    try:
        count = stage_components(config)
    except ComponentsDirError as e:
        _fatal(str(e))

    console.print(f"Staged {count} files in {config.staging_dir}/")


# ── Components ───────────────────────────────────────────────────────


@main.command(name="list")
@click.pass_obj
def list_components(config):
    """List all components in the registry."""
    from kitn_registry.registry.scanner import scan_components

    try:
        components = scan_components(config.components_path, sort=True)
    except ComponentsDirError as e:
        _fatal(str(e))

    if not components:
        console.print("[yellow]No components found.[/]")
        return

    table = Table(title=f"Registry ({len(components)} components)")
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Version")
    table.add_column("Files", justify="right")
    table.add_column("Description")

    for component in components:
        table.add_row(
            component.name,
            component.type,
            component.version,
            str(len(component.files)),
            component.description[:50],
        )

    console.print(table)


@main.command()
@click.argument("name", required=False)
@click.option("--bump", "kind", type=click.Choice(["patch", "minor", "major"]), help="Version bump")
@click.option("--change-type", type=click.Choice(["feature", "fix", "breaking"]), help="Changelog entry type")
@click.option("--note", "-m", default=None, help="Changelog note")
@click.option("--rebuild/--no-rebuild", default=None, help="Rebuild the registry afterwards")
@click.pass_obj
def bump(config, name: str | None, kind: str | None, change_type: str | None, note: str | None, rebuild: bool | None):
    """Bump a component's version and record a changelog entry.

    NAME is the component to bump; omit it to pick from a list. Any option
    not given on the command line is prompted for.
    """
    from kitn_registry.bump import apply_bump, default_change_type, find_component
    from kitn_registry.registry.scanner import scan_components
    from kitn_registry.registry.versions import BUMP_KINDS, bump_version

    console.print("\n[bold blue]kitn[/] — bump\n")

    try:
        components = scan_components(config.components_path, sort=True)
    except ComponentsDirError as e:
        _fatal(str(e))

    if not components:
        err_console.print("[red]No components found.[/]")
        sys.exit(EXIT_FAILED)

    names = [c.name for c in components]
    if name is None:
        for c in components:
            console.print(f"  [cyan]{escape(c.name)}[/] [dim]({c.version})[/]")
        name = click.prompt("Which component?", type=click.Choice(names), show_choices=False)

    component = find_component(components, name)
    if component is None:
        err_console.print(f"[red]Component [bold]{escape(name)}[/bold] not found.[/]")
        err_console.print(f"Available: {escape(', '.join(names))}")
        sys.exit(EXIT_FAILED)
    console.print(f"Component: [bold]{escape(component.name)}[/] [dim]({component.version})[/]")

    if kind is None:
        try:
            for k in BUMP_KINDS:
                console.print(f"  {k} [dim]→ {bump_version(component.version, k)}[/]")
        except ValueError as e:
            _fatal(str(e))
        kind = click.prompt("Version bump?", type=click.Choice(BUMP_KINDS), default="patch")

    if change_type is None:
        change_type = click.prompt(
            "Change type?",
            type=click.Choice(["feature", "fix", "breaking"]),
            default=default_change_type(kind),
        )

    while not (note or "").strip():
        note = click.prompt("Changelog note")

    old_version = component.version
    try:
        apply_bump(component, kind, change_type, note)
    except ValueError as e:
        _fatal(str(e))
    console.print(
        f"[green]v[/] Updated [bold]{escape(component.name)}[/]: [dim]{old_version}[/] → [green]{component.version}[/]"
    )

    if rebuild is None:
        rebuild = click.confirm("Rebuild registry?", default=True)
    if rebuild:
        with console.status("Building registry..."):
            passed = _run_build(config)
        if not passed:
            err_console.print("[red]Build failed.[/]")
            sys.exit(EXIT_FAILED)

    console.print(Panel(f"{component.qualified_id}", title="Done"))


# ── Schema ───────────────────────────────────────────────────────────


@main.command(name="schema")
@click.argument(
    "name",
    default="registry-item",
    type=click.Choice(["manifest", "registry-item", "registry", "lock", "config"]),
)
def dump_schema(name: str):
    """Print one of the registry JSON Schemas."""
    import json

    from kitn_registry.schema.definitions import get_schema

    click.echo(json.dumps(get_schema(name), indent=2))


if __name__ == "__main__":
    main()
