"""CLI entry point for ai-hooks."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from ai_hooks.adapters.registry import AdapterRegistry, create_default_registry
from ai_hooks.config.loader import CONFIG_TEMPLATE, find_config_file, load_config
from ai_hooks.runtime.engine import HookEngine
from ai_hooks.types.adapter import Adapter
from ai_hooks.types.config import ConfigError, HooksConfig
from ai_hooks.types.events import Phase

CONFIG_FILENAME = "ai_hooks_config.py"


class CliState:
    """Per-invocation state shared by subcommands via ``ctx.obj``."""

    def __init__(self, cwd: Path, config_path: str | None, registry: AdapterRegistry) -> None:
        self.cwd = cwd
        self.config_path = config_path
        self.registry = registry

    def load_config(self) -> HooksConfig:
        try:
            return load_config(self.config_path, self.cwd)
        except ConfigError as e:
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1)

    def resolve_adapters(self, tools: str | None) -> list[Adapter]:
        """Adapters named in ``--tools``, or every detected adapter."""
        if not tools:
            return self.registry.detect_all()

        adapters: list[Adapter] = []
        for adapter_id in (t.strip() for t in tools.split(",") if t.strip()):
            adapter = self.registry.get(adapter_id)
            if adapter is None:
                click.echo(f"  Warning: Unknown adapter {adapter_id!r}", err=True)
            else:
                adapters.append(adapter)
        return adapters


pass_state = click.make_pass_decorator(CliState)


@click.group()
@click.option("--config", "config_path", default=None, help="Path to config file")
@click.option(
    "--cwd",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project directory",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, cwd: Path | None, verbose: bool) -> None:
    """ai-hooks -- universal hooks for AI coding tools.

    \b
    Usage:
      ai-hooks init
      ai-hooks detect
      ai-hooks install --tools claude-code
      ai-hooks list
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    root = cwd or Path.cwd()
    ctx.obj = CliState(root, config_path, create_default_registry(root))


@cli.command()
@click.option("--dry-run", is_flag=True, help="Show what would be written")
@pass_state
def init(state: CliState, dry_run: bool) -> None:
    """Create an ai_hooks_config.py in the project directory."""
    existing = find_config_file(state.cwd)
    if existing:
        click.echo(f"Config already exists: {existing}")
        return

    if dry_run:
        click.echo(f"[dry-run] Would create {CONFIG_FILENAME}")
        return

    (state.cwd / CONFIG_FILENAME).write_text(CONFIG_TEMPLATE, encoding="utf-8")
    click.echo(f"Created {CONFIG_FILENAME}")
    click.echo("\nNext steps:")
    click.echo(f"  1. Edit {CONFIG_FILENAME} to add your hooks")
    click.echo("  2. Run: ai-hooks detect    (see which AI tools are installed)")
    click.echo("  3. Run: ai-hooks install   (install hooks into your tools)")


@cli.command()
@pass_state
def detect(state: CliState) -> None:
    """Detect which AI tools are installed."""
    console = Console()
    detected = {a.id for a in state.registry.detect_all()}
    known = state.registry.list()

    table = Table(show_header=True, header_style="bold")
    table.add_column("", width=1)
    table.add_column("Tool")
    table.add_column("Id")
    table.add_column("Capabilities")
    table.add_column("Events", justify="right")

    for adapter_id in known:
        adapter = state.registry.get(adapter_id)
        if adapter is None:
            continue
        caps = adapter.capabilities
        flags = [
            name for name, on in (
                ("before", caps.before_hooks),
                ("after", caps.after_hooks),
                ("mcp", caps.mcp),
            ) if on
        ]
        found = adapter_id in detected
        table.add_row(
            "[green]✓[/green]" if found else "[dim]✗[/dim]",
            adapter.name,
            adapter_id,
            ", ".join(flags),
            str(len(caps.supported_events)),
        )

    console.print(table)
    console.print(f"\nDetected {len(detected)}/{len(known)} tools")
    if detected and not find_config_file(state.cwd):
        console.print('\nRun "ai-hooks init" to create a config file')


@cli.command()
@click.option("--tools", default=None, help="Comma-separated adapter ids")
@click.option("--dry-run", is_flag=True, help="Show what would be written")
@pass_state
def generate(state: CliState, tools: str | None, dry_run: bool) -> None:
    """Generate native configs for detected or specified tools."""
    config = state.load_config()
    adapters = state.resolve_adapters(tools or ",".join(config.adapters))
    if not adapters:
        click.echo("No AI tools detected. Use --tools to specify manually.")
        return

    click.echo(f"Generating configs for {len(adapters)} tool(s)...\n")
    for adapter in adapters:
        configs = adapter.generate(config.hooks)
        for generated in configs:
            prefix = "[dry-run] Would write" if dry_run else "Generated"
            click.echo(f"  {prefix}: {generated.path}")
        if not dry_run:
            adapter.install(configs)
    click.echo("\nDone!")


@cli.command()
@click.option("--tools", default=None, help="Comma-separated adapter ids")
@click.option("--dry-run", is_flag=True, help="Show what would be installed")
@pass_state
def install(state: CliState, tools: str | None, dry_run: bool) -> None:
    """Generate and install hooks into detected tools."""
    config = state.load_config()
    adapters = state.resolve_adapters(tools or ",".join(config.adapters))
    if not adapters:
        click.echo("No AI tools detected. Use --tools to specify manually.")
        return

    click.echo(f"Installing hooks into {len(adapters)} tool(s)...\n")
    for adapter in adapters:
        configs = adapter.generate(config.hooks)
        if dry_run:
            for generated in configs:
                click.echo(f"  [dry-run] Would install: {generated.path}")
            continue
        adapter.install(configs)
        click.echo(f"  ✓ {adapter.name}")
    click.echo("\nHooks installed!")


@cli.command()
@click.option("--tools", default=None, help="Comma-separated adapter ids")
@pass_state
def uninstall(state: CliState, tools: str | None) -> None:
    """Remove ai-hooks from detected or specified tools."""
    for adapter in state.resolve_adapters(tools):
        adapter.uninstall()
        click.echo(f"  ✓ Removed from {adapter.name}")
    click.echo("\nHooks uninstalled.")


@cli.command("list")
@click.option("--verbose", "-v", "show_descriptions", is_flag=True, help="Show descriptions")
@pass_state
def list_hooks(state: CliState, show_descriptions: bool) -> None:
    """List all hooks registered by the config."""
    engine = HookEngine(state.load_config())
    hooks = engine.get_hooks()
    if not hooks:
        click.echo(f"No hooks registered. Edit {CONFIG_FILENAME} to add hooks.")
        return

    table = Table(title=f"{len(hooks)} hook(s) registered", show_header=True, header_style="bold")
    table.add_column("Phase")
    table.add_column("Name")
    table.add_column("Id", style="dim")
    table.add_column("Priority", justify="right")
    table.add_column("Events")
    if show_descriptions:
        table.add_column("Description")

    for h in hooks:
        name = h.name if h.enabled else f"[dim]{h.name} (disabled)[/dim]"
        row = [h.phase.value, name, h.id, str(h.priority), ", ".join(e.value for e in h.events)]
        if show_descriptions:
            row.append(h.description or "")
        table.add_row(*row)

    Console().print(table)


@cli.command()
@pass_state
def status(state: CliState) -> None:
    """Show config, detected tools, and hook counts."""
    config_file = find_config_file(state.cwd) if state.config_path is None else state.config_path
    detected = state.registry.detect_all()

    click.echo("ai-hooks status\n")
    click.echo(f"  Config: {config_file or 'not found'}")
    click.echo(f"  Tools:  {len(detected)} detected")

    if config_file:
        engine = HookEngine(state.load_config())
        counts = engine.phase_counts
        settings = engine.get_settings()
        click.echo(
            f"  Hooks:  {len(engine.get_hooks())} registered "
            f"({counts[Phase.BEFORE]} before, {counts[Phase.AFTER]} after)"
        )
        click.echo(
            f"  Mode:   fail-{settings.fail_mode.value}, "
            f"timeout {settings.hook_timeout}ms"
        )

    click.echo("")
    for adapter in detected:
        click.echo(f"  ✓ {adapter.name} ({adapter.id})")


@cli.command()
@click.argument("adapter_id")
@pass_state
def run(state: CliState, adapter_id: str) -> None:
    """Evaluate one native hook event read from stdin (used by tools)."""
    from ai_hooks.adapters.runner import main as run_main

    code = run_main(
        adapter_id,
        stdin=sys.stdin,
        stdout=sys.stdout,
        stderr=sys.stderr,
        config_path=state.config_path,
        cwd=state.cwd,
        registry=state.registry,
    )
    sys.exit(code)


if __name__ == "__main__":
    cli()
