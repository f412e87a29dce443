"""CLI for playerbuild."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .builders import Backend, BuildError, DryRunBackend, get_backend_for_config
from .builders.command import validate_template
from .config import DEFAULT_CONFIG_NAME, BackendConfig, BuilderConfig, LogConfig, load_config
from .nfo_config import setup_logging
from .pipeline import build as run_build
from .pipeline import build_from_args
from .scenes import SceneEntry, enabled_scenes
from .settings import StrippingLevel, YamlSettingsStore
from .targets import Target, default_output_name, list_targets, lookup_target


console = Console()


def _load_project(config_path: Optional[str]) -> BuilderConfig:
    """Load the explicit config, else ./playerbuild.yaml, else defaults."""
    if config_path:
        return load_config(config_path)
    default = Path.cwd() / DEFAULT_CONFIG_NAME
    if default.exists():
        return load_config(default)
    return BuilderConfig(name=Path.cwd().name)


def _make_backend(config: BuilderConfig, dry_run: bool) -> Backend:
    if dry_run:
        return DryRunBackend()
    return get_backend_for_config(config.backend, base_path=config.base_path)


def _fail(e: Exception) -> None:
    console.print(f"[red]Error: {escape(str(e))}[/red]")
    sys.exit(1)


def _check_command_option(ctx, param, value):
    if value is None:
        return None
    try:
        validate_template(value)
    except ValueError as e:
        raise click.BadParameter(str(e))
    return value


def _parse_target_option(ctx, param, value):
    if value is None:
        return None
    target = lookup_target(value)
    if target is None:
        raise click.BadParameter(f"unknown target '{value}'")
    return target


@click.group()
@click.version_option(version=__version__, prog_name="playerbuild")
@click.option("--log-file/--no-log-file", default=True, help="Write structured logs to the log directory")
@click.option("--log-dir", type=click.Path(file_okay=False), default=None, help="Log directory (default: $PLAYERBUILD_LOG_DIR)")
def cli(log_file: bool, log_dir: Optional[str]):
    """playerbuild – command-line player build trigger."""
    log_config = LogConfig.from_env()
    if log_dir:
        log_config.log_dir = log_dir
    setup_logging(log_config, enable_sqlite=log_file)


@cli.command(context_settings={"ignore_unknown_options": True, "allow_extra_args": True})
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), default=None, help="Project config file")
@click.option("--dry-run", is_flag=True, help="Resolve and log the build without running the backend")
@click.argument("tokens", nargs=-1, type=click.UNPROCESSED)
def run(config_path: Optional[str], dry_run: bool, tokens: tuple[str, ...]):
    """Build from raw command tokens.

    Recognizes -target NAME, -output PATH, -debug and -append (any case);
    every other token is ignored.

    Example:
        playerbuild run -batchmode -target android -output build/app.apk
    """
    try:
        config = _load_project(config_path)
        outcome = build_from_args(
            list(tokens),
            backend=_make_backend(config, dry_run),
            settings=YamlSettingsStore(config.settings_path),
            inputs=enabled_scenes(config.scenes, config.base_path),
        )
    except (BuildError, FileNotFoundError, ValueError) as e:
        _fail(e)
        return
    console.print(f"[green]✓ Built {outcome.target} into {escape(outcome.output_path)}[/green]")


@cli.command()
@click.option("--target", "-t", required=True, callback=_parse_target_option, help="Target platform (or 'active')")
@click.option("--output", "-o", default=None, help="Output path (default: configured build location)")
@click.option("--debug", "-d", is_flag=True, help="Development build with code stripping disabled")
@click.option("--append/--overwrite", default=True, help="Keep an existing project folder (folder targets only)")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), default=None, help="Project config file")
@click.option("--dry-run", "-n", is_flag=True, help="Resolve and log the build without running the backend")
def build(target: Target, output: Optional[str], debug: bool, append: bool, config_path: Optional[str], dry_run: bool):
    """Build one target with fixed options."""
    try:
        config = _load_project(config_path)
        settings = YamlSettingsStore(config.settings_path)
        location_target = settings.active_target if target == Target.ACTIVE else target
        output_path = output or config.build_location(location_target)
        if not output_path:
            raise click.UsageError(f"No --output given and no build location configured for {location_target}")
        outcome = run_build(
            target,
            output_path,
            debug,
            append,
            backend=_make_backend(config, dry_run),
            settings=settings,
            inputs=enabled_scenes(config.scenes, config.base_path),
        )
    except (BuildError, FileNotFoundError, ValueError) as e:
        _fail(e)
        return
    console.print(f"[green]✓ Built {outcome.target} into {escape(outcome.output_path)}[/green]")


@cli.command()
def targets():
    """List known build targets."""
    table = Table(title="Build targets")
    table.add_column("Target", style="cyan")
    table.add_column("Family")
    table.add_column("Output")
    for meta in list_targets():
        table.add_row(meta.target.value, meta.family.value, "project folder" if meta.produces_folder else "binary")
    console.print(table)


@cli.command()
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), default=None, help="Project config file")
@click.option("--stripping-level", default=None, help="Set the stored stripping level")
def settings(config_path: Optional[str], stripping_level: Optional[str]):
    """Show (or set) the stored backend settings."""
    try:
        config = _load_project(config_path)
        store = YamlSettingsStore(config.settings_path)
        if stripping_level:
            store.stripping_level = StrippingLevel.parse(stripping_level)
        console.print(f"Settings file:   {escape(str(store.path))}")
        console.print(f"Stripping level: [bold]{store.stripping_level.value}[/bold]")
        console.print(f"Active target:   [bold]{store.active_target.value}[/bold]")
    except (FileNotFoundError, ValueError) as e:
        _fail(e)


@cli.command()
@click.option("--name", "-n", default=None, help="Project name (default: folder name)")
@click.option("--output", "-o", default=DEFAULT_CONFIG_NAME, help="Output file")
@click.option("--command", "-c", "command", default=None, callback=_check_command_option, help="Backend command template")
def init(name: Optional[str], output: str, command: Optional[str]):
    """Initialize a new playerbuild configuration."""
    output_path = Path(output)
    project = name or Path.cwd().name
    config = BuilderConfig(
        name=project,
        backend=BackendConfig(type="command", command=command) if command else BackendConfig(),
        scenes=[SceneEntry(path="Assets/Scenes/Main.unity")],
        build_locations={
            t: f"build/{t.value.lower()}/{default_output_name(t, project)}"
            for t in (Target.ANDROID, Target.IOS, Target.WINDOWS_DESKTOP)
        },
    )
    config.to_yaml(output_path)

    console.print(f"[green]Created {output_path}[/green]")
    console.print("\nNext steps:")
    console.print("  1. Set backend.command to your editor's batch-mode build command")
    console.print(f"  2. Run: playerbuild build --target android --config {output_path}")


def main(argv=None):
    """Main entry point."""
    cli(argv)


if __name__ == "__main__":
    main()
