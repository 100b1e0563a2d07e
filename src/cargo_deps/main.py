import copy
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.panel import Panel

from .aggregator import scan_tree
from .cli_config import (
    build_config,
    create_sample_config,
    get_config,
    load_config,
    load_config_file,
    validate_config_values,
)
from .error_handling import ErrorCategory, get_error_handler, setup_error_handling
from .extractor import DEPENDENCY_SECTIONS, WORKSPACE_SECTION
from .reporting import (
    SUPPORTED_FORMATS,
    ScanReporter,
    UnsupportedFormatError,
    render_report,
)
from .structured_logging import configure_logging

__version__ = "1.0.0"

console = Console()


def _error_console() -> Console:
    return Console(stderr=True)


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version information")
@click.pass_context
def cli(ctx, version):
    """
    📦 cargo-deps: Cargo manifest dependency inventory

    Walks a directory tree for Cargo.toml files and lists every dependency
    resolved from a registry or git, skipping path and workspace-inherited ones.
    """
    if version:
        console.print(f"cargo-deps version {__version__}", style="bold blue")
        ctx.exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@cli.command()
@click.argument(
    "root",
    required=False,
    default=".",
    type=click.Path(exists=True, readable=True),
)
@click.argument("output_format", required=False, metavar="[FORMAT]")
@click.option(
    "--output-file",
    "-o",
    type=click.Path(dir_okay=False),
    help="Write the report to a file instead of stdout",
)
@click.option(
    "--exclude",
    multiple=True,
    help="Directory name to skip while walking (repeatable)",
)
@click.option(
    "--follow-symlinks",
    is_flag=True,
    help="Descend into symlinked directories",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Read settings from this config file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Log scan events and print a summary on stderr",
)
def scan(
    root: str,
    output_format: Optional[str],
    output_file: Optional[str],
    exclude: Tuple[str, ...],
    follow_symlinks: bool,
    config_path: Optional[str],
    verbose: bool,
) -> None:
    """
    Scan ROOT for Cargo.toml files and report external dependencies.

    ROOT is a directory to walk or a single Cargo.toml (default: .).

    FORMAT is one of json, csv, md or markdown (default: json).

    Examples:

      cargo-deps scan

      cargo-deps scan ~/src/my-workspace csv

      cargo-deps scan . markdown -o DEPENDENCIES.md
    """
    loaded = load_config(Path(config_path)) if config_path else load_config()
    config = copy.deepcopy(loaded)

    final_format = output_format or config.scan.output_format
    if final_format not in SUPPORTED_FORMATS:
        _error_console().print(
            f"❌ {UnsupportedFormatError(final_format)}", style="red"
        )
        sys.exit(1)

    config.scan.exclude_dirs = list(config.scan.exclude_dirs) + list(exclude)
    config.scan.follow_symlinks = follow_symlinks or config.scan.follow_symlinks
    config.scan.verbose = verbose or config.scan.verbose

    log_level = "INFO" if config.scan.verbose else config.logging.log_level
    configure_logging(log_level)
    error_handler = setup_error_handling(
        log_level=getattr(logging, log_level.upper(), logging.WARNING),
        log_format=config.logging.log_format,
    )

    aggregator = scan_tree(root, config)
    records = aggregator.records
    report = render_report(records, final_format)

    if output_file:
        try:
            with open(output_file, "w", encoding="utf-8") as f:
                f.write(report)
        except OSError as e:
            error_handler.error(
                ErrorCategory.OUTPUT,
                f"Could not write report to {output_file}",
                exception=e,
                details={"output_file": output_file},
            )
            _error_console().print(
                f"❌ Could not write {output_file}: {e}", style="red"
            )
            sys.exit(1)
        console.print(f"✅ Report saved to {output_file}", style="green")
    else:
        click.echo(report, nl=False)

    if config.scan.verbose:
        ScanReporter(_error_console()).print_summary(
            records, aggregator.manifest_count, aggregator.skipped
        )


@cli.command()
def info():
    """Show which sections are scanned and how entries are classified."""
    sections = "\n".join(
        f"• [green]\\[{section}][/green]"
        for section in (*DEPENDENCY_SECTIONS, WORKSPACE_SECTION)
    )
    info_text = f"""
[bold blue]📋 Scanned Sections:[/bold blue]

{sections}

[bold blue]🔍 Classification:[/bold blue]

• [yellow]serde = "1.0"[/yellow] - registry dependency, version "1.0"
• [yellow]tokio = {{ version = "1", features = [...] }}[/yellow] - version "1"
• [yellow]foo = {{ git = "https://..." }}[/yellow] - git dependency, version is the URL
• [dim]bar = {{ path = "../bar" }}[/dim] - local, not reported
• [dim]baz = {{ workspace = true }}[/dim] - workspace-inherited, not reported
• anything else - version "unknown"

[bold blue]📄 Output Formats:[/bold blue]

• [cyan]json[/cyan], [cyan]csv[/cyan], [cyan]md[/cyan] / [cyan]markdown[/cyan]

[bold blue]💡 Usage Examples:[/bold blue]

  cargo-deps scan
  cargo-deps scan path/to/workspace csv
  cargo-deps scan . markdown --exclude target
"""
    console.print(
        Panel(
            info_text,
            title="[bold]cargo-deps Information[/bold]",
            border_style="blue",
        )
    )


@cli.group()
def config():
    """Configuration management commands."""
    pass


@config.command("init")
@click.option(
    "--path",
    type=click.Path(dir_okay=False),
    default=".cargo-deps.json",
    help="Path where to create the config file",
    show_default=True,
)
@click.option("--force", is_flag=True, help="Overwrite existing config file")
def config_init(path: str, force: bool):
    """Create a sample configuration file."""
    config_path = Path(path)

    if config_path.exists() and not force:
        console.print(f"⚠️  Config file already exists at {config_path}", style="yellow")
        console.print("Use --force to overwrite", style="dim")
        return

    try:
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_sample_config())
    except OSError as e:
        get_error_handler().error(
            ErrorCategory.CONFIGURATION,
            f"Could not create config file {config_path}",
            exception=e,
        )
        _error_console().print(f"❌ Failed to create config file: {e}", style="red")
        sys.exit(1)

    console.print(f"✅ Created configuration file at {config_path}", style="green")


@config.command("show")
def config_show():
    """Show current configuration settings."""
    current_config = get_config()

    console.print(Panel("[bold blue]🔧 Configuration[/bold blue]", border_style="blue"))

    console.print("\n[bold cyan]📊 Scan Settings:[/bold cyan]")
    console.print(f"  Output Format: {current_config.scan.output_format}")
    excluded = ", ".join(current_config.scan.exclude_dirs) or "(none)"
    console.print(f"  Excluded Directories: {excluded}")
    console.print(f"  Follow Symlinks: {current_config.scan.follow_symlinks}")

    console.print("\n[bold cyan]🔒 Security Settings:[/bold cyan]")
    console.print(f"  Max File Size: {current_config.security.max_file_size_mb} MB")

    console.print("\n[bold cyan]📝 Logging Settings:[/bold cyan]")
    console.print(f"  Log Level: {current_config.logging.log_level}")


@config.command("validate")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
def config_validate(config_file: str):
    """Validate a configuration file."""
    config_data = load_config_file(Path(config_file))

    if config_data is None:
        console.print(f"❌ Could not load config from {config_file}", style="red")
        sys.exit(1)

    errors = validate_config_values(build_config(config_data))
    if errors:
        console.print("❌ Configuration validation failed:", style="red")
        for error in errors:
            console.print(f"  • {error}", style="red")
        sys.exit(1)

    console.print(f"✅ Configuration file {config_file} is valid", style="green")


if __name__ == "__main__":
    cli()
