"""CLI interface for yamltrimmer."""

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.tree import Tree

from yamltrimmer.config import get_settings
from yamltrimmer.errors import YamlTrimmerError
from yamltrimmer.models import Configuration
from yamltrimmer.pipeline.configuration import load_configuration
from yamltrimmer.pipeline.pipeline import run_pipeline
from yamltrimmer.pipeline.projection import trim
from yamltrimmer.pipeline.rules import IncludeRule
from yamltrimmer.pipeline.source import read_file

console = Console()
error_console = Console(stderr=True, soft_wrap=True)

logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging with rich handler."""
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, rich_tracebacks=True)],
    )


def _fail(error: Exception) -> NoReturn:
    """Report an error and exit with status 1."""
    error_console.print(f"[bold red]Error:[/bold red] {escape(str(error))}", highlight=False)
    sys.exit(1)


def _load_configuration_or_exit(config_path: Path) -> Configuration:
    """Load the configuration file, exiting on failure."""
    try:
        return load_configuration(config_path)
    except YamlTrimmerError as e:
        _fail(e)


def _add_rule_branches(tree: Tree, rules: tuple[IncludeRule, ...]) -> None:
    """Add rules to a rich tree, recursing into nested rules."""
    for rule in rules:
        if rule.is_leaf:
            tree.add(f"[cyan]{escape(rule.key)}[/cyan]")
        else:
            branch = tree.add(f"[bold cyan]{escape(rule.key)}[/bold cyan] [dim]({len(rule.include)} nested)[/dim]")
            _add_rule_branches(branch, rule.include)


def _print_rules(configuration: Configuration, config_path: Path) -> None:
    """Print the rule tree of a configuration."""
    tree = Tree(f"[bold blue]Include rules[/bold blue] [dim]{escape(str(config_path))}[/dim]")
    if not configuration.include:
        tree.add("[dim]No rules - output will be an empty mapping[/dim]")
    _add_rule_branches(tree, configuration.include)
    console.print(tree)


@click.group(invoke_without_command=True)
@click.pass_context
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default="config.yaml",
    help="Path to the configuration file (default: config.yaml)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default="WARNING",
    help="Set the logging level",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose logging (same as --log-level DEBUG)",
)
def main(
    ctx: click.Context,
    config_path: Path,
    log_level: str,
    verbose: bool,
) -> None:
    """Trim YAML documents down to the keys listed in a configuration file."""
    setup_logging("DEBUG" if verbose else log_level.upper())
    if verbose:
        logger.debug("Verbose logging enabled")

    config_path = config_path.expanduser().resolve()
    logger.debug(f"Resolved configuration file path: {config_path}")

    # Store common options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    # Run the pipeline when no subcommand is given
    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@main.command()
@click.pass_context
def run(ctx: click.Context) -> None:
    """Trim the configured input and write the configured output (default command)."""
    configuration = _load_configuration_or_exit(ctx.obj["config_path"])
    try:
        result = run_pipeline(configuration, get_settings())
    except YamlTrimmerError as e:
        _fail(e)
    logger.info(f"Trimmed {result}")


@main.command()
@click.pass_context
def rules(ctx: click.Context) -> None:
    """Show the include rules of the configuration file."""
    config_path = ctx.obj["config_path"]
    configuration = _load_configuration_or_exit(config_path)
    _print_rules(configuration, config_path)


@main.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def preview(ctx: click.Context, document: Path) -> None:
    """Print DOCUMENT trimmed with the configured rules, without writing any file.

    The input and output locations of the configuration are ignored.
    """
    configuration = _load_configuration_or_exit(ctx.obj["config_path"])
    try:
        trimmed = trim(read_file(document), configuration.include, get_settings().emitter)
    except YamlTrimmerError as e:
        _fail(e)
    click.echo(trimmed.decode("utf-8"), nl=False)


if __name__ == "__main__":
    main()
