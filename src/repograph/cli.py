"""Command-line interface for RepoGraph."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.logging import RichHandler

from repograph import __version__
from repograph.config import (
    ProjectConfig,
    find_project_root,
    load_config,
    save_config,
    set_config_value,
)
from repograph.exceptions import ConfigError, InputError
from repograph.ui.console import Console

console = Console()


def _setup_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=console.console, show_path=False)],
        force=True,
    )


def _get_project_root(path: str | None = None) -> Path:
    """Resolve the project root used for configuration."""
    if path:
        root = Path(path).resolve()
        if not root.exists():
            console.error(f"Path does not exist: {path}")
            sys.exit(1)
        return root
    return find_project_root() or Path.cwd()


def _load_project_config(path: str | None) -> ProjectConfig:
    root = _get_project_root(path)
    try:
        return load_config(root)
    except ConfigError as e:
        console.error(str(e))
        sys.exit(1)


def _run(input_file: str, path: str | None, budget: int | None):
    """Load an input document and run the full analysis."""
    from repograph.analysis.engine import RepositoryAnalyzer
    from repograph.analysis.models import AnalysisInput

    try:
        data = AnalysisInput.from_file(input_file)
    except InputError as e:
        console.error(str(e))
        sys.exit(1)

    config = _load_project_config(path)
    return RepositoryAnalyzer(config).analyze_input(data, token_budget=budget)


@click.group()
@click.version_option(version=__version__, prog_name="repograph")
def main():
    """RepoGraph - rank, cluster and budget a codebase's dependency graph."""
    pass


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--path", "-p", default=None, help="Project root holding .repograph/config.json.")
@click.option("--budget", "-b", default=None, type=int, help="Token budget (default from config).")
@click.option("--top", "-n", default=20, type=int, help="Number of ranked files to show.")
@click.option("--output", "-o", default=None, type=click.Path(dir_okay=False),
              help="Write the full analysis result as JSON.")
@click.option("--render", is_flag=True, help="Print the selected context instead of tables.")
@click.option("--verbose", "-v", is_flag=True, help="Show diagnostic logging.")
def analyze(
    input_file: str,
    path: str | None,
    budget: int | None,
    top: int,
    output: str | None,
    render: bool,
    verbose: bool,
):
    """Analyze INPUT_FILE, a JSON document of files and import edges."""
    _setup_logging(verbose)
    result = _run(input_file, path, budget)

    if output:
        Path(output).write_text(result.to_json())
        console.success(f"Analysis written to {output}")

    if render:
        click.echo(result.selection.render())
        return

    if result.is_empty:
        console.warning("No files in input; nothing to analyze.")
        return

    console.banner()
    console.info(f"Analyzed: {input_file}")
    console.show_build_stats(result.build, result.metrics)
    console.show_ranking(result.scores, limit=top)
    console.show_cycles(result.cycles)
    console.show_communities(result.partition)
    console.show_layers(result.layers)
    console.show_languages(result.languages)
    console.show_categories(
        {
            "Entry points": result.entry_points,
            "Schema files": result.schema_files,
            "Config files": result.config_files,
            **{f"Domain: {name}": members for name, members in result.domains.items()},
        }
    )
    console.show_selection(result.selection, limit=top)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--path", "-p", default=None, help="Project root holding .repograph/config.json.")
def cycles(input_file: str, path: str | None):
    """Show circular dependency groups in INPUT_FILE."""
    result = _run(input_file, path, None)
    console.show_cycles(result.cycles)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--path", "-p", default=None, help="Project root holding .repograph/config.json.")
@click.option("--members", "-m", default=8, type=int, help="Members shown per community.")
def clusters(input_file: str, path: str | None, members: int):
    """Show domain communities in INPUT_FILE."""
    result = _run(input_file, path, None)
    console.show_communities(result.partition, max_members=members)


@main.group()
def config():
    """View or change project configuration."""
    pass


@config.command("show")
@click.option("--path", "-p", default=None, help="Project root.")
def config_show(path: str | None):
    """Print the effective configuration as JSON."""
    cfg = _load_project_config(path)
    click.echo(json.dumps(cfg.model_dump(), indent=2))


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--path", "-p", default=None, help="Project root.")
def config_set(key: str, value: str, path: str | None):
    """Set KEY (dot notation, e.g. budget.token_budget) to VALUE."""
    root = _get_project_root(path)
    cfg = _load_project_config(path)

    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value

    try:
        cfg = set_config_value(cfg, key, parsed)
    except KeyError as e:
        console.error(str(e))
        sys.exit(1)
    except ConfigError as e:
        console.error(str(e))
        sys.exit(1)

    save_config(root, cfg)
    console.success(f"Set {key} = {parsed!r}")


if __name__ == "__main__":
    main()
