"""Main Typer application for postlint."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from postlint.cli.errorhandler import handle_cli_errors
from postlint.config import (
    PostlintConfig,
    find_postlint_config,
    load_postlint_config,
    save_postlint_config,
    site_root_for,
)
from postlint.linter import lint_posts, load_posts
from postlint.logging_setup import configure_logging
from postlint.reporting import (
    render_json,
    render_posts_table,
    render_rules_table,
    render_text,
    render_vocabulary_table,
)
from postlint.rules import registry

app = typer.Typer(
    name="postlint",
    help="Lint the front matter, images, code fences and tag vocabulary of static-site blog posts",
    add_completion=False,
)

console = Console()
logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


PathsArgument = Annotated[
    list[Path] | None,
    typer.Argument(help="Post files or directories (default: the configured posts directories)", show_default=False),
]
SiteRootOption = Annotated[
    Path | None,
    typer.Option("--site-root", help="Site root (default: the directory holding .postlint/, else the CWD)"),
]
DebugOption = Annotated[bool, typer.Option("--debug", help="Show full tracebacks on errors")]


@dataclass(frozen=True, slots=True)
class Site:
    root: Path
    config: PostlintConfig
    config_path: Path | None


def resolve_site(site_root: Path | None) -> Site:
    """Find the configuration and decide which directory is the site root."""
    config_path = find_postlint_config(site_root or Path.cwd())
    if site_root is not None:
        root = site_root
    elif config_path is not None:
        root = site_root_for(config_path)
    else:
        root = Path.cwd()
    logger.debug("Site root %s, config %s", root, config_path or "defaults")
    return Site(root=root, config=load_postlint_config(config_path), config_path=config_path)


@app.callback()
def main() -> None:
    """Initialize logging for every command."""
    configure_logging()


@app.command()
def check(
    paths: PathsArgument = None,
    *,
    site_root: SiteRootOption = None,
    output_format: Annotated[
        OutputFormat, typer.Option("--format", "-f", help="Report format", case_sensitive=False)
    ] = OutputFormat.TEXT,
    strict: Annotated[bool, typer.Option("--strict", help="Fail on warnings as well as errors")] = False,
    select: Annotated[
        list[str] | None, typer.Option("--select", "-s", help="Only run these rules (code or prefix)")
    ] = None,
    ignore: Annotated[
        list[str] | None, typer.Option("--ignore", "-i", help="Skip these rules (code or prefix)")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show finding details and debug logs")] = False,
    debug: DebugOption = False,
) -> None:
    """Lint posts and exit non-zero when a finding fails the run."""
    if verbose:
        configure_logging(logging.DEBUG)

    with handle_cli_errors(debug=debug):
        site = resolve_site(site_root)
        report = lint_posts(paths, site.config, site.root, select=select, ignore=ignore or ())

    if output_format is OutputFormat.JSON:
        typer.echo(render_json(report, strict=strict))
    else:
        render_text(report, console, base=site.root, verbose=verbose, strict=strict)

    raise typer.Exit(report.exit_code(strict=strict))


@app.command()
def rules(site_root: SiteRootOption = None, debug: DebugOption = False) -> None:
    """List every rule with its effective severity."""
    with handle_cli_errors(debug=debug):
        site = resolve_site(site_root)
        for code in site.config.rules.severity:
            registry.get(code)
        ignored = [rule.code for selector in site.config.rules.ignore for rule in registry.match(selector)]
    console.print(render_rules_table(registry.list_rules(), site.config.rules.severity, ignored))


@app.command()
def tags(
    paths: PathsArgument = None,
    *,
    site_root: SiteRootOption = None,
    variants_only: Annotated[
        bool, typer.Option("--variants-only", help="Only show terms spelled more than one way")
    ] = False,
    debug: DebugOption = False,
) -> None:
    """Show the category and tag vocabulary across posts."""
    with handle_cli_errors(debug=debug):
        site = resolve_site(site_root)
        report = load_posts(paths, site.config, site.root)
    vocabulary = report.vocabulary()
    if not vocabulary:
        console.print("[dim]No categories or tags found.[/dim]")
        return
    console.print(render_vocabulary_table(vocabulary, variants_only=variants_only))


@app.command()
def posts(
    paths: PathsArgument = None,
    *,
    site_root: SiteRootOption = None,
    debug: DebugOption = False,
) -> None:
    """List posts newest first by last_modified_at."""
    with handle_cli_errors(debug=debug):
        site = resolve_site(site_root)
        report = load_posts(paths, site.config, site.root)
    console.print(render_posts_table(report.chronological(), base=site.root))


@app.command()
def init(
    site_root: Annotated[Path, typer.Argument(help="Site root to create .postlint/postlint.toml in")] = Path(),
    *,
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing configuration")] = False,
    debug: DebugOption = False,
) -> None:
    """Write the default configuration file."""
    with handle_cli_errors(debug=debug):
        config_path = save_postlint_config(PostlintConfig(), site_root, force=force)
    console.print(f"[green]Wrote {config_path}[/green]")
