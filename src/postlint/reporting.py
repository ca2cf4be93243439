"""Console and JSON renderings of a lint report."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table

from postlint.config.settings import Severity

if TYPE_CHECKING:
    from rich.console import Console

    from postlint.linter import LintReport
    from postlint.models.post import Post
    from postlint.rules import Rule
    from postlint.rules.vocabulary import VocabularyEntry

SEVERITY_STYLES: dict[Severity, tuple[str, str]] = {
    Severity.ERROR: ("❌", "red"),
    Severity.WARNING: ("⚠️", "yellow"),
    Severity.INFO: ("i", "cyan"),
}


def display_path(path: Path, base: Path | None = None) -> str:
    if base is not None:
        try:
            return path.resolve().relative_to(base.resolve()).as_posix()
        except ValueError:
            pass
    return path.as_posix()


def render_text(
    report: LintReport,
    console: Console,
    *,
    base: Path | None = None,
    verbose: bool = False,
    strict: bool = False,
) -> None:
    """Print findings grouped per file, then a one-line summary."""
    for path, findings in report.by_path().items():
        console.print(f"[bold]{escape(display_path(path, base))}[/bold]")
        for finding in findings:
            icon, color = SEVERITY_STYLES[finding.severity]
            where = f"line {finding.line}" if finding.line else "front matter"
            console.print(
                f"  [{color}]{icon} {finding.rule}[/{color}] [dim]{where}[/dim] {escape(finding.message)}"
            )
            if verbose and finding.details:
                for key, value in finding.details.items():
                    console.print(f"      {key}: {escape(str(value))}", style="dim")
        console.print()

    counts = report.counts
    errors, warnings, infos = counts[Severity.ERROR], counts[Severity.WARNING], counts[Severity.INFO]
    checked = f"{len(report.posts)} post(s) checked"
    if not report.findings:
        console.print(f"[bold green]✅ {checked}, no problems found.[/bold green]")
    elif report.failed(strict=strict):
        console.print(f"[bold red]❌ {checked}: {errors} error(s), {warnings} warning(s), {infos} info.[/bold red]")
    else:
        console.print(f"[bold yellow]⚠️  {checked}: {warnings} warning(s), {infos} info.[/bold yellow]")


def report_payload(report: LintReport, *, strict: bool = False) -> dict[str, Any]:
    counts = report.counts
    return {
        "summary": {
            "posts": len(report.posts),
            "errors": counts[Severity.ERROR],
            "warnings": counts[Severity.WARNING],
            "info": counts[Severity.INFO],
            "failed": report.failed(strict=strict),
        },
        "findings": [finding.to_dict() for finding in report.findings],
        "posts": [
            {
                "path": str(post.path),
                "title": post.display_title(),
                "last_modified_at": post.last_modified_at.isoformat() if post.last_modified_at else None,
            }
            for post in report.posts
        ],
    }


def render_json(report: LintReport, *, strict: bool = False) -> str:
    return json.dumps(report_payload(report, strict=strict), indent=2, ensure_ascii=False)


def render_rules_table(
    rules: Sequence[Rule],
    overrides: Mapping[str, Severity],
    ignored: Sequence[str] = (),
) -> Table:
    table = Table(title="Rules")
    table.add_column("Code", style="bold")
    table.add_column("Severity")
    table.add_column("Scope", style="dim")
    table.add_column("Summary")
    for rule in rules:
        severity = overrides.get(rule.code, rule.default_severity)
        _, color = SEVERITY_STYLES[severity]
        label = f"[{color}]{severity.value}[/{color}]"
        if rule.code in ignored:
            label = "[dim]ignored[/dim]"
        elif rule.code in overrides:
            label += " [dim](configured)[/dim]"
        table.add_row(rule.code, label, rule.scope.value, escape(rule.summary))
    return table


def render_vocabulary_table(vocabulary: Mapping[str, VocabularyEntry], *, variants_only: bool = False) -> Table:
    table = Table(title="Vocabulary")
    table.add_column("Term", style="bold")
    table.add_column("Uses", justify="right")
    table.add_column("Fields", style="dim")
    table.add_column("Spellings")
    for entry in vocabulary.values():
        if variants_only and not entry.has_variants:
            continue
        spellings = ", ".join(f"{escape(s)} ({n})" for s, n in entry.spellings.most_common())
        style = "yellow" if entry.has_variants else None
        table.add_row(
            escape(entry.canonical),
            str(entry.count),
            ", ".join(sorted(entry.fields)),
            spellings,
            style=style,
        )
    return table


def render_posts_table(posts: Sequence[Post], *, base: Path | None = None) -> Table:
    table = Table(title="Posts")
    table.add_column("Last modified", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Tags")
    table.add_column("Path", style="dim")
    for post in posts:
        modified = post.last_modified_at
        table.add_row(
            modified.strftime("%Y-%m-%d %H:%M") if modified else "[dim]undated[/dim]",
            escape(post.display_title()),
            escape(", ".join((*post.categories, *post.tags))),
            escape(display_path(post.path, base)),
        )
    return table


__all__ = [
    "display_path",
    "render_json",
    "render_posts_table",
    "render_rules_table",
    "render_text",
    "render_vocabulary_table",
    "report_payload",
]
