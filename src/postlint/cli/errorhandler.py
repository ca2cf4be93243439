"""CLI error handling utilities."""

from collections.abc import Generator
from contextlib import contextmanager

import typer
from rich.console import Console

from postlint.config.exceptions import ConfigError, ConfigValidationError
from postlint.exceptions import NoPostsFoundError, PostlintError, PostPathNotFoundError
from postlint.rules import UnknownRuleError

EXIT_USAGE = 2

console = Console(stderr=True)


@contextmanager
def handle_cli_errors(*, debug: bool = False) -> Generator[None, None, None]:
    """Context manager to turn known errors into a message and exit code 2.

    Args:
        debug: If True, re-raise instead of printing a user-friendly error.

    """
    try:
        yield
    except (KeyboardInterrupt, SystemExit, typer.Exit):
        raise
    except ConfigValidationError as e:
        if debug:
            raise
        console.print(f"[bold red]⚙️ Invalid Configuration:[/bold red] {e}")
        for error in e.errors:
            loc = ".".join(str(part) for part in error.get("loc", ()))
            console.print(f"  - {loc}: {error.get('msg', '')}")
        raise typer.Exit(EXIT_USAGE) from e
    except ConfigError as e:
        if debug:
            raise
        console.print(f"[bold red]⚙️ Configuration Error:[/bold red] {e}")
        raise typer.Exit(EXIT_USAGE) from e
    except UnknownRuleError as e:
        if debug:
            raise
        console.print(f"[bold red]🔎 Unknown Rule:[/bold red] '{e.code}'")
        console.print(f"Available rules: {', '.join(e.available)}")
        raise typer.Exit(EXIT_USAGE) from e
    except (PostPathNotFoundError, NoPostsFoundError) as e:
        if debug:
            raise
        console.print(f"[bold red]📂 Nothing to lint:[/bold red] {e}")
        raise typer.Exit(EXIT_USAGE) from e
    except PostlintError as e:
        if debug:
            raise
        console.print(f"[bold red]🚨 Error:[/bold red] {e}")
        raise typer.Exit(EXIT_USAGE) from e
    except Exception as e:
        if debug:
            console.print_exception(show_locals=False)
            raise typer.Exit(EXIT_USAGE) from e

        console.print(f"[bold red]💥 An unexpected error occurred:[/bold red] {e}")
        console.print("[dim]Run with [bold]--debug[/bold] for more details.[/dim]")
        raise typer.Exit(EXIT_USAGE) from e
