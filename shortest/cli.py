"""
shortest-config: validate a shortest config file.

Prints the resolved configuration, or every validation problem found
and exits with status 1.
"""
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import DEFAULT_CONFIG_FILE, load_config, load_config_file
from .errors import ConfigValidationError, UnsupportedProviderError
from .llm import create_provider
from .models import StrictConfig
from .utils import EnvResolver

console = Console()

app = typer.Typer(
    help="Validate a shortest configuration file",
    add_completion=False,
)


def mask_secret(value: Optional[str]) -> str:
    if not value:
        return "-"
    if len(value) <= 8:
        return "****"
    return f"****{value[-4:]}"


def render_config(config: StrictConfig) -> Table:
    table = Table(title="Resolved configuration", show_header=False)
    table.add_column("key", style="cyan")
    table.add_column("value")

    ai = config.ai
    rows = [
        ("headless", str(config.headless)),
        ("baseUrl", config.base_url),
        ("testPattern", config.test_pattern),
        ("ai.provider", ai.provider),
        ("ai.model", getattr(ai, "model", None) or getattr(ai, "deployment", None) or "-"),
        ("ai.apiKey", mask_secret(getattr(ai, "api_key", None))),
        ("caching.enabled", str(config.caching.enabled)),
        ("mailbox", "configured" if config.mailbox else "-"),
    ]
    for key, value in rows:
        table.add_row(key, escape(str(value)))
    return table


def print_issues(error: ConfigValidationError) -> None:
    console.print(f"[bold red]Invalid configuration ({len(error.issues)} problem(s)):[/bold red]")
    for path, message in error.issues:
        console.print(f"  [red]✗[/red] {escape(path)}: {escape(message)}", soft_wrap=True)


@app.command()
def main(
    config_path: Path = typer.Argument(
        Path(DEFAULT_CONFIG_FILE), help="Python file defining a `config` mapping"
    ),
    headless: Optional[bool] = typer.Option(
        None, "--headless/--no-headless", help="Override the headless setting"
    ),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Override baseUrl"),
    test_pattern: Optional[str] = typer.Option(
        None, "--test-pattern", help="Override the test file glob"
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Disable caching"),
    debug: bool = typer.Option(False, "--debug", help="Log how each value was resolved"),
) -> None:
    """Validate CONFIG_PATH and build its AI provider client."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )

    try:
        raw = load_config_file(config_path)
        cli_options = {
            "headless": headless,
            "baseUrl": base_url,
            "testPattern": test_pattern,
            "noCache": no_cache,
        }
        config = load_config(raw, cli_options, env=EnvResolver.from_environ())
        create_provider(config.ai)
    except FileNotFoundError as e:
        console.print(f"[bold red]{escape(str(e))}[/bold red]", soft_wrap=True)
        raise typer.Exit(code=1)
    except ConfigValidationError as e:
        print_issues(e)
        raise typer.Exit(code=1)
    except UnsupportedProviderError as e:
        console.print(f"[bold red]AI provider error:[/bold red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(code=1)

    console.print(render_config(config))
    console.print("[bold green]Configuration is valid[/bold green]")


if __name__ == "__main__":
    app()
