"""Typer CLI application for Suggest Analyzer.

Provides commands to analyse a seed keyword, inspect raw autocomplete
suggestions, check configuration status, and store API keys.
"""

import asyncio
import logging
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.text import Text

from suggest_analyzer.settings import DEFAULT_CONFIG_PATH

console = Console()
app = typer.Typer(
    name="suggest-analyzer",
    help="Suggest Analyzer -- competitive keyword reports from Google autocomplete.",
    add_completion=False,
    no_args_is_help=True,
)


def _resolve_log_level(verbose: bool = False, env_path: str = ".env") -> int:
    """Pick the console log level: --verbose wins, then LOG_LEVEL, then INFO."""
    if verbose:
        return logging.DEBUG
    from suggest_analyzer.utils.env_manager import EnvManager
    name = EnvManager(env_path).get_key("LOG_LEVEL")
    level = logging.getLevelName(name.strip().upper()) if name else logging.INFO
    return level if isinstance(level, int) else logging.INFO


def _setup_logging(verbose: bool = False, env_path: str = ".env") -> None:
    """Configure logging level and format."""
    logging.basicConfig(
        level=_resolve_log_level(verbose, env_path),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _run_async(coro):
    """Run an async coroutine from synchronous CLI context."""
    return asyncio.run(coro)


def _get_app(config_path: str, env_path: str):
    """Lazy-import, initialise and return a SuggestAnalyzerApp."""
    from suggest_analyzer.app import SuggestAnalyzerApp
    analyzer_app = SuggestAnalyzerApp(config_path=config_path, env_path=env_path)
    analyzer_app.initialize()
    return analyzer_app


# ------------------------------------------------------------------
# analyze
# ------------------------------------------------------------------
@app.command()
def analyze(
    keyword: str = typer.Argument(..., help="Seed keyword to analyse."),
    count: Optional[int] = typer.Option(
        None, "--count", "-n", min=1, help="Number of keywords in the report.",
    ),
    config: str = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="Path to settings YAML."),
    env: str = typer.Option(".env", "--env", "-e", help="Path to .env file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Fetch suggestions for KEYWORD, score them and print the report."""
    _setup_logging(verbose, env)
    console.print(Panel(f"[bold cyan]Keyword Analysis: {keyword}[/bold cyan]"))
    analyzer_app = _get_app(config, env)

    with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"), console=console) as progress:
        progress.add_task(description="Analysing suggestions...", total=None)
        report = _run_async(analyzer_app.run_analysis(keyword, count=count))

    console.print(Panel(Text(report), title="Report", expand=True))


# ------------------------------------------------------------------
# suggest
# ------------------------------------------------------------------
@app.command()
def suggest(
    keyword: str = typer.Argument(..., help="Seed keyword."),
    config: str = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="Path to settings YAML."),
    env: str = typer.Option(".env", "--env", "-e", help="Path to .env file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Print the raw autocomplete suggestions for KEYWORD."""
    _setup_logging(verbose, env)
    analyzer_app = _get_app(config, env)
    suggestions = _run_async(analyzer_app.fetch_suggestions(keyword))

    if not suggestions:
        console.print("[yellow]No suggestions returned.[/yellow]")
        return

    table = Table(title="Suggestions for " + keyword, show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Suggestion")
    for i, text in enumerate(suggestions, start=1):
        table.add_row(str(i), Text(text))
    console.print(table)


# ------------------------------------------------------------------
# status
# ------------------------------------------------------------------
@app.command()
def status(
    config: str = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="Path to settings YAML."),
    env: str = typer.Option(".env", "--env", "-e", help="Path to .env file."),
) -> None:
    """Show which credentials and settings are in effect."""
    from suggest_analyzer.utils.env_manager import EnvManager

    analyzer_app = _get_app(config, env)

    keys = Table(title="Credentials", show_header=True, header_style="bold magenta")
    keys.add_column("Key", style="cyan", min_width=22)
    keys.add_column("Status", min_width=10)
    keys.add_column("Value")
    for name, info in EnvManager(env).get_status().items():
        mark = "[green]✔ set[/green]" if info["configured"] else "[yellow]○ unset[/yellow]"
        keys.add_row(name, mark, info["masked_value"])
    console.print(keys)

    table = Table(title="Components", show_header=True, header_style="bold magenta")
    table.add_column("Component", style="cyan", min_width=16)
    table.add_column("Status", min_width=10)
    table.add_column("Details", max_width=60)
    for component, info in analyzer_app.get_status().items():
        if info["status"] == "ok":
            mark = "[green]✔ OK[/green]"
        else:
            mark = "[yellow]⚠ Warning[/yellow]"
        table.add_row(component.replace("_", " ").title(), mark, info["details"])
    console.print(table)


# ------------------------------------------------------------------
# set-key
# ------------------------------------------------------------------
@app.command("set-key")
def set_key(
    name: str = typer.Argument(..., help="Key name, e.g. GEMINI_API_KEY."),
    value: str = typer.Argument(..., help="Key value."),
    env: str = typer.Option(".env", "--env", "-e", help="Path to .env file."),
) -> None:
    """Store an API key in the .env file."""
    from suggest_analyzer.utils.env_manager import EnvManager

    manager = EnvManager(env)
    if name not in manager.API_KEY_REGISTRY:
        console.print(f"[red]✘ Unknown key: {name}[/red]")
        raise typer.Exit(code=1)
    manager.set_key(name, value)
    console.print(f"[green]✔[/green] {name} saved to {manager.env_path}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
