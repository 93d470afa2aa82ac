"""Gatehouse command line entry point."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import describe_settings, load_config
from .logging_config import setup_logging
from .server import run

app = typer.Typer(help="Gatehouse web application server", no_args_is_help=True)
console = Console()

EnvFileOption = typer.Option(
    Path(".env"), "--env-file", help="Override file merged under the environment"
)
LogLevelOption = typer.Option("INFO", "--log-level", help="Log level name")


@app.command()
def serve(
    env_file: Path = EnvFileOption,
    log_level: str = LogLevelOption,
) -> None:
    """Validate the environment, connect the database and start serving."""
    setup_logging(log_level)
    settings = load_config(env_file)
    if settings.is_production:
        setup_logging(log_level, json_logs=True)

    exit_code = run(settings)
    if exit_code:
        raise typer.Exit(code=exit_code)


@app.command("check-config")
def check_config(
    env_file: Path = EnvFileOption,
    log_level: str = LogLevelOption,
) -> None:
    """Validate the environment and print the resolved settings."""
    setup_logging(log_level)
    settings = load_config(env_file)

    table = Table(title="Resolved configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for name, value in describe_settings(settings).items():
        table.add_row(name, Text(value))
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
