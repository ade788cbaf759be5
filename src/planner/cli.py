import logging
import typer
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.logging import RichHandler
from planner.config import load_config
from planner.TASKS.planner_app import planner_app

app = planner_app


def configure_logging(level: str) -> None:
    root = logging.getLogger()
    handler = next((h for h in root.handlers if isinstance(h, RichHandler)), None)
    if handler is None:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    root.setLevel(level)


@app.callback()
def main_callback(
    ctx: typer.Context,
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Path of the planner store (default: ./planner.json)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
):
    """Plan tasks, subtasks and the points they are worth."""
    config = load_config(store_path=file, verbose=verbose)
    configure_logging(config.log_level)
    ctx.obj = config


def main():
    app()


if __name__ == "__main__":
    main()
