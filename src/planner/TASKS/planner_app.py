# TASKS/planner_app.py
import logging
import typer
from rich.console import Console
from rich.markup import escape
from typing import Optional, List
from planner.config import PlannerConfig, load_config
from planner.errors import NotFound, PlannerError, InvalidParent
from planner.TASKS.model import Task, parse_timestamp, parse_resources
from planner.TASKS.display import print_task_list
from planner.TASKS.schedule import refit_ancestry
from planner.TASKS.store import (
    load_tasks, save_tasks, init_store, next_available_id, get_task_by_id,
    remove_task, complete_task
)

logger = logging.getLogger(__name__)

console = Console(soft_wrap=True)

planner_app = typer.Typer(help="A points-based command-line task planner.", no_args_is_help=True)


def _get_config(ctx: typer.Context) -> PlannerConfig:
    if isinstance(ctx.obj, PlannerConfig):
        return ctx.obj
    return load_config()


def _fail(error: Exception) -> None:
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise typer.Exit(code=1)


def _load(config: PlannerConfig) -> List[Task]:
    try:
        return load_tasks(config.store_path)
    except PlannerError as e:
        _fail(e)


@planner_app.command("init")
def init_planner(
    ctx: typer.Context,
    dir: Optional[str] = typer.Argument(None, help="The directory where planner should be initialized."),
):
    """Initialise the planner with an empty task list."""
    config = _get_config(ctx)
    try:
        init_store(config.store_path)
    except PlannerError as e:
        _fail(e)

    # The directory is only reported; the store always lives at the configured path.
    shown_dir = dir if dir else str(config.store_path.parent.resolve())
    console.print(f"Initialized planner in directory: {escape(shown_dir)}")


@planner_app.command("add")
def add_task(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="The name of the task."),
    points: int = typer.Option(..., "--points", "-p", min=0, help="How many points the task should reward."),
    due_date: Optional[str] = typer.Option(None, "--due-date", "-d", help="Due date, given as 'yyyy-mm-dd HH:MM:SS'."),
    start_time: Optional[str] = typer.Option(None, "--start-time", "-s", help="Start time, given as 'yyyy-mm-dd HH:MM:SS'."),
    priority: int = typer.Option(0, "--priority", help="Priority of the task (informational)."),
    parent_id: Optional[int] = typer.Option(None, "--parent-id", "-P", min=0, help="ID of the parent task."),
    resources: Optional[str] = typer.Option(None, "--resources", "-r", help="Comma-separated resources the task needs."),
):
    """Add a task, optionally as a subtask of another one."""
    config = _get_config(ctx)
    tasks = _load(config)

    try:
        if parent_id is not None and get_task_by_id(tasks, parent_id) is None:
            raise InvalidParent(parent_id)

        new_task = Task(
            name=name,
            points=points,
            id=next_available_id(tasks),
            due_date=parse_timestamp(due_date) if due_date else None,
            start_time=parse_timestamp(start_time) if start_time else None,
            priority=priority,
            parent=parent_id,
            resources=parse_resources(resources),
        )
        tasks.append(new_task)

        if parent_id is not None:
            root_id = refit_ancestry(tasks, parent_id)
            logger.debug(f"Refitted schedule from task #{root_id} down")

        save_tasks(tasks, config.store_path)
    except (PlannerError, ValueError) as e:
        _fail(e)

    console.print(f"Added task '{escape(new_task.name)}' (#{new_task.id})")


@planner_app.command("rm")
def remove_task_command(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="The id of the task."),
):
    """Remove a task. Its subtasks become top-level tasks."""
    config = _get_config(ctx)
    tasks = _load(config)

    try:
        removed = remove_task(tasks, task_id)
        save_tasks(tasks, config.store_path)
    except NotFound:
        console.print("Task not found")
        return
    except PlannerError as e:
        _fail(e)

    console.print(f"Removed task '{escape(removed.name)}'")


@planner_app.command("check")
def check_task_command(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="The id of the task."),
):
    """Mark a task as complete. All of its subtasks must be complete first."""
    config = _get_config(ctx)
    tasks = _load(config)

    try:
        checked = complete_task(tasks, task_id)
        save_tasks(tasks, config.store_path)
    except NotFound:
        console.print("Task not found")
        return
    except PlannerError as e:
        _fail(e)

    console.print(f"Checked off task '{escape(checked.name)}'")


@planner_app.command("list")
def list_tasks(ctx: typer.Context):
    """List all current tasks as a tree, with the points earned so far."""
    config = _get_config(ctx)
    tasks = _load(config)

    try:
        print_task_list(tasks, console)
    except PlannerError as e:
        _fail(e)
