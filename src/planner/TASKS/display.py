# TASKS/display.py
from datetime import datetime
from typing import List, Optional, Tuple
from rich.console import Console
from rich.text import Text
from .model import Task
from .tree import build_task_tree, walk_tree


def format_timestamp(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d at %H:%M:%S")


def time_left(due: datetime, now: datetime) -> str:
    """Remaining time until due as '(Xd Yh Zm left)', or how long ago it passed."""
    remaining = due - now
    overdue = remaining.total_seconds() < 0
    minutes = int(abs(remaining.total_seconds()) // 60)
    days, minutes = divmod(minutes, 24 * 60)
    hours, minutes = divmod(minutes, 60)
    if overdue:
        return f"(overdue by {days}d {hours}h {minutes}m)"
    return f"({days}d {hours}h {minutes}m left)"


def format_task_line(task: Task, level: int, now: datetime) -> Text:
    indent = "  " * level
    msg = f"{indent}#{task.id} {task.name} ({task.points} points)"
    if task.start_time:
        msg += f" starts {format_timestamp(task.start_time)}"
    if task.due_date:
        msg += f" due for {format_timestamp(task.due_date)} {time_left(task.due_date, now)}"
    if task.resources:
        msg += f" [{', '.join(task.resources)}]"
    return Text(msg, style="green" if task.complete else "")


def render_task_tree(tasks: List[Task], now: Optional[datetime] = None) -> List[Text]:
    """One line per task, depth-first, indented two spaces per level."""
    now = now or datetime.now().astimezone()
    nodes = build_task_tree(tasks)
    return [format_task_line(node.task, level, now) for node, level in walk_tree(nodes)]


def completion_stats(tasks: List[Task]) -> Tuple[int, int, int]:
    """Returns (points earned, points available, whole percent earned)."""
    earned = sum(t.points for t in tasks if t.complete)
    available = sum(t.points for t in tasks)
    percent = earned * 100 // available if available else 0
    return earned, available, percent


def summary_line(tasks: List[Task]) -> Text:
    earned, _, percent = completion_stats(tasks)
    if percent == 0:
        style = "red"
    elif percent == 100:
        style = "green"
    else:
        style = "yellow"
    return Text(f"Total points: {earned} ({percent}%)", style=style)


def print_task_list(tasks: List[Task], console: Console, now: Optional[datetime] = None) -> None:
    if not tasks:
        console.print("No tasks added")
        return

    lines = render_task_tree(tasks, now)
    console.print("Tasks:")
    for line in lines:
        console.print(line)
    console.print(summary_line(tasks))
