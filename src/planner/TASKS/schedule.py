# TASKS/schedule.py
"""
Fits parent tasks to the time window of their children.

A task with children gets start_time = earliest child start and
due_date = latest child due date, computed bottom-up so grandchildren
count too. Childless tasks keep whatever was set on them.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional, Set, Tuple
from planner.errors import CyclicHierarchy
from .model import Task
from .store import build_children_map, index_tasks, resolve_parent

logger = logging.getLogger(__name__)


def _earliest(values: List[Optional[datetime]]) -> Optional[datetime]:
    present = [v for v in values if v is not None]
    return min(present) if present else None


def _latest(values: List[Optional[datetime]]) -> Optional[datetime]:
    present = [v for v in values if v is not None]
    return max(present) if present else None


def fit_task_size_to_children(tasks: List[Task], task_id: int) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    Recomputes the window of task_id and every descendant with children,
    writing the results onto the tasks in place.

    Returns the (start_time, due_date) now stored on task_id.
    """
    tasks_by_id = index_tasks(tasks)
    children_map = build_children_map(tasks)
    top = tasks_by_id[task_id]
    for task in _post_order(top, children_map):
        children = children_map[task.id]
        task.start_time = _earliest([child.start_time for child in children])
        task.due_date = _latest([child.due_date for child in children])
        logger.debug(f"Fitted task #{task.id} to {task.start_time} .. {task.due_date}")
    return top.start_time, top.due_date


def _post_order(top: Task, children_map: Dict[Optional[int], List[Task]]) -> List[Task]:
    """Tasks with children under top (inclusive), each one after all of its descendants."""
    order = []
    on_path: Set[int] = set()
    stack = [(top, False)]
    while stack:
        task, expanded = stack.pop()
        if expanded:
            on_path.discard(task.id)
            order.append(task)
            continue
        if not children_map.get(task.id):
            continue
        if task.id in on_path:
            raise CyclicHierarchy(on_path)
        on_path.add(task.id)
        stack.append((task, True))
        for child in reversed(children_map[task.id]):
            stack.append((child, False))
    return order


def find_root_ancestor(tasks: List[Task], task_id: int) -> int:
    """Follows parent links up from task_id to the top-level task of its chain."""
    tasks_by_id = index_tasks(tasks)
    seen = [task_id]
    current = tasks_by_id[task_id]
    parent_id = resolve_parent(current, tasks_by_id)
    while parent_id is not None:
        if parent_id in seen:
            raise CyclicHierarchy(seen)
        seen.append(parent_id)
        current = tasks_by_id[parent_id]
        parent_id = resolve_parent(current, tasks_by_id)
    return current.id


def refit_ancestry(tasks: List[Task], parent_id: int) -> int:
    """
    Refits the whole chain above a newly added child: climbs from its parent
    to the top-level ancestor, then fits downward from there.

    Returns the id of the ancestor the fit started from.
    """
    root_id = find_root_ancestor(tasks, parent_id)
    fit_task_size_to_children(tasks, root_id)
    return root_id
