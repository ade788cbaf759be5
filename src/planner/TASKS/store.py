# TASKS/store.py
import json
import logging
import os
import tempfile
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional
from planner.errors import CorruptData, IncompleteChildren, IoFailure, NotFound, NotInitialized
from .model import Task

logger = logging.getLogger(__name__)


def load_tasks(store_path: Path) -> List[Task]:
    """Reads the whole task collection from the store file, in stored order."""
    if not store_path.exists():
        raise NotInitialized(store_path)

    try:
        with open(store_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CorruptData(f"{store_path} is not valid JSON: {e}")
    except OSError as e:
        raise IoFailure(f"Could not read {store_path}: {e}")

    if not isinstance(data, dict) or not isinstance(data.get("tasks"), list):
        raise CorruptData(f"{store_path} does not contain a 'tasks' list")

    tasks = []
    seen_ids = set()
    for position, raw in enumerate(data["tasks"]):
        if not isinstance(raw, dict):
            raise CorruptData(f"Entry {position} in {store_path} is not an object")
        try:
            task = Task.from_dict(raw)
        except (KeyError, TypeError, ValueError) as e:
            raise CorruptData(f"Entry {position} in {store_path} is malformed: {e}")
        if task.id in seen_ids:
            raise CorruptData(f"Duplicate task id #{task.id} in {store_path}")
        seen_ids.add(task.id)
        tasks.append(task)

    for task in tasks:
        if task.parent is not None and task.parent not in seen_ids:
            logger.warning(f"Task #{task.id} points at missing parent #{task.parent}, treating it as top-level")

    logger.debug(f"Loaded {len(tasks)} task(s) from {store_path}")
    return tasks


def save_tasks(tasks: List[Task], store_path: Path) -> None:
    """Rewrites the store file with the full collection via tempfile + rename."""
    content = json.dumps({"tasks": [task.to_dict() for task in tasks]}, indent=4)
    try:
        store_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{store_path.name}.", suffix=".tmp", dir=str(store_path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(content)
            os.replace(tmp_name, store_path)
        finally:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
    except OSError as e:
        raise IoFailure(f"Could not write to {store_path}: {e}")
    logger.debug(f"Saved {len(tasks)} task(s) to {store_path}")


def init_store(store_path: Path) -> None:
    """Creates (or resets) the store with an empty collection."""
    save_tasks([], store_path)


def next_available_id(tasks: List[Task]) -> int:
    """Smallest non-negative integer not used by any task."""
    used = {task.id for task in tasks}
    candidate = 0
    while candidate in used:
        candidate += 1
    return candidate


def index_tasks(tasks: List[Task]) -> Dict[int, Task]:
    return {task.id: task for task in tasks}


def get_task_by_id(tasks: List[Task], task_id: int) -> Optional[Task]:
    for task in tasks:
        if task.id == task_id:
            return task
    return None


def resolve_parent(task: Task, tasks_by_id: Dict[int, Task]) -> Optional[int]:
    """
    Returns the task's parent id, or None when it has no parent or the
    parent no longer exists. Dangling parents make the task top-level.
    """
    if task.parent is None:
        return None
    if task.parent not in tasks_by_id:
        return None
    return task.parent


def build_children_map(tasks: List[Task]) -> Dict[Optional[int], List[Task]]:
    """Maps each parent id (None for top-level) to its direct children, in stored order."""
    tasks_by_id = index_tasks(tasks)
    children_map = defaultdict(list)
    for task in tasks:
        children_map[resolve_parent(task, tasks_by_id)].append(task)
    return children_map


def get_children_of_task(tasks: List[Task], parent_id: int) -> List[Task]:
    """Retrieves all immediate children of a given parent task."""
    return [task for task in tasks if task.parent == parent_id]


def remove_task(tasks: List[Task], task_id: int) -> Task:
    """
    Removes a task from the collection in place and returns it.
    Its direct children become top-level; grandchildren are left alone.
    """
    task = get_task_by_id(tasks, task_id)
    if task is None:
        raise NotFound(task_id)
    tasks.remove(task)
    for child in get_children_of_task(tasks, task_id):
        child.parent = None
        logger.debug(f"Task #{child.id} moved to top level after removing #{task_id}")
    return task


def complete_task(tasks: List[Task], task_id: int) -> Task:
    """
    Marks a task complete in place. Refused while any direct child is
    still incomplete, in which case nothing is changed.
    """
    task = get_task_by_id(tasks, task_id)
    if task is None:
        raise NotFound(task_id)
    pending = [child.id for child in get_children_of_task(tasks, task_id) if not child.complete]
    if pending:
        raise IncompleteChildren(task_id, pending)
    task.complete = True
    return task
