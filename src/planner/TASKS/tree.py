# TASKS/tree.py
"""
Builds the task forest from the flat collection.

Node 0 is a synthetic root standing for "no parent"; every other node holds
one task and the indices of its direct children. Nodes are addressed by
their position in the returned list.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from planner.errors import CyclicHierarchy
from .model import Task
from .store import index_tasks, resolve_parent

logger = logging.getLogger(__name__)

ROOT = 0


@dataclass
class TaskNode:
    task: Optional[Task] = None
    children: List[int] = field(default_factory=list)


def build_task_tree(tasks: List[Task]) -> List[TaskNode]:
    """
    Places every task under the node of its parent.

    Tasks are taken from the back of the collection; a task whose parent has
    not been placed yet goes to the end of the queue. A full pass over the
    queue that places nothing means the remaining tasks only point at each
    other, which is reported as CyclicHierarchy.
    """
    tasks_by_id = index_tasks(tasks)
    nodes: List[TaskNode] = [TaskNode()]
    node_for_task: Dict[Optional[int], int] = {None: ROOT}

    pending = deque(reversed(tasks))
    misses = 0
    while pending:
        task = pending.popleft()
        parent_node = node_for_task.get(resolve_parent(task, tasks_by_id))
        if parent_node is None:
            pending.append(task)
            misses += 1
            if misses >= len(pending):
                raise CyclicHierarchy([t.id for t in pending])
            continue

        misses = 0
        nodes.append(TaskNode(task=task))
        node_for_task[task.id] = len(nodes) - 1
        nodes[parent_node].children.append(len(nodes) - 1)

    logger.debug(f"Built task tree with {len(nodes) - 1} task node(s)")
    return nodes


def walk_tree(nodes: List[TaskNode], start: int = ROOT, level: int = 0):
    """Yields (node, depth) depth-first, children ordered by task id. The synthetic root is skipped."""
    stack = [(start, level)]
    while stack:
        index, depth = stack.pop()
        node = nodes[index]
        if node.task is not None:
            yield node, depth
            depth += 1
        for child in sorted(node.children, key=lambda i: nodes[i].task.id, reverse=True):
            stack.append((child, depth))
