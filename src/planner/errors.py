# planner/errors.py
class PlannerError(Exception):
    """Base class for every failure the planner reports to the user."""


class NotInitialized(PlannerError):
    def __init__(self, path):
        super().__init__(f"Meta file does not exist at {path}, use 'planner init' to create it")
        self.path = path


class CorruptData(PlannerError):
    pass


class ParseFailure(PlannerError):
    pass


class InvalidParent(PlannerError):
    def __init__(self, parent_id: int):
        super().__init__(f"Parent task #{parent_id} does not exist")
        self.parent_id = parent_id


class IncompleteChildren(PlannerError):
    def __init__(self, task_id: int, pending_ids):
        pending = ", ".join(f"#{i}" for i in pending_ids)
        super().__init__(f"Task #{task_id} still has incomplete subtasks: {pending}")
        self.task_id = task_id
        self.pending_ids = list(pending_ids)


class NotFound(PlannerError):
    def __init__(self, task_id: int):
        super().__init__("Task not found")
        self.task_id = task_id


class IoFailure(PlannerError):
    pass


class CyclicHierarchy(PlannerError):
    def __init__(self, task_ids):
        ids = ", ".join(f"#{i}" for i in sorted(task_ids))
        super().__init__(f"Parent links form a cycle between tasks: {ids}")
        self.task_ids = sorted(task_ids)
