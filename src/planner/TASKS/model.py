# TASKS/model.py
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from datetime import datetime
from planner.errors import ParseFailure

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class Task:
    name: str
    points: int
    id: int = 0
    complete: bool = False
    due_date: Optional[datetime] = None
    start_time: Optional[datetime] = None
    priority: int = 0  # informational only
    parent: Optional[int] = None  # id of the parent task, None for top-level
    resources: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.name = self.name.strip()
        if not self.name:
            raise ValueError("Task name must not be empty")
        if self.points < 0:
            raise ValueError("Task points must not be negative")
        if self.id < 0:
            raise ValueError("Task id must not be negative")

    def __repr__(self):
        return (f"Task(id={self.id}, name='{self.name}', points={self.points}, "
                f"complete={self.complete}, start_time='{self.start_time}', "
                f"due_date='{self.due_date}', parent={self.parent})")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "points": self.points,
            "id": self.id,
            "complete": self.complete,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "priority": self.priority,
            "parent": self.parent,
            "resources": list(self.resources),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Rebuild a task from its stored form. Missing optional fields fall back to defaults."""
        for key, kind in (("id", int), ("points", int), ("priority", int)):
            value = data.get(key, 0 if key == "priority" else None)
            if not isinstance(value, kind) or isinstance(value, bool):
                raise ValueError(f"'{key}' must be an integer, got {value!r}")
        if not isinstance(data.get("name"), str):
            raise ValueError(f"'name' must be a string, got {data.get('name')!r}")
        parent = data.get("parent")
        if parent is not None and (not isinstance(parent, int) or isinstance(parent, bool)):
            raise ValueError(f"'parent' must be an integer or null, got {parent!r}")
        complete = data.get("complete", False)
        if not isinstance(complete, bool):
            raise ValueError(f"'complete' must be true or false, got {complete!r}")
        resources = data.get("resources") or []
        if not isinstance(resources, list) or not all(isinstance(r, str) for r in resources):
            raise ValueError("'resources' must be a list of strings")

        return cls(
            name=data["name"],
            points=data["points"],
            id=data["id"],
            complete=complete,
            due_date=_load_timestamp(data.get("due_date")),
            start_time=_load_timestamp(data.get("start_time")),
            priority=data.get("priority", 0),
            parent=parent,
            resources=list(resources),
        )


def _load_timestamp(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    dt = datetime.fromisoformat(value)
    # naive values in old files are taken as local time
    return dt if dt.tzinfo else dt.astimezone()


def parse_timestamp(value: str) -> datetime:
    """Parse 'yyyy-mm-dd HH:MM:SS' as local time and return a timezone-aware datetime."""
    try:
        naive = datetime.strptime(value.strip(), TIMESTAMP_FORMAT)
    except ValueError:
        raise ParseFailure(f"Invalid date '{value}', expected format 'yyyy-mm-dd HH:MM:SS'")
    return naive.astimezone()


def parse_resources(resources_str: Optional[str]) -> List[str]:
    """Split a comma separated resource list, dropping blank entries. Order and repeats are kept."""
    if not resources_str:
        return []
    return [r.strip() for r in resources_str.split(',') if r.strip()]
