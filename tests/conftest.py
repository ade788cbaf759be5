"""
Pytest configuration and fixtures for planner tests.
"""

import pytest
from datetime import datetime, timezone


@pytest.fixture
def store_path(tmp_path):
    """Path of a store file inside a temporary directory (not created yet)."""
    return tmp_path / "planner.json"


@pytest.fixture
def at():
    """Builds timezone-aware datetimes on 2024-01-<day> from (day, hour, minute)."""
    def _at(day, hour=0, minute=0):
        return datetime(2024, 1, day, hour, minute, tzinfo=timezone.utc)
    return _at


@pytest.fixture
def project_tasks(at):
    """
    A three level hierarchy:

        #0 Release
          #1 Backend
            #3 API      (Jan 2 09:00 - Jan 4 17:00)
            #4 Storage  (Jan 1 08:00 - Jan 3 12:00)
          #2 Docs       (Jan 5 10:00 - Jan 6 10:00)
        #5 Holiday      (no dates)
    """
    from planner.TASKS.model import Task

    return [
        Task(name="Release", points=10, id=0),
        Task(name="Backend", points=8, id=1, parent=0),
        Task(name="Docs", points=3, id=2, parent=0, start_time=at(5, 10), due_date=at(6, 10)),
        Task(name="API", points=5, id=3, parent=1, start_time=at(2, 9), due_date=at(4, 17)),
        Task(name="Storage", points=5, id=4, parent=1, start_time=at(1, 8), due_date=at(3, 12)),
        Task(name="Holiday", points=1, id=5),
    ]


@pytest.fixture
def deep_chain(at):
    """1500 tasks, each the only child of the one before it. Only the last has dates."""
    from planner.TASKS.model import Task

    tasks = [Task(name=f"level {i}", points=1, id=i, parent=i - 1 if i else None) for i in range(1500)]
    tasks[-1].start_time = at(2, 9)
    tasks[-1].due_date = at(3, 17)
    return tasks
