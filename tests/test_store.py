"""
Tests for the JSON task store and collection helpers.
"""

import json
import logging
import pytest


def test_load_without_store_raises_not_initialized(store_path):
    from planner.TASKS.store import load_tasks
    from planner.errors import NotInitialized

    with pytest.raises(NotInitialized):
        load_tasks(store_path)


def test_init_store_writes_empty_collection(store_path):
    from planner.TASKS.store import init_store, load_tasks

    init_store(store_path)

    assert json.loads(store_path.read_text()) == {"tasks": []}
    assert load_tasks(store_path) == []


def test_save_then_load_keeps_order_and_fields(store_path, project_tasks):
    from planner.TASKS.store import save_tasks, load_tasks

    save_tasks(project_tasks, store_path)
    loaded = load_tasks(store_path)

    assert [t.id for t in loaded] == [0, 1, 2, 3, 4, 5]
    assert loaded == project_tasks


def test_save_leaves_no_temp_files(store_path, project_tasks):
    from planner.TASKS.store import save_tasks

    save_tasks(project_tasks, store_path)
    save_tasks(project_tasks[:2], store_path)

    assert [p.name for p in store_path.parent.iterdir()] == ["planner.json"]


@pytest.mark.parametrize("content", [
    "not json at all",
    "[]",
    '{"items": []}',
    '{"tasks": [1, 2]}',
    '{"tasks": [{"name": "x", "id": 0}]}',
])
def test_load_malformed_store_raises_corrupt_data(store_path, content):
    from planner.TASKS.store import load_tasks
    from planner.errors import CorruptData

    store_path.write_text(content)

    with pytest.raises(CorruptData):
        load_tasks(store_path)


def test_load_rejects_duplicate_ids(store_path):
    from planner.TASKS.store import load_tasks
    from planner.errors import CorruptData

    store_path.write_text(json.dumps({"tasks": [
        {"name": "a", "points": 1, "id": 3},
        {"name": "b", "points": 1, "id": 3},
    ]}))

    with pytest.raises(CorruptData, match="Duplicate task id #3"):
        load_tasks(store_path)


def test_save_into_unwritable_location_raises_io_failure(tmp_path):
    from planner.TASKS.store import save_tasks
    from planner.errors import IoFailure

    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")

    with pytest.raises(IoFailure):
        save_tasks([], blocker / "planner.json")


@pytest.mark.parametrize("ids, expected", [
    ([], 0),
    ([0, 1, 3], 2),
    ([1, 2], 0),
    ([2, 0, 1], 3),
])
def test_next_available_id_is_lowest_free(ids, expected):
    from planner.TASKS.model import Task
    from planner.TASKS.store import next_available_id

    tasks = [Task(name=f"t{i}", points=1, id=i) for i in ids]

    assert next_available_id(tasks) == expected


def test_resolve_parent_treats_dangling_as_top_level(project_tasks):
    from planner.TASKS.model import Task
    from planner.TASKS.store import index_tasks, resolve_parent

    orphan = Task(name="Orphan", points=1, id=9, parent=42)
    by_id = index_tasks(project_tasks + [orphan])

    assert resolve_parent(orphan, by_id) is None
    assert resolve_parent(by_id[3], by_id) == 1
    assert resolve_parent(by_id[0], by_id) is None


def test_build_children_map(project_tasks):
    from planner.TASKS.store import build_children_map

    children_map = build_children_map(project_tasks)

    assert [t.id for t in children_map[None]] == [0, 5]
    assert [t.id for t in children_map[0]] == [1, 2]
    assert [t.id for t in children_map[1]] == [3, 4]
    assert children_map.get(3, []) == []


def test_remove_task_orphans_direct_children_only(project_tasks):
    from planner.TASKS.store import remove_task, get_task_by_id

    removed = remove_task(project_tasks, 0)

    assert removed.name == "Release"
    assert get_task_by_id(project_tasks, 0) is None
    assert get_task_by_id(project_tasks, 1).parent is None
    assert get_task_by_id(project_tasks, 2).parent is None
    assert get_task_by_id(project_tasks, 3).parent == 1
    assert get_task_by_id(project_tasks, 4).parent == 1
    assert len(project_tasks) == 5


def test_remove_missing_task_raises_not_found(project_tasks):
    from planner.TASKS.store import remove_task
    from planner.errors import NotFound

    with pytest.raises(NotFound):
        remove_task(project_tasks, 99)
    assert len(project_tasks) == 6


def test_complete_task_gate(project_tasks):
    from planner.TASKS.store import complete_task, get_task_by_id
    from planner.errors import IncompleteChildren

    with pytest.raises(IncompleteChildren) as excinfo:
        complete_task(project_tasks, 1)
    assert excinfo.value.pending_ids == [3, 4]
    assert get_task_by_id(project_tasks, 1).complete is False

    complete_task(project_tasks, 3)
    complete_task(project_tasks, 4)
    checked = complete_task(project_tasks, 1)

    assert checked.complete is True


def test_complete_task_only_checks_direct_children(project_tasks):
    from planner.TASKS.store import complete_task
    from planner.errors import IncompleteChildren

    # Backend (#1) is still open, so Release (#0) is refused even though Docs is done
    complete_task(project_tasks, 2)
    with pytest.raises(IncompleteChildren) as excinfo:
        complete_task(project_tasks, 0)
    assert excinfo.value.pending_ids == [1]


def test_complete_missing_task_raises_not_found(project_tasks):
    from planner.TASKS.store import complete_task
    from planner.errors import NotFound

    with pytest.raises(NotFound):
        complete_task(project_tasks, 99)


def test_dangling_parent_warned_once_per_load(store_path, caplog):
    from planner.TASKS.model import Task
    from planner.TASKS.store import save_tasks, load_tasks, build_children_map
    from planner.TASKS.tree import build_task_tree

    save_tasks([
        Task(name="child", points=1, id=0, parent=1),
        Task(name="orphan", points=1, id=1, parent=42),
    ], store_path)

    with caplog.at_level(logging.WARNING, logger="planner.TASKS.store"):
        tasks = load_tasks(store_path)
        build_task_tree(tasks)
        build_children_map(tasks)

    warnings = [r for r in caplog.records if "missing parent" in r.getMessage()]
    assert len(warnings) == 1
    assert "#42" in warnings[0].getMessage()
