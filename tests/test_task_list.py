# tests/test_task_list.py

from __future__ import annotations

from datetime import datetime

import pytest

from day_planner.core.errors import NotFoundError, ValidationError
from day_planner.tasks.task_list import TaskList, status_of
from day_planner.tasks.task_models import TaskStatus
from day_planner.tasks.task_registry import RecurringTaskRegistry

from .fakes import FakeStateRepo, make_task


def _at(hh: int, mm: int, ss: int = 0) -> datetime:
    return datetime(2026, 10, 19, hh, mm, ss)


@pytest.mark.parametrize(
    ("now", "expected"),
    [
        (_at(8, 59), TaskStatus.UPCOMING),
        (_at(9, 0), TaskStatus.CURRENT),
        (_at(9, 30), TaskStatus.CURRENT),
        (_at(10, 0), TaskStatus.CURRENT),
        (_at(10, 1), TaskStatus.OVERDUE),
    ],
)
def test_status_of_follows_the_time_window(now: datetime, expected: TaskStatus) -> None:
    task = make_task("1", start="09:00", end="10:00")
    assert status_of(task, now) is expected


@pytest.mark.parametrize("now", [_at(8, 0), _at(9, 30), _at(23, 59)])
def test_completed_wins_regardless_of_time(now: datetime) -> None:
    task = make_task("1", start="09:00", end="10:00", completed=True)
    assert status_of(task, now) is TaskStatus.COMPLETED


def test_add_rejects_inverted_window_without_changing_list() -> None:
    tl = TaskList([make_task("1")])

    with pytest.raises(ValidationError):
        tl.add(make_task("2", start="10:00", end="09:00"))

    assert [t.id for t in tl] == ["1"]


@pytest.mark.parametrize(
    ("name", "start", "end"),
    [("", "09:00", "10:00"), ("   ", "09:00", "10:00"), ("x", "", "10:00"), ("x", "9am", "10:00"), ("x", "09:00", "09:00")],
)
def test_add_validation_cases(name: str, start: str, end: str) -> None:
    tl = TaskList()
    with pytest.raises(ValidationError):
        tl.add(make_task("1", name, start, end))
    assert len(tl) == 0


def test_add_rejects_duplicate_id() -> None:
    tl = TaskList([make_task("1")])
    with pytest.raises(ValidationError):
        tl.add(make_task("1", "other"))


def test_sort_is_stable_for_equal_start_times() -> None:
    tl = TaskList(
        [
            make_task("a", "late", "11:00", "12:00"),
            make_task("b", "first-nine", "09:00", "09:30"),
            make_task("c", "early", "07:00", "08:00"),
            make_task("d", "second-nine", "09:00", "10:00"),
        ]
    )

    tl.sort_by_start_time()

    assert [t.id for t in tl] == ["c", "b", "d", "a"]


def test_toggle_flips_and_reports_missing_ids() -> None:
    tl = TaskList([make_task("1")])

    assert tl.toggle_complete("1").completed is True
    assert tl.toggle_complete("1").completed is False

    with pytest.raises(NotFoundError) as exc:
        tl.toggle_complete("nope")
    assert exc.value.task_id == "nope"


def test_delete_instance_only_keeps_template() -> None:
    repo = FakeStateRepo()
    reg = RecurringTaskRegistry(repo)
    reg.seed_defaults()
    tl = TaskList([make_task("r1", "Wake Up", "07:00", "07:30", recurring=True)])

    tl.delete("r1")

    assert len(tl) == 0
    assert "Wake Up" in reg


def test_delete_with_template_removes_both() -> None:
    repo = FakeStateRepo()
    reg = RecurringTaskRegistry(repo)
    reg.seed_defaults()
    tl = TaskList(
        [make_task("r1", "Wake Up", "07:00", "07:30", recurring=True), make_task("1", "Gym")]
    )

    removed = tl.delete_with_template("r1", reg)

    assert removed.name == "Wake Up"
    assert [t.id for t in tl] == ["1"]
    assert "Wake Up" not in reg
    assert len(reg) == 2


def test_delete_missing_raises_not_found() -> None:
    with pytest.raises(NotFoundError):
        TaskList().delete("x")


def test_clear_one_time_keeps_recurring() -> None:
    tl = TaskList(
        [make_task("1"), make_task("r", "Wake Up", recurring=True), make_task("2", "Other")]
    )

    assert tl.clear_one_time() == 2
    assert [t.id for t in tl] == ["r"]
    assert tl.clear_one_time() == 0


def test_snapshot_is_not_affected_by_later_mutations() -> None:
    tl = TaskList([make_task("1"), make_task("2", "b")])
    snap = tl.snapshot()

    tl.delete("1")
    tl.toggle_complete("2")

    assert [t.id for t in snap] == ["1", "2"]
    assert snap[1].completed is False


def test_statuses_pairs_every_task() -> None:
    tl = TaskList([make_task("1", start="09:00", end="10:00"), make_task("2", start="11:00", end="12:00")])
    pairs = tl.statuses(_at(9, 15))
    assert [(t.id, s) for t, s in pairs] == [("1", TaskStatus.CURRENT), ("2", TaskStatus.UPCOMING)]
