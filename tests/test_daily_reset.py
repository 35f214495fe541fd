# tests/test_daily_reset.py

from __future__ import annotations

from datetime import date, datetime

from day_planner.tasks.daily_reset import materialize, maybe_reset, recurring_instance_id
from day_planner.tasks.task_models import RecurringTemplate

from .fakes import make_task

TODAY = date(2026, 10, 19)
YESTERDAY = date(2026, 10, 18)
NOW = datetime(2026, 10, 19, 6, 0)

TEMPLATES = [
    RecurringTemplate("Wake Up", "07:00", "07:30", "Start your day!"),
    RecurringTemplate("Brush Teeth", "07:30", "07:45"),
    RecurringTemplate("Morning Prayers", "07:45", "08:00"),
]


def test_same_day_is_a_no_op_and_repeatable() -> None:
    current = [make_task("1", "Gym"), make_task("r1", "Wake Up", recurring=True, completed=True)]

    first = maybe_reset(TODAY, TODAY, TEMPLATES, current, now=NOW)
    second = maybe_reset(TODAY, first.last_reset_date, TEMPLATES, first.tasks, now=NOW)

    assert first.did_reset is False
    assert second.did_reset is False
    assert first.tasks == current
    assert second.tasks == current
    assert second.last_reset_date == TODAY
    assert second.new_instances == []


def test_reset_then_check_again_same_day_does_nothing() -> None:
    first = maybe_reset(TODAY, YESTERDAY, TEMPLATES, [make_task("1")], now=NOW)
    second = maybe_reset(TODAY, first.last_reset_date, TEMPLATES, first.tasks, now=NOW)

    assert first.did_reset is True
    assert first.last_reset_date == TODAY
    assert second.did_reset is False
    assert second.tasks == first.tasks
    assert second.last_reset_date == TODAY


def test_reset_materializes_one_fresh_instance_per_template() -> None:
    stale = [
        make_task("old-1", "Wake Up", "07:00", "07:30", recurring=True, completed=True),
        make_task("old-2", "Brush Teeth", "07:30", "07:45", recurring=True),
    ]

    out = maybe_reset(TODAY, YESTERDAY, TEMPLATES, stale, now=NOW)

    recurring = [t for t in out.tasks if t.is_recurring]
    assert [t.name for t in recurring] == ["Wake Up", "Brush Teeth", "Morning Prayers"]
    assert len({t.id for t in recurring}) == len(TEMPLATES)
    assert not {"old-1", "old-2"} & {t.id for t in recurring}
    assert all(not t.completed for t in recurring)
    assert all(t.created_at == NOW for t in recurring)
    assert recurring[0].description == "Start your day!"
    assert out.new_instances == recurring


def test_one_time_tasks_survive_unchanged_and_come_first() -> None:
    one_a = make_task("100", "Dentist", "15:00", "16:00", completed=True, description="bring card")
    one_b = make_task("101", "Call mom", "12:00", "12:15")
    rec = make_task("r", "Wake Up", "07:00", "07:30", recurring=True)

    out = maybe_reset(TODAY, YESTERDAY, TEMPLATES, [one_a, rec, one_b], now=NOW)

    assert out.tasks[:2] == [one_a, one_b]
    assert out.tasks[0].completed is True
    assert out.tasks[0].description == "bring card"
    assert len(out.tasks) == 2 + len(TEMPLATES)


def test_first_run_without_marker_resets() -> None:
    out = maybe_reset(TODAY, None, TEMPLATES, [], now=NOW)

    assert out.did_reset is True
    assert out.last_reset_date == TODAY
    assert len(out.tasks) == 3


def test_empty_registry_drops_recurring_instances() -> None:
    current = [make_task("1"), make_task("r", "Wake Up", recurring=True)]

    out = maybe_reset(TODAY, YESTERDAY, [], current, now=NOW)

    assert out.did_reset is True
    assert [t.id for t in out.tasks] == ["1"]


def test_marker_from_the_future_still_resets() -> None:
    # Only equality with today suppresses the reset (e.g. clock moved backwards).
    out = maybe_reset(TODAY, date(2026, 10, 20), TEMPLATES, [], now=NOW)
    assert out.did_reset is True
    assert out.last_reset_date == TODAY


def test_instance_ids_follow_name_and_timestamp() -> None:
    ms = int(NOW.timestamp() * 1000)
    taken: set[str] = set()

    task = materialize(TEMPLATES[0], now=NOW, taken=taken)

    assert task.id == f"recurring-{ms}-Wake-Up"
    assert task.id in taken


def test_colliding_names_get_unique_suffixes() -> None:
    taken: set[str] = set()
    a = recurring_instance_id("a b", NOW, taken)
    taken.add(a)
    b = recurring_instance_id("a-b", NOW, taken)

    assert a != b
    assert b.endswith("-2")


def test_materialized_instance_is_a_copy_of_the_template() -> None:
    tpl = TEMPLATES[0]
    out = maybe_reset(TODAY, YESTERDAY, [tpl], [], now=NOW)
    inst = out.tasks[0]

    inst.completed = True
    inst.name = "changed"

    assert tpl.name == "Wake Up"
    assert (tpl.start_time, tpl.end_time) == (inst.start_time, inst.end_time)
