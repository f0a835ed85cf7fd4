# tests/test_views.py

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from taskvista.tasks import views
from taskvista.tasks.task_models import Task, TaskPriority, TaskStatus
from taskvista.tasks.views import DueBucket

from .conftest import NOW


def make_task(
    task_id: str,
    *,
    title: str = "task",
    description: str = "",
    due: datetime = NOW,
    priority: TaskPriority = TaskPriority.MEDIUM,
    status: TaskStatus = TaskStatus.TODO,
) -> Task:
    return Task(
        id=task_id,
        title=title,
        description=description,
        due_date=due,
        priority=priority,
        status=status,
        created_at=NOW - timedelta(days=10),
    )


@pytest.fixture()
def sample() -> list[Task]:
    return [
        make_task("1", title="Write report", due=NOW + timedelta(days=2), priority=TaskPriority.HIGH),
        make_task("2", title="Standup", due=NOW + timedelta(hours=3), status=TaskStatus.IN_PROGRESS),
        make_task("3", title="Old bug", due=NOW - timedelta(days=1), priority=TaskPriority.HIGH),
        make_task("4", title="Shipped", due=NOW - timedelta(days=2), status=TaskStatus.DONE),
        make_task("5", title="Morning sync", due=NOW - timedelta(hours=2), priority=TaskPriority.LOW),
        make_task("6", title="Next week", due=NOW + timedelta(days=7), status=TaskStatus.DONE),
    ]


def test_group_by_status_is_a_complete_partition(sample) -> None:
    groups = views.group_by_status(sample)

    assert list(groups) == [TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.DONE]
    assert sum(len(g) for g in groups.values()) == len(sample)
    ids = [t.id for g in groups.values() for t in g]
    assert sorted(ids) == sorted(t.id for t in sample)
    assert [t.id for t in groups[TaskStatus.TODO]] == ["1", "3", "5"]


def test_group_by_status_keeps_empty_columns() -> None:
    groups = views.group_by_status([])
    assert groups == {s: [] for s in TaskStatus}


def test_group_by_priority_keeps_source_order(sample) -> None:
    groups = views.group_by_priority(sample)
    assert list(groups) == [TaskPriority.HIGH, TaskPriority.MEDIUM, TaskPriority.LOW]
    assert [t.id for t in groups[TaskPriority.HIGH]] == ["1", "3"]
    assert [t.id for t in groups[TaskPriority.MEDIUM]] == ["2", "4", "6"]


def test_group_by_due_date_uses_local_calendar_day() -> None:
    # 23:30 UTC on the 14th is already the 15th in UTC+2.
    late = make_task("late", due=datetime(2025, 3, 14, 23, 30, tzinfo=UTC))
    early = make_task("early", due=datetime(2025, 3, 14, 1, 0, tzinfo=UTC))
    plus_two = timezone(timedelta(hours=2))

    assert list(views.group_by_due_date([late, early], UTC)) == [date(2025, 3, 14)]
    by_day = views.group_by_due_date([late, early], plus_two)
    assert [t.id for t in by_day[date(2025, 3, 15)]] == ["late"]
    assert [t.id for t in by_day[date(2025, 3, 14)]] == ["early"]


def test_sort_by_due_date_is_stable_and_does_not_mutate(sample) -> None:
    same = NOW + timedelta(days=1)
    tasks = [
        make_task("b", due=same),
        make_task("z", due=NOW),
        make_task("a", due=same),
    ]
    original = list(tasks)

    result = views.sort_by_due_date(tasks)

    assert [t.id for t in result] == ["z", "b", "a"]
    assert tasks == original


def test_timeline_groups_sorted_days(sample) -> None:
    days = views.timeline(sample, UTC)
    keys = list(days)
    assert keys == sorted(keys)
    assert [t.id for t in days[date(2025, 3, 14)]] == ["5", "2"]


def test_tasks_on_date(sample) -> None:
    today = views.tasks_on_date(sample, date(2025, 3, 14), UTC)
    assert [t.id for t in today] == ["2", "5"]
    assert views.tasks_on_date(sample, date(2024, 1, 1), UTC) == []


def test_classify_buckets(sample) -> None:
    buckets = {t.id: views.classify(t, NOW, UTC) for t in sample}
    assert buckets == {
        "1": DueBucket.UPCOMING,
        "2": DueBucket.DUE_TODAY,
        "3": DueBucket.OVERDUE,
        "4": DueBucket.DONE,
        "5": DueBucket.OVERDUE,  # due earlier today
        "6": DueBucket.DONE,
    }


def test_buckets_are_exclusive_and_exhaustive(sample) -> None:
    overdue = views.overdue_tasks(sample, NOW, UTC)
    today = views.due_today_tasks(sample, NOW, UTC)
    upcoming = views.upcoming_tasks(sample, NOW, UTC)
    done = [t for t in sample if t.status is TaskStatus.DONE]

    buckets = [overdue, today, upcoming, done]
    ids = [t.id for b in buckets for t in b]
    assert sorted(ids) == sorted(t.id for t in sample)
    assert len(ids) == len(set(ids))


def test_task_due_exactly_now_is_due_today() -> None:
    assert views.classify(make_task("n", due=NOW), NOW, UTC) is DueBucket.DUE_TODAY


def test_search_is_case_insensitive_on_title_and_description() -> None:
    tasks = [
        make_task("1", title="Write report"),
        make_task("2", title="Call", description="about the REPORT draft"),
        make_task("3", title="Lunch"),
    ]
    assert [t.id for t in views.search(tasks, "REPORT")] == ["1", "2"]
    assert [t.id for t in views.search(tasks, "  lunch ")] == ["3"]


@pytest.mark.parametrize("query", ["", "   ", "\t\n"])
def test_empty_search_returns_nothing(sample, query: str) -> None:
    assert views.search(sample, query) == []


def test_filter_board_empty_query_keeps_all_and_priority_narrows(sample) -> None:
    assert views.filter_board(sample) == sample
    assert [t.id for t in views.filter_board(sample, priority="high")] == ["1", "3"]
    assert [t.id for t in views.filter_board(sample, "report", TaskPriority.HIGH)] == ["1"]
    assert views.filter_board(sample, "report", "low") == []


def test_task_stats_counts_dashboard_numbers(sample) -> None:
    stats = views.task_stats(sample, NOW, UTC)

    assert stats.total == 6
    assert stats.by_status == {
        TaskStatus.TODO: 3,
        TaskStatus.IN_PROGRESS: 1,
        TaskStatus.DONE: 2,
    }
    assert stats.by_priority[TaskPriority.HIGH] == 2
    assert stats.by_bucket == {
        DueBucket.OVERDUE: 2,
        DueBucket.DUE_TODAY: 1,
        DueBucket.UPCOMING: 1,
        DueBucket.DONE: 2,
    }
    assert stats.completion_rate == pytest.approx(2 / 6)


def test_task_stats_empty_collection() -> None:
    stats = views.task_stats([], NOW)
    assert stats.total == 0
    assert stats.completion_rate == 0.0
