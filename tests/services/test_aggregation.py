"""Unit tests for completion roll-ups and toggle dispatch."""

from __future__ import annotations

import math
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from taskboard.exceptions import NotFoundError
from taskboard.services.aggregation import (
    aggregate,
    count_progress,
    find_parent,
    find_task,
    task_stats,
    toggle,
)

NOW = datetime(2024, 6, 10, 15, 0)


# ---------------------------------------------------------------------------
# aggregate
# ---------------------------------------------------------------------------


def test_aggregate_includes_direct_children(make_task):
    tasks = [
        make_task("p", value=5, completed=True, children=[make_task("c", value=3, completed=False)])
    ]

    summary = aggregate(tasks)

    assert summary.completed_value == 5
    assert summary.total_value == 8
    assert summary.progress_percent == 62.5


def test_aggregate_counts_completed_child_of_open_parent(make_task):
    tasks = [
        make_task("p", value=2, children=[make_task("c", value=2, completed=True)]),
        make_task("q", value=4, completed=True),
    ]

    summary = aggregate(tasks)

    assert summary.completed_value == 6
    assert summary.total_value == 8
    assert summary.progress_percent == 75


def test_aggregate_with_zero_total_is_zero_not_nan(make_task):
    summary = aggregate([make_task("a", completed=True), make_task("b")])

    assert summary.total_value == 0
    assert summary.progress_percent == 0
    assert not math.isnan(summary.progress_percent)


def test_aggregate_of_empty_list():
    summary = aggregate([])
    assert (summary.completed_value, summary.total_value, summary.progress_percent) == (0, 0, 0)


def test_aggregate_ignores_grandchildren(make_task):
    grandchild = make_task("g", value=100, completed=True)
    child = make_task("c", value=1, children=[grandchild])
    summary = aggregate([make_task("p", value=1, children=[child])])

    assert summary.total_value == 2


# ---------------------------------------------------------------------------
# count_progress / task_stats
# ---------------------------------------------------------------------------


def test_count_progress_rounds(make_task):
    tasks = [make_task("a", completed=True), make_task("b"), make_task("c")]
    assert count_progress(tasks) == 33
    assert count_progress([]) == 0


def test_task_stats(make_task):
    tasks = [
        make_task("done", completed=True, value=2),
        make_task("late", due_to=datetime(2024, 6, 1, 9, 0), value=1),
        make_task("soon", due_to=datetime(2024, 6, 20, 9, 0)),
        make_task("late-done", completed=True, due_to=datetime(2024, 6, 1, 9, 0)),
    ]

    stats = task_stats(tasks, NOW)

    assert stats.total == 4
    assert stats.completed == 2
    assert stats.pending == 2
    assert stats.overdue == 1
    assert stats.completion_rate == 50
    assert stats.total_value == 3
    assert stats.completed_value == 2


def test_task_stats_of_empty_list():
    stats = task_stats([], NOW)
    assert stats.total == 0
    assert stats.completion_rate == 0


# ---------------------------------------------------------------------------
# find_task / toggle
# ---------------------------------------------------------------------------


def test_find_task_prefers_root_over_child(make_task):
    root_dup = make_task("x", name="root")
    parent = make_task("p", children=[make_task("x", name="child")])

    assert find_task("x", [parent, root_dup]).name == "root"


def test_find_task_scans_children(make_task):
    parent = make_task("p", children=[make_task("c1"), make_task("c2")])
    assert find_task("c2", [make_task("other"), parent]).id == "c2"
    assert find_task("missing", [parent]) is None


def test_find_parent_of_child_only(make_task):
    parent = make_task("p", children=[make_task("c")])
    tasks = [make_task("other"), parent]

    assert find_parent("c", tasks).id == "p"
    assert find_parent("p", tasks) is None
    assert find_parent("missing", tasks) is None


@pytest.mark.asyncio
async def test_toggle_dispatches_to_repository(make_task):
    repository = MagicMock()
    repository.toggle_completion = AsyncMock()
    tasks = [make_task("p", children=[make_task("c")])]

    result = await toggle("c", tasks, repository)

    assert result == "c"
    repository.toggle_completion.assert_awaited_once_with("c")


@pytest.mark.asyncio
async def test_toggle_unknown_id_raises(make_task):
    repository = MagicMock()
    repository.toggle_completion = AsyncMock()

    with pytest.raises(NotFoundError):
        await toggle("nope", [make_task("p")], repository)
    repository.toggle_completion.assert_not_awaited()
