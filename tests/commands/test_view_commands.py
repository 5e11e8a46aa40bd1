"""Tests for the view and task commands.

Covers:
- today: due-today and overdue tasks, display.show_completed
- week: seven Monday-first columns
- month: grid, --month parsing and invalid input
- toggle / sync
- error mapping to exit codes
"""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from taskboard.main import app
from taskboard.models import PeriodicInterval, PeriodicTask, TaskData
from taskboard.services.task_repository import TaskRepository
from taskboard.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NETWORK, ERROR_NOT_FOUND

from conftest import FakeTransport

runner = CliRunner()

_TODAY = date.today()
_AT_NINE = datetime.combine(_TODAY, datetime.min.time()).replace(hour=9)


@pytest.fixture()
def backend(make_task, tmp_config):
    return FakeTransport(
        tasks=[
            make_task("today", name="Stand-up", value=2, due_to=_AT_NINE),
            make_task("overdue", name="Tax return", value=3, due_to=datetime(2000, 1, 1, 9, 0)),
            make_task(
                "done",
                name="Breakfast",
                value=1,
                completed=True,
                due_to=_AT_NINE - timedelta(hours=2),
            ),
            make_task("later", name="Holiday", due_to=_AT_NINE + timedelta(days=40)),
            make_task("p", name="Parent", children=[make_task("c", name="Child")]),
        ]
    )


def _run(args: list[str], backend: FakeTransport):
    with patch(
        "taskboard.commands.utils.create_repository",
        return_value=TaskRepository(backend),
    ):
        return runner.invoke(app, args)


class TestToday:
    def test_json_lists_today_and_overdue(self, backend):
        result = _run(["today", "--json"], backend)

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [task["id"] for task in data["tasks"]] == ["today", "overdue", "done"]
        assert data["summary"]["total_value"] == 6
        assert data["summary"]["completed_value"] == 1

    def test_hides_completed_when_configured(self, backend, tmp_config):
        tmp_config.set("display.show_completed", False)

        result = _run(["today", "--json"], backend)

        data = json.loads(result.stdout)
        assert [task["id"] for task in data["tasks"]] == ["today", "overdue"]
        assert data["summary"]["completed_value"] == 1

    def test_table_output(self, backend):
        result = _run(["today"], backend)

        assert result.exit_code == 0
        assert "Stand-up" in result.stdout
        assert "Tax return" in result.stdout
        assert "Holiday" not in result.stdout

    def test_nothing_due(self, make_task, tmp_config):
        result = _run(["today"], FakeTransport(tasks=[make_task("x")]))

        assert result.exit_code == 0
        assert "Nothing due today" in result.stdout

    def test_backend_failure_exits_with_network_code(self, backend):
        backend.fail_on.add("fetch_all_tasks")

        result = _run(["today"], backend)

        assert result.exit_code == ERROR_NETWORK
        assert "Error" in result.stdout


class TestWeek:
    def test_json_has_seven_days_from_monday(self, backend):
        result = _run(["week", "--json"], backend)

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [entry["day"] for entry in data] == [
            "monday",
            "tuesday",
            "wednesday",
            "thursday",
            "friday",
            "saturday",
            "sunday",
        ]
        today = data[_TODAY.weekday()]
        assert today["date"] == _TODAY.isoformat()
        assert [task["id"] for task in today["tasks"]] == ["today", "done"]
        assert today["progress"] == 50

    def test_renders_panels(self, backend):
        result = _run(["week"], backend)

        assert result.exit_code == 0
        assert "Mon" in result.stdout
        assert "Stand-up" in result.stdout


class TestMonth:
    def test_explicit_month(self, make_task, tmp_config):
        backend = FakeTransport(
            tasks=[
                make_task("leap", completed=True, due_to=datetime(2024, 2, 29, 10, 0)),
                make_task("early", due_to=datetime(2024, 2, 1, 10, 0)),
                make_task("january", due_to=datetime(2024, 1, 30, 10, 0)),
            ]
        )

        result = _run(["month", "--month", "2024-02", "--json"], backend)

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["month"] == "2024-02"
        assert len(data["cells"]) == 35
        assert data["cells"][0]["date"] == "2024-01-29"
        assert data["progress"] == 50
        cells = {cell["date"]: cell for cell in data["cells"]}
        assert cells["2024-02-29"]["tasks"] == ["leap"]
        assert cells["2024-01-30"]["tasks"] == ["january"]
        assert cells["2024-01-30"]["in_month"] is False

    def test_renders_table(self, backend):
        result = _run(["month"], backend)

        assert result.exit_code == 0
        assert _TODAY.strftime("%B %Y") in result.stdout

    def test_invalid_month(self, backend):
        result = _run(["month", "--month", "2024-13"], backend)

        assert result.exit_code == ERROR_INVALID_ARGS
        assert "Invalid month" in result.stdout


class TestToggle:
    def test_toggle_root_task(self, backend):
        result = _run(["toggle", "today"], backend)

        assert result.exit_code == 0
        assert "Task today is now completed" in result.stdout
        assert backend.calls[-1] == ("set_task_completion", "today", True)

    def test_toggle_subtask(self, backend):
        result = _run(["toggle", "c"], backend)

        assert result.exit_code == 0
        assert backend.calls[-1] == ("set_task_completion", "c", True)

    def test_toggle_completed_task_reopens(self, backend):
        result = _run(["toggle", "done"], backend)

        assert "Task done is now pending" in result.stdout

    def test_unknown_task(self, backend):
        result = _run(["toggle", "missing"], backend)

        assert result.exit_code == ERROR_NOT_FOUND
        assert "Task not found: missing" in result.stdout
        assert "taskboard sync" in result.stdout


def test_sync_prints_summary(backend):
    result = _run(["sync"], backend)

    assert result.exit_code == 0
    assert "5 tasks (1 completed, 4 pending" in result.stdout
    assert "0 enabled periodic rules" in result.stdout


class TestStartup:
    @pytest.fixture()
    def rules_backend(self, backend):
        backend.rules = [
            PeriodicTask(id="daily", name="Daily review", interval=PeriodicInterval.DAILY),
            PeriodicTask(
                id="boot",
                name="Open mail",
                interval=PeriodicInterval.ON_START,
                last_period=int(datetime(2024, 5, 1, 8, 30).timestamp()),
                task_template=TaskData(name="Open mail", value=2),
            ),
            PeriodicTask(id="once", name="Backup", interval=PeriodicInterval.ONCE_STARTED),
        ]
        return backend

    def test_json_lists_startup_rules(self, rules_backend):
        result = _run(["startup", "--json"], rules_backend)

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [rule["id"] for rule in data] == ["boot", "once"]
        assert data[0]["interval"] == 0
        assert data[0]["last_period"] == int(datetime(2024, 5, 1, 8, 30).timestamp())
        assert data[1]["last_period"] is None

    def test_table_shows_interval_and_last_run(self, rules_backend):
        result = _run(["startup"], rules_backend)

        assert result.exit_code == 0
        assert "Open mail" in result.stdout
        assert "on start" in result.stdout
        assert "2024-05-01 08:30" in result.stdout
        assert "never" in result.stdout
        assert "Daily review" not in result.stdout

    def test_no_startup_rules(self, backend):
        result = _run(["startup"], backend)

        assert result.exit_code == 0
        assert "No start-up rules configured" in result.stdout


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "taskboard" in result.stdout
