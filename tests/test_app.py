"""Unit tests for EduMindApp commands and read models."""

from datetime import date, timedelta

import pytest

from edumind.app import EMPTY_PLAN_NOTICE, PLAN_BUSY_NOTICE, PLAN_FAILED_NOTICE, STORAGE_FAILED_NOTICE, EduMindApp
from edumind.config_manager.config_manager import ConfigManager
from edumind.llm_interface.llm_interface import LLMInterface
from edumind.models import Difficulty, Reminder, StudyPlan, StudySession, TaskSource, TaskType
from edumind.monitoring_manager.monitoring_manager import MonitoringManager
from edumind.state_store import InMemoryStorageAdapter, SQLiteStorageAdapter, StorageError

TODAY = date(2025, 5, 20)


def llm_success(payload):
    return {"status": "success", "data": {"json": payload, "text": "", "usage": {}}, "message": ""}


@pytest.fixture
def settings():
    return {"planner.language": "Italiano", "storage.backend": "memory"}


@pytest.fixture
def mock_config_manager(mocker, settings):
    mock_cm = mocker.MagicMock(spec=ConfigManager)
    mock_cm.get_config.side_effect = lambda key, default=None: settings.get(key, default)
    return mock_cm


@pytest.fixture
def mock_llm_interface(mocker):
    return mocker.MagicMock(spec=LLMInterface)


@pytest.fixture
def adapter():
    return InMemoryStorageAdapter()


@pytest.fixture
def app(mocker, mock_config_manager, mock_llm_interface, adapter):
    return EduMindApp(
        config_manager=mock_config_manager,
        monitoring_manager=mocker.MagicMock(spec=MonitoringManager),
        storage_adapter=adapter,
        llm_interface=mock_llm_interface,
    )


def task_form(**overrides):
    form = {
        "title": "Saggio",
        "subject": "Storia",
        "due_date": "2025-06-01",
        "type": "HOMEWORK",
        "difficulty": 3,
        "description": "",
    }
    form.update(overrides)
    return form


def test_add_toggle_delete_scenario(app):
    added = app.add_task(task_form())
    assert added["status"] == "success"
    tasks = app.dashboard_data()["tasks"]
    assert len(tasks) == 1
    task = tasks[0]
    assert task.is_completed is False
    assert task.source is TaskSource.MANUAL
    assert task.due_date == date(2025, 6, 1)
    assert task.type is TaskType.HOMEWORK

    assert app.toggle_task(task.id)["status"] == "success"
    assert app.dashboard_data()["tasks"][0].is_completed is True
    assert app.dashboard_data()["pending_count"] == 0

    assert app.delete_task(task.id)["status"] == "success"
    assert app.dashboard_data()["tasks"] == ()


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"title": "   "}, "title"),
        ({"subject": ""}, "subject"),
        ({"due_date": ""}, "due_date"),
        ({"due_date": "01/06/2025"}, "due_date"),
        ({"type": "ESSAY"}, "type"),
        ({"difficulty": 7}, "difficulty"),
        ({"difficulty": 3.7}, "difficulty"),
        ({"difficulty": True}, "difficulty"),
        ({"difficulty": "3.7"}, "difficulty"),
        ({"difficulty": float("inf")}, "difficulty"),
    ],
)
def test_form_validation_rejects_without_state_change(app, adapter, overrides, field):
    result = app.add_task(task_form(**overrides))

    assert result["status"] == "error"
    assert field in result["data"]
    assert app.dashboard_data()["tasks"] == ()
    assert adapter.save_count == 0


def test_form_accepts_date_objects_and_trims():
    checked = EduMindApp.validate_task_form(task_form(title="  Saggio  ", due_date=date(2025, 6, 1)))
    assert checked["errors"] == {}
    assert checked["values"]["title"] == "Saggio"
    assert checked["values"]["due_date"] == date(2025, 6, 1)


def test_unknown_task_commands_are_noops(app, adapter):
    assert app.toggle_task("missing")["status"] == "noop"
    assert app.delete_task("missing")["status"] == "noop"
    assert adapter.save_count == 0


def test_organize_without_pending_tasks_is_noop(app, mock_llm_interface):
    result = app.organize(today=TODAY)
    assert result == {"status": "noop", "data": None, "message": EMPTY_PLAN_NOTICE}
    mock_llm_interface.generate_structured.assert_not_called()


def test_organize_difficulty_five_reminders(app, mock_llm_interface):
    due = TODAY + timedelta(days=10)
    app.add_task(task_form(title="Verifica", subject="Chimica", due_date=due.isoformat(), type="EXAM", difficulty=5))
    task_id = app.dashboard_data()["tasks"][0].id
    reminder_days = (7, 3, 1)
    mock_llm_interface.generate_structured.return_value = llm_success(
        {
            "sessions": [
                {
                    "id": f"s{i}",
                    "taskId": task_id,
                    "date": (TODAY + timedelta(days=i)).isoformat(),
                    "startTime": "15:00",
                    "duration": 90,
                    "topic": f"Ripasso {i}",
                }
                for i in range(1, 6)
            ],
            "reminders": [
                {"id": f"r{d}", "taskId": task_id, "date": (due - timedelta(days=d)).isoformat(), "message": f"-{d}"}
                for d in reminder_days
            ],
        }
    )

    result = app.organize(today=TODAY)

    assert result == {"status": "success", "data": {"sessions": 5, "reminders": 3}, "message": ""}
    reminders = app.planner_data()["reminders"]
    assert sorted(r.date for r in reminders) == sorted(due - timedelta(days=d) for d in reminder_days)
    assert all(r.task_id == task_id for r in reminders)
    assert not app.is_planning
    prompt = mock_llm_interface.generate_structured.call_args.kwargs["prompt"]
    assert TODAY.isoformat() in prompt


def test_organize_sends_only_pending_tasks(app, mock_llm_interface):
    app.add_task(task_form(title="Fatto"))
    done_id = app.dashboard_data()["tasks"][0].id
    app.toggle_task(done_id)
    app.add_task(task_form(title="Da fare"))
    mock_llm_interface.generate_structured.return_value = llm_success({"sessions": [], "reminders": []})

    app.organize(today=TODAY)

    prompt = mock_llm_interface.generate_structured.call_args.kwargs["prompt"]
    assert "Da fare" in prompt
    assert done_id not in prompt


def test_failed_generation_keeps_previous_plan(app, mock_llm_interface):
    app.add_task(task_form())
    previous = StudyPlan(
        sessions=[StudySession(id="s1", task_id="t", date=TODAY, start_time="16:00", duration=60, topic="Fonti")],
        reminders=[Reminder(id="r1", task_id="t", date=TODAY, message="Ricorda")],
    )
    app.store.replace_plan(previous)
    mock_llm_interface.generate_structured.return_value = {"status": "error", "data": None, "message": "boom"}

    result = app.organize(today=TODAY)

    assert result["status"] == "error"
    assert result["message"] == PLAN_FAILED_NOTICE
    assert result["data"] == {"detail": "boom"}
    assert app.planner_data()["sessions"] == previous.sessions
    assert app.planner_data()["reminders"] == previous.reminders
    assert not app.is_planning


def test_invalid_reply_keeps_previous_plan(app, mock_llm_interface):
    app.add_task(task_form())
    mock_llm_interface.generate_structured.return_value = llm_success({"sessions": "nope"})

    result = app.organize(today=TODAY)

    assert result["status"] == "error"
    assert app.planner_data()["sessions"] == []


def test_organize_rejected_while_requesting(app, mock_llm_interface):
    app.add_task(task_form())
    app.plan_latch.try_acquire()

    result = app.organize(today=TODAY)

    assert result == {"status": "error", "data": None, "message": PLAN_BUSY_NOTICE}
    mock_llm_interface.generate_structured.assert_not_called()


def test_organize_releases_latch_on_unexpected_error(app, mock_llm_interface):
    app.add_task(task_form())
    mock_llm_interface.generate_structured.side_effect = RuntimeError("unexpected")

    result = app.organize(today=TODAY)

    assert result["message"] == PLAN_FAILED_NOTICE
    assert not app.is_planning


def test_storage_failure_is_reported(app, mocker):
    mocker.patch.object(app.storage_adapter, "save", side_effect=StorageError("disk full"))
    result = app.add_task(task_form())
    assert result == {"status": "error", "data": None, "message": STORAGE_FAILED_NOTICE}


def test_profile_and_connection_flow(app):
    assert app.update_profile("name", "Giulia")["status"] == "success"
    assert app.update_profile("is_google_connected", True)["status"] == "error"
    assert app.dashboard_data()["user"].name == "Giulia"

    assert app.request_connection("google")["status"] == "success"
    assert app.pending_connection == "google"
    app.cancel_connection()
    assert app.pending_connection is None
    assert app.confirm_connection()["status"] == "noop"

    app.request_connection("google")
    assert app.confirm_connection()["data"].is_google_connected is True
    assert app.set_connection("google", False)["data"].is_google_connected is False
    assert app.request_connection("dropbox")["status"] == "error"


def test_calendar_data_orders_entries(app):
    app.add_task(task_form(title="Saggio", due_date="2025-06-01"))
    task_id = app.dashboard_data()["tasks"][0].id
    app.store.replace_plan(
        StudyPlan(
            sessions=[
                StudySession(id="s2", task_id=task_id, date=date(2025, 5, 28), start_time="17:00", duration=60, topic="B"),
                StudySession(id="s1", task_id=task_id, date=date(2025, 5, 28), start_time="15:00", duration=60, topic="A"),
            ],
            reminders=[Reminder(id="r1", task_id="gone", date=date(2025, 5, 27), message="x")],
        )
    )

    entries = app.calendar_data()

    assert [e["kind"] for e in entries] == ["reminder", "session", "session", "due"]
    assert [e["label"] for e in entries[1:3]] == ["A", "B"]
    assert entries[0]["task_title"] is None
    assert app.planner_data()["orphaned_task_ids"] == {"gone"}


def test_sqlite_backend_from_config(mocker, mock_config_manager, mock_llm_interface, settings, tmp_path):
    settings["storage.backend"] = "sqlite"
    settings["storage.db_path"] = str(tmp_path / "edumind.db")
    app = EduMindApp(
        config_manager=mock_config_manager,
        monitoring_manager=mocker.MagicMock(spec=MonitoringManager),
        llm_interface=mock_llm_interface,
    )
    assert isinstance(app.storage_adapter, SQLiteStorageAdapter)
    app.add_task(task_form())
    app.storage_adapter.close()

    reopened = EduMindApp(
        config_manager=mock_config_manager,
        monitoring_manager=mocker.MagicMock(spec=MonitoringManager),
        llm_interface=mock_llm_interface,
    )
    assert [t.title for t in reopened.dashboard_data()["tasks"]] == ["Saggio"]
    reopened.storage_adapter.close()


@pytest.mark.parametrize("raw", [3, 3.0, "3", "3 ", Difficulty.HARD])
def test_form_accepts_integral_difficulty(raw):
    checked = EduMindApp.validate_task_form(task_form(difficulty=raw))
    assert checked["errors"] == {}
    assert checked["values"]["difficulty"] == 3
