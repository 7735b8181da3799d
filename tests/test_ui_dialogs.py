"""Unit tests for the add-task and connect dialogs."""

from datetime import date

import pytest

from edumind.app import EduMindApp
from edumind.models import Difficulty, TaskType
from edumind.streamlit_ui import ui_dialogs


@pytest.fixture
def mock_st(mocker):
    mock_st = mocker.patch.object(ui_dialogs, "st")
    mock_st.columns.return_value = (mocker.MagicMock(), mocker.MagicMock())
    mock_st.selectbox.return_value = TaskType.HOMEWORK
    mock_st.date_input.return_value = date(2025, 6, 1)
    mock_st.select_slider.return_value = Difficulty.HARD
    mock_st.text_area.return_value = ""
    mock_st.form_submit_button.return_value = True
    return mock_st


@pytest.fixture
def mock_app(mocker):
    return mocker.MagicMock(spec=EduMindApp)


def test_rejected_form_keeps_its_values(mock_st, mock_app):
    mock_st.text_input.side_effect = ["", "Storia"]
    mock_app.add_task.return_value = {
        "status": "error",
        "data": {"title": "Il titolo è obbligatorio."},
        "message": "Compila tutti i campi obbligatori.",
    }

    ui_dialogs.add_task_dialog.__wrapped__(mock_app)

    mock_st.form.assert_called_once_with("add_task_form")
    mock_st.warning.assert_called_once_with("Il titolo è obbligatorio.")
    mock_st.rerun.assert_not_called()


def test_saved_form_closes_dialog(mock_st, mock_app):
    mock_st.text_input.side_effect = ["Saggio", "Storia"]
    mock_app.add_task.return_value = {"status": "success", "data": object(), "message": ""}

    ui_dialogs.add_task_dialog.__wrapped__(mock_app)

    form = mock_app.add_task.call_args.args[0]
    assert form["title"] == "Saggio"
    assert form["difficulty"] is Difficulty.HARD
    mock_st.rerun.assert_called_once()


def test_storage_failure_shown_as_error(mock_st, mock_app):
    mock_st.text_input.side_effect = ["Saggio", "Storia"]
    mock_app.add_task.return_value = {"status": "error", "data": None, "message": "Impossibile salvare i dati locali."}

    ui_dialogs.add_task_dialog.__wrapped__(mock_app)

    mock_st.error.assert_called_once_with("Impossibile salvare i dati locali.")
    mock_st.rerun.assert_not_called()


def test_dismissing_connect_dialog_clears_pending_request(mocker):
    app = EduMindApp(
        config_manager=mocker.MagicMock(**{"get_config.side_effect": lambda key, default=None: {"storage.backend": "memory"}.get(key, default)}),
        monitoring_manager=mocker.MagicMock(),
        llm_interface=mocker.MagicMock(),
    )
    mocker.patch.object(ui_dialogs, "get_app", return_value=app)
    app.request_connection("google")

    ui_dialogs.dismiss_connection()

    assert app.pending_connection is None
    assert app.dashboard_data()["user"].is_google_connected is False
