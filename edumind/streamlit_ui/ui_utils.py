# -*- coding: utf-8 -*-
"""
Streamlit UI utility functions.

Shared labels, date formatting, the per-session application instance and
the helper that turns a command's status dict into user feedback.
"""
import os
from datetime import date
from typing import Any, Dict, Optional

import streamlit as st

from edumind.app import EduMindApp
from edumind.models import Difficulty, TaskType
from edumind.state_store import StorageError

APP_SESSION_KEY = "edumind_app"

TASK_TYPE_LABELS = {
    TaskType.HOMEWORK: "Compito",
    TaskType.EXAM: "Esame",
    TaskType.ORAL_TEST: "Interrogazione",
    TaskType.PROJECT: "Progetto",
    TaskType.STUDY_HOUR: "Ora Studio",
}

DIFFICULTY_LABELS = {
    Difficulty.EASY: "1 · Facile",
    Difficulty.MEDIUM: "2 · Media",
    Difficulty.HARD: "3 · Difficile",
    Difficulty.CHALLENGING: "4 · Impegnativa",
    Difficulty.EXPERT: "5 · Esperto",
}

SERVICE_LABELS = {
    "google": "Google Account",
    "classeviva": "ClasseViva",
}

MONTH_ABBREVIATIONS = ("gen", "feb", "mar", "apr", "mag", "giu", "lug", "ago", "set", "ott", "nov", "dic")


def format_date(value: Optional[date]) -> str:
    """Italian short date (dd/mm/yyyy); 'N/A' when missing."""
    if value is None:
        return "N/A"
    return value.strftime("%d/%m/%Y")


def month_abbreviation(value: date) -> str:
    return MONTH_ABBREVIATIONS[value.month - 1]


def get_app() -> EduMindApp:
    """Returns the EduMindApp of this browser session, creating it on first use."""
    if APP_SESSION_KEY not in st.session_state:
        config_dir = os.environ.get("EDUMIND_CONFIG_DIR") or os.getcwd()
        try:
            st.session_state[APP_SESSION_KEY] = EduMindApp(config_dir=config_dir)
        except StorageError as e:
            st.error(f"Impossibile leggere i dati locali: {e}. Ricarica la pagina per riprovare.")
            st.stop()
    return st.session_state[APP_SESSION_KEY]


def show_result(result: Dict[str, Any], success_message: Optional[str] = None) -> bool:
    """
    Gives feedback for a command result. Returns True on success.
    """
    status = result.get("status")
    if status == "success":
        if success_message:
            st.toast(success_message, icon="✅")
        return True
    if status == "noop":
        if result.get("message"):
            st.info(result["message"])
        return False
    st.error(result.get("message") or "Errore sconosciuto.")
    return False
