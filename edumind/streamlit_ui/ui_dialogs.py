# -*- coding: utf-8 -*-
"""
Modal dialogs: the add-task form and the placeholder service connection.
"""
from datetime import date

import streamlit as st

from edumind.app import EduMindApp
from edumind.models import Difficulty, TaskType

from .ui_utils import DIFFICULTY_LABELS, SERVICE_LABELS, TASK_TYPE_LABELS, get_app


@st.dialog("Nuovo Compito")
def add_task_dialog(app: EduMindApp):
    with st.form("add_task_form"):
        title = st.text_input("Titolo")
        task_type = st.selectbox(
            "Tipo Attività",
            options=list(TaskType),
            format_func=lambda t: TASK_TYPE_LABELS[t],
        )
        col_subject, col_date = st.columns(2)
        with col_subject:
            subject = st.text_input("Materia")
        with col_date:
            due_date = st.date_input("Scadenza", value=None, min_value=date(2000, 1, 1), format="DD/MM/YYYY")
        difficulty = st.select_slider(
            "Difficoltà",
            options=list(Difficulty),
            value=Difficulty.MEDIUM,
            format_func=lambda d: DIFFICULTY_LABELS[d],
        )
        description = st.text_area("Descrizione", height=80)
        submitted = st.form_submit_button("Salva", type="primary", use_container_width=True)

    if submitted:
        result = app.add_task(
            {
                "title": title,
                "subject": subject,
                "due_date": due_date,
                "type": task_type,
                "difficulty": difficulty,
                "description": description,
            }
        )
        if result["status"] == "success":
            st.rerun()
        else:
            field_errors = result.get("data") or {}
            if not field_errors:
                st.error(result["message"])
            for message in field_errors.values():
                st.warning(message)


def dismiss_connection():
    """Closing the connect dialog without confirming drops the pending request."""
    get_app().cancel_connection()


@st.dialog("Connetti servizio", on_dismiss=dismiss_connection)
def connect_dialog(app: EduMindApp):
    service = app.pending_connection
    if service is None:
        st.rerun()
    st.subheader(f"Connetti {SERVICE_LABELS[service]}")
    st.caption("Conferma per collegare il servizio a questo dispositivo.")
    if st.button("Conferma", type="primary", use_container_width=True):
        app.confirm_connection()
        st.rerun()
    if st.button("Annulla", use_container_width=True):
        app.cancel_connection()
        st.rerun()
