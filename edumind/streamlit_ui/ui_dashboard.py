# -*- coding: utf-8 -*-
"""
Streamlit UI for the Dashboard.

Greets the student, shows the integration cards and lists every task sorted
by due date with complete/delete actions.
"""
import streamlit as st

from edumind.app import EduMindApp
from edumind.models import Task

from .ui_utils import SERVICE_LABELS, TASK_TYPE_LABELS, format_date, month_abbreviation, show_result


class DashboardUI:
    """
    Manages the Streamlit UI components of the dashboard view.
    """

    def __init__(self, app: EduMindApp):
        self.app = app

    def display_dashboard(self):
        data = self.app.dashboard_data()
        first_name = data["user"].name.split(" ")[0] if data["user"].name else ""
        st.header(f"Ciao, {first_name}! 👋")
        st.caption("Ecco il riepilogo dei tuoi impegni scolastici.")

        self.display_connection_cards(data["user"])

        col_title, col_badge = st.columns([4, 1])
        with col_title:
            st.subheader("Prossime Scadenze")
        with col_badge:
            st.markdown(f"**{data['pending_count']} DA FARE**")

        if not data["tasks"]:
            st.info("Nessun compito presente. Aggiungine uno per iniziare!")
            return
        for task in data["tasks"]:
            self.display_task_row(task)

    def display_connection_cards(self, user):
        flags = {
            "google": user.is_google_connected,
            "classeviva": user.is_classe_viva_connected,
        }
        columns = st.columns(len(flags))
        for column, (service, connected) in zip(columns, flags.items()):
            with column.container(border=True):
                st.markdown(f"**{SERVICE_LABELS[service]}**")
                if connected:
                    st.success("ATTIVO")
                elif st.button("COLLEGA", key=f"dashboard_connect_{service}"):
                    if show_result(self.app.request_connection(service)):
                        st.rerun()

    def display_task_row(self, task: Task):
        col_check, col_date, col_body, col_delete = st.columns([1, 1, 8, 1])
        with col_check:
            icon = "✅" if task.is_completed else "⬜"
            if st.button(icon, key=f"toggle_{task.id}", help="Segna come completato"):
                if show_result(self.app.toggle_task(task.id)):
                    st.rerun()
        with col_date:
            st.markdown(f"**{task.due_date.day}**  \n{month_abbreviation(task.due_date)}")
        with col_body:
            title = f"~~{task.title}~~" if task.is_completed else f"**{task.title}**"
            st.markdown(title)
            st.caption(
                f"{task.subject} · {TASK_TYPE_LABELS[task.type]} · "
                f"Difficoltà {int(task.difficulty)}/5 · Scadenza {format_date(task.due_date)}"
            )
            if task.description:
                st.caption(task.description)
        with col_delete:
            if st.button("🗑️", key=f"delete_{task.id}", help="Elimina compito"):
                if show_result(self.app.delete_task(task.id)):
                    st.rerun()
