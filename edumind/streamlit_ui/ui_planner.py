# -*- coding: utf-8 -*-
"""
Streamlit UI for the AI Planner.

Shows the generated study sessions (in the order the model returned them)
and the reminders. Entries whose task no longer exists are flagged.
"""
import streamlit as st

from edumind.app import EduMindApp

from .ui_utils import format_date, show_result


class PlannerUI:
    """
    Manages the Streamlit UI components of the AI planner view.
    """

    def __init__(self, app: EduMindApp):
        self.app = app

    def display_planner(self):
        st.header("🧠 Piano di Studio AI")
        data = self.app.planner_data()
        if not data["sessions"] and not data["reminders"]:
            self.display_empty_state()
            return

        tab_sessions, tab_reminders = st.tabs(
            [f"Tabella di Marcia ({len(data['sessions'])})", f"Promemoria ({len(data['reminders'])})"]
        )
        with tab_sessions:
            self.display_sessions(data)
        with tab_reminders:
            self.display_reminders(data)

    def display_empty_state(self):
        st.info("Nessun piano generato. L'AI distribuirà lo studio in base a scadenze e difficoltà.")
        if st.button("Genera Piano Ora", type="primary", disabled=self.app.is_planning):
            with st.spinner("Generazione del piano di studio..."):
                result = self.app.organize()
            if show_result(result, success_message="Piano di studio aggiornato."):
                st.rerun()

    def _task_caption(self, task_id, data) -> str:
        if task_id in data["orphaned_task_ids"]:
            return "⚠️ compito eliminato"
        return data["task_titles"].get(task_id, "")

    def display_sessions(self, data):
        if not data["sessions"]:
            st.write("Nessuna sessione di studio.")
            return
        for session in data["sessions"]:
            with st.container(border=True):
                st.markdown(f"**{session.topic}**")
                st.caption(
                    f"{format_date(session.date)} · {session.start_time} · {session.duration} min · "
                    f"{self._task_caption(session.task_id, data)}"
                )

    def display_reminders(self, data):
        if not data["reminders"]:
            st.write("Nessun promemoria.")
            return
        for reminder in data["reminders"]:
            st.markdown(
                f"🔔 **{format_date(reminder.date)}**: {reminder.message} "
                f"({self._task_caption(reminder.task_id, data)})"
            )
