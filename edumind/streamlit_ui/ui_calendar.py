# -*- coding: utf-8 -*-
"""
Streamlit UI for the Calendar.

Renders the agenda (due dates, study sessions, reminders) as a day-by-day
table and as a plotly timeline of the study sessions.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, List

import pandas as pd
import plotly.express as px
import streamlit as st

from edumind.app import EduMindApp

from .ui_utils import format_date

KIND_LABELS = {"due": "Scadenza", "session": "Studio", "reminder": "Promemoria"}


def agenda_dataframe(entries: List[Dict[str, Any]]) -> pd.DataFrame:
    """Builds the agenda table shown in the calendar view."""
    rows = [
        {
            "Data": format_date(e["date"]),
            "Tipo": KIND_LABELS[e["kind"]],
            "Ora": e["start_time"] or "",
            "Durata (min)": e["duration"] if e["duration"] is not None else "",
            "Dettaglio": e["label"],
            "Compito": e["task_title"] or "-",
        }
        for e in entries
    ]
    return pd.DataFrame(rows, columns=["Data", "Tipo", "Ora", "Durata (min)", "Dettaglio", "Compito"])


def session_timeline_frame(entries: List[Dict[str, Any]]) -> pd.DataFrame:
    """Start/finish rows for every study session with a parseable start time."""
    rows = []
    for e in entries:
        if e["kind"] != "session":
            continue
        try:
            start = datetime.combine(e["date"], datetime.strptime(e["start_time"], "%H:%M").time())
        except (TypeError, ValueError):
            continue
        rows.append(
            {
                "Inizio": start,
                "Fine": start + timedelta(minutes=e["duration"] or 0),
                "Argomento": e["label"],
                "Compito": e["task_title"] or "compito eliminato",
            }
        )
    return pd.DataFrame(rows, columns=["Inizio", "Fine", "Argomento", "Compito"])


class CalendarUI:
    """
    Manages the Streamlit UI components of the calendar view.
    """

    def __init__(self, app: EduMindApp):
        self.app = app

    def display_calendar(self):
        st.header("📅 Calendario")
        entries = self.app.calendar_data()
        if not entries:
            st.info("Nessun evento in calendario.")
            return

        tab_agenda, tab_timeline = st.tabs(["Agenda", "Timeline sessioni"])
        with tab_agenda:
            st.dataframe(agenda_dataframe(entries), use_container_width=True, hide_index=True)
        with tab_timeline:
            self.display_timeline(entries)

    def display_timeline(self, entries):
        df = session_timeline_frame(entries)
        if df.empty:
            st.write("Nessuna sessione di studio pianificata.")
            return
        fig = px.timeline(df, x_start="Inizio", x_end="Fine", y="Compito", color="Compito", hover_name="Argomento")
        fig.update_yaxes(autorange="reversed")
        st.plotly_chart(fig, use_container_width=True)
