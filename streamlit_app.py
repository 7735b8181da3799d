# -*- coding: utf-8 -*-
import streamlit as st

from edumind.streamlit_ui import CalendarUI, DashboardUI, PlannerUI, SettingsUI
from edumind.streamlit_ui.ui_dialogs import add_task_dialog, connect_dialog
from edumind.streamlit_ui.ui_utils import get_app, show_result

# --- Streamlit Page Configuration (MUST be the first Streamlit command) ---
st.set_page_config(layout="wide", page_title="EduMind")

VIEWS = ("Dashboard", "AI Planner", "Calendario", "Impostazioni")


def display_header(app):
    """Header actions shared by every view: add a task and organize the study plan."""
    col_title, col_add, col_organize = st.columns([6, 2, 2])
    with col_title:
        st.title(app.config_manager.get_config("ui.app_title", "EduMind"))
    with col_add:
        if st.button("➕ Nuovo Compito", use_container_width=True):
            add_task_dialog(app)
    with col_organize:
        organize_label = "Organizzando..." if app.is_planning else "✨ Organizza"
        if st.button(organize_label, type="primary", use_container_width=True, disabled=app.is_planning):
            with st.spinner("Generazione del piano di studio..."):
                result = app.organize()
            if show_result(result, success_message="Piano di studio aggiornato."):
                st.rerun()


def main():
    """
    Main function to run the Streamlit application.
    Handles view selection and delegates rendering to the appropriate UI class.
    """
    app = get_app()

    st.sidebar.title("🎓 EduMind")
    user = app.dashboard_data()["user"]
    st.sidebar.caption(f"{user.name} · {user.email}")

    selected_view_key = "main_selected_view"
    if selected_view_key not in st.session_state:
        st.session_state[selected_view_key] = VIEWS[0]
    selected_view = st.sidebar.radio("Vai a:", VIEWS, key=selected_view_key)

    display_header(app)

    if app.pending_connection is not None:
        connect_dialog(app)

    if selected_view == "Dashboard":
        DashboardUI(app).display_dashboard()
    elif selected_view == "AI Planner":
        PlannerUI(app).display_planner()
    elif selected_view == "Calendario":
        CalendarUI(app).display_calendar()
    elif selected_view == "Impostazioni":
        SettingsUI(app).display_settings()


if __name__ == "__main__":
    main()
