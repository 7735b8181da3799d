# -*- coding: utf-8 -*-
"""
Streamlit UI for the Settings view: profile fields and integration flags.
"""
import streamlit as st

from edumind.app import EduMindApp

from .ui_utils import SERVICE_LABELS, show_result


class SettingsUI:
    """
    Manages the Streamlit UI components of the settings view.
    """

    def __init__(self, app: EduMindApp):
        self.app = app

    def display_settings(self):
        st.header("⚙️ Impostazioni")
        self.display_profile()
        st.divider()
        self.display_integrations()

    def display_profile(self):
        st.subheader("Profilo")
        user = self.app.dashboard_data()["user"]
        with st.form("profile_form"):
            name = st.text_input("Nome", value=user.name)
            email = st.text_input("Email", value=user.email)
            saved = st.form_submit_button("Salva profilo")
        if saved:
            ok = True
            if name != user.name:
                ok = show_result(self.app.update_profile("name", name)) and ok
            if email != user.email:
                ok = show_result(self.app.update_profile("email", email)) and ok
            if ok:
                st.toast("Profilo aggiornato.")
                st.rerun()

    def display_integrations(self):
        st.subheader("Integrazioni")
        user = self.app.dashboard_data()["user"]
        flags = {
            "google": user.is_google_connected,
            "classeviva": user.is_classe_viva_connected,
        }
        for service, connected in flags.items():
            col_label, col_action = st.columns([3, 1])
            with col_label:
                state = "🟢 Connesso" if connected else "⚪ Non connesso"
                st.markdown(f"**{SERVICE_LABELS[service]}**: {state}")
            with col_action:
                if connected:
                    if st.button("Disconnetti", key=f"disconnect_{service}"):
                        if show_result(self.app.set_connection(service, False)):
                            st.rerun()
                elif st.button("Connetti", key=f"connect_{service}"):
                    if show_result(self.app.request_connection(service)):
                        st.rerun()
