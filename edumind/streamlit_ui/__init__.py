# -*- coding: utf-8 -*-
"""
Streamlit UI Components Package.

One module per view of the EduMind application, plus the shared dialogs and
helpers. Views read through EduMindApp's read models and send every user
action to its commands.
"""
from .ui_calendar import CalendarUI
from .ui_dashboard import DashboardUI
from .ui_planner import PlannerUI
from .ui_settings import SettingsUI

__all__ = ["CalendarUI", "DashboardUI", "PlannerUI", "SettingsUI"]
