# -*- coding: utf-8 -*-
"""Data model of the study planner."""
from .models import (
    Difficulty,
    PlannerRecord,
    PlannerState,
    Reminder,
    StudyPlan,
    StudySession,
    Task,
    TaskSource,
    TaskType,
    UserProfile,
)

__all__ = [
    "Difficulty",
    "PlannerRecord",
    "PlannerState",
    "Reminder",
    "StudyPlan",
    "StudySession",
    "Task",
    "TaskSource",
    "TaskType",
    "UserProfile",
]
