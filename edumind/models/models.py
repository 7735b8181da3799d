# -*- coding: utf-8 -*-
"""Planner records: tasks, study sessions, reminders and the user profile.

Python attributes are snake_case; the JSON stored locally and exchanged with
the model uses the camelCase aliases (``dueDate``, ``isCompleted``...).
"""
from datetime import date
from enum import Enum, IntEnum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TaskType(str, Enum):
    HOMEWORK = "HOMEWORK"
    EXAM = "EXAM"
    ORAL_TEST = "ORAL_TEST"
    PROJECT = "PROJECT"
    STUDY_HOUR = "STUDY_HOUR"


class Difficulty(IntEnum):
    EASY = 1
    MEDIUM = 2
    HARD = 3
    CHALLENGING = 4
    EXPERT = 5


class TaskSource(str, Enum):
    GOOGLE = "google"
    CLASSEVIVA = "classeviva"
    MANUAL = "manual"


class PlannerRecord(BaseModel):
    """Base for every stored record: camelCase aliases, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_storage_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Task(PlannerRecord):
    id: str
    title: str
    subject: str
    due_date: date
    type: TaskType = TaskType.HOMEWORK
    difficulty: Difficulty = Difficulty.MEDIUM
    description: str = ""
    is_completed: bool = False
    source: TaskSource = TaskSource.MANUAL


class StudySession(PlannerRecord):
    id: str
    task_id: str
    date: date
    start_time: str
    duration: int = Field(..., description="Minutes")
    topic: str


class Reminder(PlannerRecord):
    id: str
    task_id: str
    date: date
    message: str


class UserProfile(PlannerRecord):
    name: str = "Studente"
    email: str = "studente@scuola.it"
    is_google_connected: bool = False
    is_classe_viva_connected: bool = False


class StudyPlan(PlannerRecord):
    """Validated reply of plan generation. Both arrays are required."""

    sessions: List[StudySession]
    reminders: List[Reminder]

    @classmethod
    def empty(cls) -> "StudyPlan":
        return cls(sessions=[], reminders=[])


class PlannerState(PlannerRecord):
    """Everything the persistence adapter loads and saves."""

    user: UserProfile = Field(default_factory=UserProfile)
    tasks: List[Task] = Field(default_factory=list)
    sessions: List[StudySession] = Field(default_factory=list)
    reminders: List[Reminder] = Field(default_factory=list)
