# -*- coding: utf-8 -*-
"""State container (StateStore) for the planner.

Loads the persisted state once, keeps it in memory and writes it back through
the storage adapter after every mutation.
"""
from datetime import date
from typing import List, Optional, Set

from edumind.models import (
    Difficulty,
    PlannerState,
    Reminder,
    StudyPlan,
    StudySession,
    Task,
    TaskType,
    UserProfile,
)
from edumind.monitoring_manager.monitoring_manager import MonitoringManager
from edumind.task_repository.task_repository import TaskRepository

from .storage_adapters import StorageAdapter

EDITABLE_PROFILE_FIELDS = ("name", "email")

CONNECTION_FLAGS = {
    "google": "is_google_connected",
    "classeviva": "is_classe_viva_connected",
}


class StateStore:
    def __init__(self, storage_adapter: StorageAdapter, monitoring_manager: Optional[MonitoringManager] = None):
        self.storage_adapter = storage_adapter
        self.monitoring_manager = monitoring_manager

        state = self.storage_adapter.load()
        self._user: UserProfile = state.user
        self._tasks = TaskRepository(state.tasks)
        self._sessions: List[StudySession] = list(state.sessions)
        self._reminders: List[Reminder] = list(state.reminders)

        if self.monitoring_manager:
            self.monitoring_manager.log_info(
                "StateStore loaded.",
                {"tasks": len(self._tasks), "sessions": len(self._sessions), "reminders": len(self._reminders)},
            )

    @property
    def user(self) -> UserProfile:
        return self._user

    @property
    def tasks(self) -> TaskRepository:
        return self._tasks

    @property
    def sessions(self) -> List[StudySession]:
        return list(self._sessions)

    @property
    def reminders(self) -> List[Reminder]:
        return list(self._reminders)

    def snapshot(self) -> PlannerState:
        return PlannerState(
            user=self._user,
            tasks=self._tasks.to_list(),
            sessions=list(self._sessions),
            reminders=list(self._reminders),
        )

    def _persist(self):
        self.storage_adapter.save(self.snapshot())

    def add_task(
        self,
        title: str,
        subject: str,
        due_date: date,
        type: TaskType = TaskType.HOMEWORK,
        difficulty: Difficulty = Difficulty.MEDIUM,
        description: str = "",
    ) -> Task:
        task = self._tasks.add(title, subject, due_date, type, difficulty, description)
        self._persist()
        return task

    def toggle_task(self, task_id: str) -> Optional[Task]:
        task = self._tasks.toggle_complete(task_id)
        if task is not None:
            self._persist()
        return task

    def delete_task(self, task_id: str) -> bool:
        """
        Deletes the task only. Sessions and reminders pointing at it are kept;
        see orphaned_task_ids().
        """
        removed = self._tasks.delete(task_id)
        if removed:
            self._persist()
        return removed

    def replace_plan(self, plan: StudyPlan) -> None:
        """Swaps in a freshly generated plan; nothing is merged with the previous one."""
        self._sessions = list(plan.sessions)
        self._reminders = list(plan.reminders)
        self._persist()

    def update_profile(self, **fields) -> UserProfile:
        unknown = set(fields) - set(EDITABLE_PROFILE_FIELDS)
        if unknown:
            raise ValueError(f"Profile fields not editable: {', '.join(sorted(unknown))}")
        self._user = self._user.model_copy(update=fields)
        self._persist()
        return self._user

    def set_connection(self, service: str, connected: bool = True) -> UserProfile:
        flag = CONNECTION_FLAGS.get(service)
        if flag is None:
            raise ValueError(f"Unknown external service: {service}")
        self._user = self._user.model_copy(update={flag: connected})
        self._persist()
        return self._user

    def orphaned_task_ids(self) -> Set[str]:
        """Task ids referenced by the plan that no longer exist in the task list."""
        known = {t.id for t in self._tasks}
        referenced = {s.task_id for s in self._sessions} | {r.task_id for r in self._reminders}
        return referenced - known
