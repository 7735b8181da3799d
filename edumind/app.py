# -*- coding: utf-8 -*-
"""EduMind study planner application.

Initializes and wires the modules, and exposes every user intent of the
Streamlit views (add/toggle/delete task, organize, profile edits, service
connection) as a synchronous command returning a status dict.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from edumind.config_manager.config_manager import ConfigManager
from edumind.llm_interface.llm_interface import LLMInterface
from edumind.models import Difficulty, TaskType
from edumind.monitoring_manager.monitoring_manager import MonitoringManager
from edumind.planner_module.plan_latch import PlanRequestLatch
from edumind.planner_module.planner_module import PlannerModule
from edumind.state_store.state_store import CONNECTION_FLAGS, EDITABLE_PROFILE_FIELDS, StateStore
from edumind.state_store.storage_adapters import (
    InMemoryStorageAdapter,
    SQLiteStorageAdapter,
    StorageAdapter,
    StorageError,
)

EMPTY_PLAN_NOTICE = "Aggiungi dei compiti prima di organizzare lo studio!"
PLAN_FAILED_NOTICE = "Errore nella generazione del piano. Riprova."
PLAN_BUSY_NOTICE = "Generazione del piano già in corso."
STORAGE_FAILED_NOTICE = "Impossibile salvare i dati locali."


class EduMindApp:
    """
    Main application class: builds the modules and serves the view commands.
    """

    def __init__(
        self,
        config_dir: Optional[str] = None,
        config_manager: Optional[ConfigManager] = None,
        monitoring_manager: Optional[MonitoringManager] = None,
        storage_adapter: Optional[StorageAdapter] = None,
        llm_interface: Optional[LLMInterface] = None,
    ):
        """
        Args:
            config_dir: Directory holding config.json (ignored when config_manager is given).
            config_manager, monitoring_manager, storage_adapter, llm_interface:
                Optional pre-built dependencies; missing ones are created from config.
        """
        self.config_manager = config_manager or ConfigManager(config_dir=config_dir)
        self.monitoring_manager = monitoring_manager or MonitoringManager(self.config_manager)
        self.storage_adapter = storage_adapter or self._build_storage_adapter()
        self.store = StateStore(self.storage_adapter, monitoring_manager=self.monitoring_manager)
        self.llm_interface = llm_interface or LLMInterface(
            config_manager=self.config_manager,
            monitoring_manager=self.monitoring_manager,
        )
        self.planner_module = PlannerModule(
            llm_interface=self.llm_interface,
            config_manager=self.config_manager,
            monitoring_manager=self.monitoring_manager,
        )
        self.plan_latch = PlanRequestLatch()
        self.pending_connection: Optional[str] = None
        self.monitoring_manager.log_info("EduMindApp initialization complete.")

    def _build_storage_adapter(self) -> StorageAdapter:
        backend = str(self.config_manager.get_config("storage.backend", "sqlite")).lower()
        if backend == "memory":
            return InMemoryStorageAdapter(monitoring_manager=self.monitoring_manager)
        if backend != "sqlite":
            self.monitoring_manager.log_warning(f"Unknown storage backend '{backend}'. Using sqlite.")
        db_path = self.config_manager.get_config("storage.db_path", "data/edumind.db")
        return SQLiteStorageAdapter(db_path=db_path, monitoring_manager=self.monitoring_manager)

    def _storage_failure(self, command: str, error: StorageError) -> Dict[str, Any]:
        self.monitoring_manager.log_error(
            f"Storage failure during {command}: {error}", {"command": command}
        )
        return {"status": "error", "data": None, "message": STORAGE_FAILED_NOTICE}

    # --- Tasks ---
    @staticmethod
    def validate_task_form(form: Dict[str, Any]) -> Dict[str, Any]:
        """
        Checks the add-task form.

        Returns:
            {"values": {...} | None, "errors": {field: message}}. ``values`` is
            None whenever ``errors`` is not empty.
        """
        errors: Dict[str, str] = {}
        title = str(form.get("title") or "").strip()
        subject = str(form.get("subject") or "").strip()
        if not title:
            errors["title"] = "Il titolo è obbligatorio."
        if not subject:
            errors["subject"] = "La materia è obbligatoria."

        raw_due = form.get("due_date")
        due_date = None
        if isinstance(raw_due, date):
            due_date = raw_due
        elif not raw_due or not str(raw_due).strip():
            errors["due_date"] = "La data di scadenza è obbligatoria."
        else:
            try:
                due_date = date.fromisoformat(str(raw_due).strip())
            except ValueError:
                errors["due_date"] = "Data di scadenza non valida (AAAA-MM-GG)."

        try:
            task_type = TaskType(form.get("type", TaskType.HOMEWORK))
        except ValueError:
            task_type = None
            errors["type"] = "Tipo di attività non valido."

        raw_difficulty = form.get("difficulty", Difficulty.MEDIUM)
        try:
            if isinstance(raw_difficulty, bool):
                raise ValueError(raw_difficulty)
            number = int(raw_difficulty)
            if isinstance(raw_difficulty, float) and number != raw_difficulty:
                raise ValueError(raw_difficulty)
            difficulty = Difficulty(number)
        except (TypeError, ValueError, OverflowError):
            difficulty = None
            errors["difficulty"] = "La difficoltà deve essere un numero intero da 1 a 5."

        if errors:
            return {"values": None, "errors": errors}
        return {
            "values": {
                "title": title,
                "subject": subject,
                "due_date": due_date,
                "type": task_type,
                "difficulty": difficulty,
                "description": str(form.get("description") or "").strip(),
            },
            "errors": {},
        }

    def add_task(self, form: Dict[str, Any]) -> Dict[str, Any]:
        checked = self.validate_task_form(form)
        if checked["errors"]:
            self.monitoring_manager.log_info(
                "Add task rejected by form validation.", {"fields": sorted(checked["errors"])}
            )
            return {"status": "error", "data": checked["errors"], "message": "Compila tutti i campi obbligatori."}
        try:
            task = self.store.add_task(**checked["values"])
        except StorageError as e:
            return self._storage_failure("add_task", e)
        self.monitoring_manager.log_info("Task added.", {"task_id": task.id, "subject": task.subject})
        return {"status": "success", "data": task, "message": ""}

    def toggle_task(self, task_id: str) -> Dict[str, Any]:
        try:
            task = self.store.toggle_task(task_id)
        except StorageError as e:
            return self._storage_failure("toggle_task", e)
        if task is None:
            return {"status": "noop", "data": None, "message": f"Task {task_id} not found."}
        return {"status": "success", "data": task, "message": ""}

    def delete_task(self, task_id: str) -> Dict[str, Any]:
        try:
            removed = self.store.delete_task(task_id)
        except StorageError as e:
            return self._storage_failure("delete_task", e)
        if not removed:
            return {"status": "noop", "data": None, "message": f"Task {task_id} not found."}
        self.monitoring_manager.log_info("Task deleted.", {"task_id": task_id})
        return {"status": "success", "data": None, "message": ""}

    # --- Plan generation ---
    def organize(self, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Generates a new plan for the pending tasks and replaces the stored one.
        On failure the previous sessions and reminders are kept.
        """
        pending = self.store.tasks.pending()
        if not pending:
            return {"status": "noop", "data": None, "message": EMPTY_PLAN_NOTICE}

        if not self.plan_latch.try_acquire():
            self.monitoring_manager.log_warning("Organize requested while a plan request is in flight.")
            return {"status": "error", "data": None, "message": PLAN_BUSY_NOTICE}

        try:
            result = self.planner_module.generate_study_plan(pending, today=today)
            if result.get("status") != "success":
                return {"status": "error", "data": {"detail": result.get("message")}, "message": PLAN_FAILED_NOTICE}
            plan = result["data"]
            self.store.replace_plan(plan)
            return {
                "status": "success",
                "data": {"sessions": len(plan.sessions), "reminders": len(plan.reminders)},
                "message": "",
            }
        except StorageError as e:
            return self._storage_failure("organize", e)
        except Exception as e:
            self.monitoring_manager.log_exception(
                f"Unexpected error while organizing: {e}", {"exception_type": type(e).__name__}
            )
            return {"status": "error", "data": None, "message": PLAN_FAILED_NOTICE}
        finally:
            self.plan_latch.release()

    # --- Profile and integrations ---
    def update_profile(self, field: str, value: str) -> Dict[str, Any]:
        if field not in EDITABLE_PROFILE_FIELDS:
            return {"status": "error", "data": None, "message": f"Field '{field}' is not editable."}
        try:
            user = self.store.update_profile(**{field: value})
        except StorageError as e:
            return self._storage_failure("update_profile", e)
        return {"status": "success", "data": user, "message": ""}

    def request_connection(self, service: str) -> Dict[str, Any]:
        """Opens the placeholder connect dialog for ``service``."""
        if service not in CONNECTION_FLAGS:
            return {"status": "error", "data": None, "message": f"Unknown service: {service}"}
        self.pending_connection = service
        return {"status": "success", "data": service, "message": ""}

    def confirm_connection(self) -> Dict[str, Any]:
        """Marks the pending service as connected. No authentication takes place."""
        service = self.pending_connection
        if service is None:
            return {"status": "noop", "data": None, "message": "No connection pending."}
        self.pending_connection = None
        try:
            user = self.store.set_connection(service, True)
        except StorageError as e:
            return self._storage_failure("confirm_connection", e)
        self.monitoring_manager.log_info("External service marked as connected.", {"service": service})
        return {"status": "success", "data": user, "message": ""}

    def cancel_connection(self) -> Dict[str, Any]:
        self.pending_connection = None
        return {"status": "success", "data": None, "message": ""}

    def set_connection(self, service: str, connected: bool) -> Dict[str, Any]:
        """Settings toggle for an integration flag."""
        if service not in CONNECTION_FLAGS:
            return {"status": "error", "data": None, "message": f"Unknown service: {service}"}
        try:
            user = self.store.set_connection(service, connected)
        except StorageError as e:
            return self._storage_failure("set_connection", e)
        return {"status": "success", "data": user, "message": ""}

    # --- Read models for the views ---
    @property
    def is_planning(self) -> bool:
        return self.plan_latch.is_requesting

    def dashboard_data(self) -> Dict[str, Any]:
        return {
            "user": self.store.user,
            "tasks": self.store.tasks.sorted_view(),
            "pending_count": self.store.tasks.pending_count(),
        }

    def planner_data(self) -> Dict[str, Any]:
        return {
            "sessions": self.store.sessions,
            "reminders": self.store.reminders,
            "task_titles": {t.id: t.title for t in self.store.tasks},
            "orphaned_task_ids": self.store.orphaned_task_ids(),
        }

    def calendar_data(self) -> List[Dict[str, Any]]:
        """Agenda entries (sessions, reminders, due dates) ordered by day."""
        titles = {t.id: t.title for t in self.store.tasks}
        entries: List[Dict[str, Any]] = []
        for task in self.store.tasks:
            if not task.is_completed:
                entries.append(
                    {"date": task.due_date, "kind": "due", "label": task.title, "task_id": task.id,
                     "start_time": None, "duration": None, "task_title": task.title}
                )
        for session in self.store.sessions:
            entries.append(
                {"date": session.date, "kind": "session", "label": session.topic, "task_id": session.task_id,
                 "start_time": session.start_time, "duration": session.duration,
                 "task_title": titles.get(session.task_id)}
            )
        for reminder in self.store.reminders:
            entries.append(
                {"date": reminder.date, "kind": "reminder", "label": reminder.message, "task_id": reminder.task_id,
                 "start_time": None, "duration": None, "task_title": titles.get(reminder.task_id)}
            )
        return sorted(entries, key=lambda e: (e["date"], e["start_time"] or ""))
