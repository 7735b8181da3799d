# -*- coding: utf-8 -*-
"""
Persistence adapters for the planner state.

The state lives in four independent JSON slots (profile, tasks, sessions,
reminders) under fixed keys, the way a browser's local storage would hold
them. Each slot is written and read on its own: a corrupted slot falls back
to its default without affecting the others, and there is no atomicity
across slots.
"""
import json
import os
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from edumind.models import PlannerState, Reminder, StudySession, Task, UserProfile
from edumind.monitoring_manager.monitoring_manager import MonitoringManager

USER_KEY = "edu_user"
TASKS_KEY = "edu_tasks"
SESSIONS_KEY = "edu_sessions"
REMINDERS_KEY = "edu_reminders"

# PlannerState field -> storage key
SLOT_KEYS = {
    "user": USER_KEY,
    "tasks": TASKS_KEY,
    "sessions": SESSIONS_KEY,
    "reminders": REMINDERS_KEY,
}

_SLOT_ADAPTERS = {
    "user": TypeAdapter(UserProfile),
    "tasks": TypeAdapter(List[Task]),
    "sessions": TypeAdapter(List[StudySession]),
    "reminders": TypeAdapter(List[Reminder]),
}


class StorageError(Exception):
    """A slot could not be written to the local store."""


class StorageAdapter:
    """
    Interface between the state container and a key-value store.

    Subclasses implement ``_read_slot``/``_write_slot``; ``load`` and ``save``
    handle the encoding and the per-slot fallback.
    """

    def __init__(self, monitoring_manager: Optional[MonitoringManager] = None):
        self.monitoring_manager = monitoring_manager

    def _read_slot(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def _write_slot(self, key: str, value: str) -> None:
        raise NotImplementedError

    @staticmethod
    def encode_state(state: PlannerState) -> Dict[str, str]:
        """Serializes each collection to the JSON text stored under its key."""
        payloads: Dict[str, Any] = {
            USER_KEY: state.user.to_storage_dict(),
            TASKS_KEY: [t.to_storage_dict() for t in state.tasks],
            SESSIONS_KEY: [s.to_storage_dict() for s in state.sessions],
            REMINDERS_KEY: [r.to_storage_dict() for r in state.reminders],
        }
        return {key: json.dumps(value, ensure_ascii=False) for key, value in payloads.items()}

    def _decode_slot(self, field: str, raw: Optional[str]) -> Any:
        key = SLOT_KEYS[field]
        if raw is None:
            return None
        try:
            return _SLOT_ADAPTERS[field].validate_json(raw)
        except ValidationError as e:
            if self.monitoring_manager:
                self.monitoring_manager.log_warning(
                    f"Stored slot '{key}' is unreadable; falling back to its default.",
                    {"slot": key, "error_count": e.error_count()},
                )
            return None

    def load(self) -> PlannerState:
        """
        Reads every slot. Missing or unparsable slots get their default; a
        failed read raises StorageError.
        """
        values = {}
        for field, key in SLOT_KEYS.items():
            decoded = self._decode_slot(field, self._read_slot(key))
            if decoded is not None:
                values[field] = decoded
        return PlannerState(**values)

    def save(self, state: PlannerState) -> None:
        """Writes the four slots one after the other."""
        for key, value in self.encode_state(state).items():
            self._write_slot(key, value)


class InMemoryStorageAdapter(StorageAdapter):
    """Keeps the serialized slots in a dict. Used by tests and the "memory" backend."""

    def __init__(
        self,
        slots: Optional[Dict[str, str]] = None,
        monitoring_manager: Optional[MonitoringManager] = None,
    ):
        super().__init__(monitoring_manager)
        self.slots: Dict[str, str] = dict(slots or {})
        self.save_count = 0

    def _read_slot(self, key: str) -> Optional[str]:
        return self.slots.get(key)

    def _write_slot(self, key: str, value: str) -> None:
        self.slots[key] = value

    def save(self, state: PlannerState) -> None:
        super().save(state)
        self.save_count += 1


class SQLiteStorageAdapter(StorageAdapter):
    """Key-value slots in a single SQLite table."""

    def __init__(self, db_path: str, monitoring_manager: Optional[MonitoringManager] = None):
        """
        Args:
            db_path (str): Database file; its directory is created if missing.
            monitoring_manager (MonitoringManager): Logger for connection and slot errors.
        """
        super().__init__(monitoring_manager)
        self.db_path = db_path
        self._db_connection: Optional[sqlite3.Connection] = None
        self._ensure_db_directory()
        self._connect_db()
        self._initialize_database()

    def _log_info(self, message: str, context: Optional[Dict[str, Any]] = None):
        if self.monitoring_manager:
            self.monitoring_manager.log_info(message, context)

    def _log_error(self, message: str, context: Optional[Dict[str, Any]] = None):
        if self.monitoring_manager:
            self.monitoring_manager.log_error(message, context, exc_info=True)

    def _ensure_db_directory(self):
        db_dir = os.path.dirname(self.db_path)
        if db_dir and not os.path.exists(db_dir):
            os.makedirs(db_dir, exist_ok=True)
            self._log_info(f"Created database directory: {db_dir}")

    def _connect_db(self):
        try:
            # Streamlit reruns the script on different threads.
            self._db_connection = sqlite3.connect(self.db_path, check_same_thread=False)
            self._log_info(f"Connected to local store: {self.db_path}")
        except sqlite3.Error as e:
            self._log_error(f"Error connecting to database {self.db_path}: {e}")
            raise StorageError(f"Failed to connect to database: {e}") from e

    def _initialize_database(self):
        try:
            self._db_connection.execute(
                """
                CREATE TABLE IF NOT EXISTS local_storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            self._db_connection.commit()
        except sqlite3.Error as e:
            self._log_error(f"Error initializing local_storage table: {e}")
            raise StorageError(f"Failed to initialize local_storage table: {e}") from e

    def _read_slot(self, key: str) -> Optional[str]:
        try:
            row = self._db_connection.execute(
                "SELECT value FROM local_storage WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            self._log_error(f"Error reading slot '{key}': {e}", {"slot": key})
            raise StorageError(f"Failed to read slot '{key}': {e}") from e
        return row[0] if row else None

    def _write_slot(self, key: str, value: str) -> None:
        updated_at = datetime.now(timezone.utc).isoformat()
        try:
            self._db_connection.execute(
                "INSERT INTO local_storage (key, value, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
                (key, value, updated_at),
            )
            self._db_connection.commit()
        except sqlite3.Error as e:
            self._log_error(f"Error writing slot '{key}': {e}", {"slot": key})
            try:
                self._db_connection.rollback()
            except sqlite3.Error as rb_e:
                self._log_error(f"Error during rollback: {rb_e}", {"slot": key})
            raise StorageError(f"Failed to write slot '{key}': {e}") from e

    def close(self):
        if self._db_connection:
            self._db_connection.close()
            self._db_connection = None
            self._log_info(f"Local store {self.db_path} closed.")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
