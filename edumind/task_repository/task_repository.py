# -*- coding: utf-8 -*-
"""In-memory repository of the user's tasks."""
import uuid
from datetime import date
from typing import Iterable, Iterator, List, Optional, Tuple

from edumind.models import Difficulty, Task, TaskSource, TaskType


class TaskRepository:
    """
    Ordered list of Task records. New tasks go to the front, like the
    dashboard shows them before sorting.
    """

    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self._tasks: List[Task] = list(tasks or [])

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex

    def add(
        self,
        title: str,
        subject: str,
        due_date: date,
        type: TaskType = TaskType.HOMEWORK,
        difficulty: Difficulty = Difficulty.MEDIUM,
        description: str = "",
    ) -> Task:
        """Creates a manual, not completed task and prepends it."""
        task = Task(
            id=self._new_id(),
            title=title,
            subject=subject,
            due_date=due_date,
            type=type,
            difficulty=difficulty,
            description=description,
            is_completed=False,
            source=TaskSource.MANUAL,
        )
        self._tasks.insert(0, task)
        return task

    def get(self, task_id: str) -> Optional[Task]:
        return next((t for t in self._tasks if t.id == task_id), None)

    def toggle_complete(self, task_id: str) -> Optional[Task]:
        """Flips ``is_completed``. Unknown ids are ignored and return None."""
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                updated = task.model_copy(update={"is_completed": not task.is_completed})
                self._tasks[index] = updated
                return updated
        return None

    def delete(self, task_id: str) -> bool:
        """Removes the task; returns False when no task has that id."""
        remaining = [t for t in self._tasks if t.id != task_id]
        removed = len(remaining) != len(self._tasks)
        self._tasks = remaining
        return removed

    def sorted_view(self) -> Tuple[Task, ...]:
        """All tasks by ascending due date. ``sorted`` is stable, so ties keep list order."""
        return tuple(sorted(self._tasks, key=lambda t: t.due_date))

    def pending(self) -> List[Task]:
        return [t for t in self._tasks if not t.is_completed]

    def pending_count(self) -> int:
        return sum(1 for t in self._tasks if not t.is_completed)

    def to_list(self) -> List[Task]:
        return list(self._tasks)
