# -*- coding: utf-8 -*-
"""Task repository module (TaskRepository)."""
from .task_repository import TaskRepository

__all__ = ["TaskRepository"]
