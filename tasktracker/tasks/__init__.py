"""Task entity, store and validator."""

from .models import Task, TaskPriority, TaskStatus
from .store import TaskStore
from .validator import TaskValidator

__all__ = ['Task', 'TaskPriority', 'TaskStatus', 'TaskStore', 'TaskValidator']
