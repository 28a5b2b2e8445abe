"""
Task entity: a unit of work with a status and a priority.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional

from ..core.schema import Record


class TaskStatus(enum.Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass
class Task(Record):
    """A task. id, createdAt and updatedAt come from Record."""

    title: Optional[str] = None
    description: Optional[str] = field(default=None, metadata={"filter": False})
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
