"""
Storage for Task records.
"""

from ..core.store import InMemoryStore
from .models import Task


class TaskStore(InMemoryStore[Task]):
    """In-memory Task store.

    Filters: status and priority match the enum name ignoring case, title
    matches any case-insensitive substring. Other keys are ignored.
    """

    def __init__(self):
        super().__init__(Task)
