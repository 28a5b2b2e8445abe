"""
Business rules for Task records, run after schema validation.
"""

from typing import Any, Optional

from ..core import config
from ..core.validation import BusinessValidator, SchemaValidator
from .models import Task


class TaskValidator(BusinessValidator[Task]):
    """Title, status and priority are required on create; length limits always apply."""

    record_type = Task
    required_fields = {
        "title": "Title is required",
        "status": "Status is required",
        "priority": "Priority is required",
    }

    def __init__(
        self,
        schema_validator: Optional[SchemaValidator] = None,
        max_title_length: Optional[int] = None,
        max_description_length: Optional[int] = None,
    ):
        super().__init__(schema_validator)
        if max_title_length is None:
            max_title_length = config.TASK_TITLE_MAX_LENGTH
        self.max_title_length = max_title_length
        if max_description_length is None:
            max_description_length = config.TASK_DESCRIPTION_MAX_LENGTH
        self.max_description_length = max_description_length

    def check_field(self, name: str, value: Any) -> Optional[str]:
        if value is None:
            return None

        if name == "title" and len(value) > self.max_title_length:
            return f"Title cannot exceed {self.max_title_length} characters"

        if name == "description" and len(value) > self.max_description_length:
            return f"Description cannot exceed {self.max_description_length} characters"

        return None
