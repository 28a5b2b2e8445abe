"""
Two-stage validation: type checks against the declared field table, then
entity business rules layered on top.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping as MappingABC
from typing import Any, Dict, Generic, Mapping, Optional, Type

from ..util.logging import logger
from .schema import Record, RecordT

UNKNOWN_FIELD_MESSAGE = "Unknown field - not part of entity schema"


class RecordValidationError(Exception):
    """Validation failed. errors maps each offending field to a message."""

    def __init__(self, errors: Mapping[str, str] = None, message: str = "Validation failed"):
        super().__init__(message)
        self.message = message
        self.errors: Dict[str, str] = dict(errors) if errors else {"error": message}

    def __str__(self) -> str:
        return f"{self.message}: {self.errors}"


def is_blank(value: Any) -> bool:
    """None, or a string with nothing but whitespace."""
    return value is None or (isinstance(value, str) and not value.strip())


class SchemaValidator(Generic[RecordT]):
    """Type checking for full records and patch maps of one record type.

    Only types are checked here; whether a field is required is a business rule.
    """

    def __init__(self, record_type: Type[RecordT]):
        self.record_type = record_type
        self.schema = record_type.schema()

    def check(self, values: Mapping[str, Any]) -> Dict[str, str]:
        """Run the type rules over a field map and return every error found."""
        errors = {}
        for name, value in values.items():
            spec = self.schema.get(name)
            if spec is None:
                errors[name] = UNKNOWN_FIELD_MESSAGE
                continue
            if spec.accepts(value):
                continue
            if spec.is_enum and isinstance(value, str):
                allowed = ", ".join(member.name for member in spec.type)
                errors[name] = f"Type mismatch. '{value}' is not a valid {spec.type_name}; expected one of: {allowed}"
            else:
                errors[name] = f"Type mismatch. Expected {spec.type_name} but got {type(value).__name__}"
        return errors

    def validate_record(self, record: RecordT) -> None:
        if not isinstance(record, self.record_type):
            raise RecordValidationError({"body": f"Expected a {self.schema.entity_name} record"})
        self._raise_if_any("validate_record", self.check(record.field_values()))

    def validate_patch(self, patch_map: Mapping[str, Any]) -> None:
        if not isinstance(patch_map, MappingABC):
            raise RecordValidationError({"body": "Patch body must be a JSON object"})
        self._raise_if_any("validate_patch", self.check(patch_map))

    def validate(self, target: Any) -> None:
        if isinstance(target, Record):
            self.validate_record(target)
        else:
            self.validate_patch(target)

    def _raise_if_any(self, operation: str, errors: Dict[str, str]) -> None:
        if errors:
            logger.log_schema_validation_error(operation, self.schema.entity_name, errors, stage="schema")
            raise RecordValidationError(errors)


class ResourceValidator(ABC, Generic[RecordT]):
    """Validation contract consumed by the transport layer."""

    @abstractmethod
    def validate_record(self, record: RecordT) -> None:
        """Validate a full record for create/replace. Raises RecordValidationError."""
        pass

    @abstractmethod
    def validate_patch(self, patch_map: Mapping[str, Any]) -> None:
        """Validate a sparse patch map. Raises RecordValidationError."""
        pass

    def validate(self, target: Any) -> None:
        """Dispatch to validate_record or validate_patch by argument shape."""
        if isinstance(target, Record):
            self.validate_record(target)
        else:
            self.validate_patch(target)


class BusinessValidator(ResourceValidator[RecordT]):
    """Entity rules run after a successful schema check.

    Subclasses set record_type and required_fields and override check_field.
    A schema failure is raised as is, without running any business rule.
    """

    record_type: Type[RecordT] = None
    required_fields: Mapping[str, str] = {}

    def __init__(self, schema_validator: Optional[SchemaValidator] = None):
        if schema_validator is None:
            schema_validator = SchemaValidator(self.record_type)
        self.schema_validator = schema_validator

    @property
    def entity_name(self) -> str:
        return self.schema_validator.schema.entity_name

    def check_field(self, name: str, value: Any) -> Optional[str]:
        """Return an error message for value, or None. Runs for create and patch."""
        return None

    def validate_record(self, record: RecordT) -> None:
        self.schema_validator.validate_record(record)

        values = record.field_values()
        errors = {}
        for name, message in self.required_fields.items():
            if is_blank(values.get(name)):
                errors[name] = message

        for name, value in values.items():
            if name in errors:
                continue
            problem = self.check_field(name, value)
            if problem:
                errors[name] = problem

        self._finish("validate_record", errors, len(values))

    def validate_patch(self, patch_map: Mapping[str, Any]) -> None:
        self.schema_validator.validate_patch(patch_map)

        errors = {}
        for name, value in patch_map.items():
            problem = self.check_field(name, value)
            if problem:
                errors[name] = problem

        self._finish("validate_patch", errors, len(patch_map))

    def _finish(self, operation: str, errors: Dict[str, str], field_count: int) -> None:
        if errors:
            logger.log_schema_validation_error(operation, self.entity_name, errors, stage="business")
            raise RecordValidationError(errors)
        logger.log_schema_validation_success(operation, self.entity_name, field_count)
