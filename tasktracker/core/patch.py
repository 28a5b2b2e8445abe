"""
Partial updates: merge a sparse field map into a record through its field table.
"""

import copy
import enum
from typing import Mapping, Optional, Union

from .schema import PROTECTED_FIELDS, FieldTypeError, RecordT, now_millis

# JSON-compatible values a patch map may carry
PatchValue = Union[str, int, float, bool, enum.Enum, None]


class PatchCoercionError(TypeError):
    """A patch value could not be converted to its field's declared type.

    Schema validation runs before any patch is applied, so reaching this
    means the two stages disagree.
    """

    def __init__(self, entity: str, field_name: str, message: str):
        super().__init__(f"Cannot apply patch to {entity}.{field_name}: {message}")
        self.entity = entity
        self.field_name = field_name


def apply_patch(record: RecordT, patch_map: Mapping[str, PatchValue], now: Optional[int] = None) -> RecordT:
    """Return a copy of record with patch_map applied.

    id and createdAt are skipped, as are names the record does not declare.
    updatedAt is refreshed even when nothing else changes.
    """
    schema = record.schema()
    patched = copy.copy(record)

    for name, value in patch_map.items():
        if name in PROTECTED_FIELDS:
            continue
        spec = schema.get(name)
        if spec is None:
            continue
        try:
            setattr(patched, spec.attr, spec.coerce(value))
        except FieldTypeError as e:
            raise PatchCoercionError(schema.entity_name, name, e.message) from e

    patched.updated_at = now if now is not None else now_millis()
    return patched