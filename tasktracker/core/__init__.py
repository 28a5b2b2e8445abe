"""
Generic resource engine: record contract, validation, patching and storage.
"""

# Package initialization for core module
from .schema import (
    NOT_FOUND,
    PROTECTED_FIELDS,
    Collection,
    FieldSpec,
    FieldTypeError,
    Record,
    RecordSchema,
    now_millis,
)
from .patch import PatchCoercionError, PatchValue, apply_patch
from .validation import (
    BusinessValidator,
    RecordValidationError,
    ResourceValidator,
    SchemaValidator,
)
from .store import InMemoryStore, ResourceStore

__all__ = [
    'NOT_FOUND',
    'PROTECTED_FIELDS',
    'Collection',
    'FieldSpec',
    'FieldTypeError',
    'Record',
    'RecordSchema',
    'now_millis',
    'PatchCoercionError',
    'PatchValue',
    'apply_patch',
    'BusinessValidator',
    'RecordValidationError',
    'ResourceValidator',
    'SchemaValidator',
    'InMemoryStore',
    'ResourceStore',
]
