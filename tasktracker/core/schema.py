"""
Record contract, declared field tables and the batch-read envelope.

Every stored entity is a dataclass subclass of Record. Its field table
(RecordSchema) is built once per class from the dataclass declaration and
then consulted by name by the validator, the patch applier and the store
filters, so none of them needs per-entity code.
"""

import enum
import threading
import time
import typing
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Generic, Iterator, List, Mapping, Optional, Type, TypeVar, Union

# Wire names that can never be changed once a record exists
PROTECTED_FIELDS = ("id", "createdAt")

# Error code recorded in a Collection for ids that were not found
NOT_FOUND = 404

FILTER_EXACT = "exact"
FILTER_CONTAINS = "contains"

SCALAR_TYPES = (str, int, float, bool)


def now_millis() -> int:
    """Current time as integer epoch milliseconds."""
    return time.time_ns() // 1_000_000


def to_camel(name: str) -> str:
    """created_at -> createdAt"""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class FieldTypeError(TypeError):
    """A value cannot be converted to the declared type of a field."""

    def __init__(self, field_name: str, message: str):
        super().__init__(f"{field_name}: {message}")
        self.field_name = field_name
        self.message = message


def _describe(value: Any) -> str:
    return type(value).__name__


@dataclass(frozen=True)
class FieldSpec:
    """One row of a record's field table."""

    name: str
    """Wire name, as used in JSON bodies, patch maps and filters"""

    attr: str
    """Python attribute name on the record"""

    type: type
    """Declared scalar type or Enum subclass"""

    filter_mode: Optional[str] = None
    """FILTER_EXACT, FILTER_CONTAINS, or None when the field is not filterable"""

    @property
    def is_enum(self) -> bool:
        return isinstance(self.type, type) and issubclass(self.type, enum.Enum)

    @property
    def type_name(self) -> str:
        return self.type.__name__

    def match_symbol(self, value: str) -> Optional[enum.Enum]:
        """Find the enum member whose symbolic name equals value, ignoring case."""
        wanted = value.casefold()
        for member in self.type:
            if member.name.casefold() == wanted:
                return member
        return None

    def accepts(self, value: Any) -> bool:
        """Type compatibility check. None is compatible with every field."""
        if value is None:
            return True
        if self.type is bool:
            return isinstance(value, bool)
        # bool is an int subclass in Python but never a number on the wire
        if isinstance(value, bool):
            return False
        if self.type is float:
            return isinstance(value, (int, float))
        if isinstance(value, self.type):
            return True
        if self.is_enum and isinstance(value, str):
            return self.match_symbol(value) is not None
        return False

    def coerce(self, value: Any) -> Any:
        """Convert value to the declared type or raise FieldTypeError."""
        if value is None:
            return None
        if self.is_enum and isinstance(value, str) and not isinstance(value, self.type):
            member = self.match_symbol(value)
            if member is None:
                raise FieldTypeError(self.name, f"'{value}' is not a valid {self.type_name}")
            return member
        if not self.accepts(value):
            raise FieldTypeError(
                self.name, f"Expected {self.type_name} but got {_describe(value)}"
            )
        if self.type is float and isinstance(value, int):
            return float(value)
        return value

    def matches_filter(self, value: Any, wanted: str) -> bool:
        """Check a stored value against a plain string filter value."""
        if value is None:
            return False
        if self.is_enum:
            member = self.match_symbol(wanted)
            return member is not None and value is member
        if self.filter_mode == FILTER_CONTAINS:
            return wanted.casefold() in str(value).casefold()
        if isinstance(value, bool):
            return str(value).lower() == wanted.strip().lower()
        return str(value) == wanted


def _unwrap_optional(declared: Any) -> Any:
    if typing.get_origin(declared) is Union:
        args = [arg for arg in typing.get_args(declared) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return declared


def _filter_mode(declared: type, metadata: Mapping[str, Any]) -> Optional[str]:
    mode = metadata.get("filter", True)
    if mode is False:
        return None
    if mode in (FILTER_EXACT, FILTER_CONTAINS):
        return mode
    if declared is str:
        return FILTER_CONTAINS
    return FILTER_EXACT


class RecordSchema:
    """Ordered table of FieldSpecs for one record type, keyed by wire name."""

    def __init__(self, record_type: type, specs: List[FieldSpec]):
        self.record_type = record_type
        self._fields: Dict[str, FieldSpec] = {spec.name: spec for spec in specs}
        self._filters: Dict[str, FieldSpec] = {
            spec.name.lower(): spec for spec in specs if spec.filter_mode
        }

    @classmethod
    def build(cls, record_type: type) -> "RecordSchema":
        """Build the table from a dataclass declaration."""
        hints = typing.get_type_hints(record_type)
        specs = []
        for dc_field in fields(record_type):
            declared = _unwrap_optional(hints[dc_field.name])
            is_enum = isinstance(declared, type) and issubclass(declared, enum.Enum)
            if declared not in SCALAR_TYPES and not is_enum:
                raise TypeError(
                    f"{record_type.__name__}.{dc_field.name}: unsupported field type {declared!r}"
                )
            specs.append(FieldSpec(
                name=dc_field.metadata.get("wire", to_camel(dc_field.name)),
                attr=dc_field.name,
                type=declared,
                filter_mode=_filter_mode(declared, dc_field.metadata),
            ))
        return cls(record_type, specs)

    @property
    def entity_name(self) -> str:
        return self.record_type.__name__

    @property
    def names(self) -> List[str]:
        return list(self._fields)

    def get(self, name: str) -> Optional[FieldSpec]:
        return self._fields.get(name)

    def filter_field(self, key: str) -> Optional[FieldSpec]:
        """Resolve a filter key (case-insensitive) to a filterable field."""
        return self._filters.get(key.lower())

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)


_schema_cache: Dict[type, RecordSchema] = {}
_schema_lock = threading.Lock()

RecordT = TypeVar("RecordT", bound="Record")


@dataclass
class Record:
    """Base shape of every stored item: id plus creation/update timestamps."""

    id: Optional[str] = field(default=None, metadata={"filter": False})
    created_at: Optional[int] = field(default=None, metadata={"filter": False})
    updated_at: Optional[int] = field(default=None, metadata={"filter": False})

    @classmethod
    def schema(cls) -> RecordSchema:
        """Field table for this record type, built on first use."""
        schema = _schema_cache.get(cls)
        if schema is None:
            with _schema_lock:
                schema = _schema_cache.get(cls)
                if schema is None:
                    schema = RecordSchema.build(cls)
                    _schema_cache[cls] = schema
        return schema

    def field_values(self) -> Dict[str, Any]:
        """Raw values keyed by wire name, None included."""
        return {spec.name: getattr(self, spec.attr) for spec in self.schema()}

    def to_dict(self, include_none: bool = True) -> Dict[str, Any]:
        """JSON-ready mapping; enum members are rendered by name."""
        data = {}
        for name, value in self.field_values().items():
            if value is None and not include_none:
                continue
            data[name] = value.name if isinstance(value, enum.Enum) else value
        return data

    @classmethod
    def from_dict(cls: Type[RecordT], data: Mapping[str, Any]) -> RecordT:
        """Build a record from a wire-named mapping.

        Strings naming an enum symbol are converted; any other value is
        assigned as given so that schema validation can report it. Keys
        that are not declared fields are ignored.
        """
        schema = cls.schema()
        kwargs = {}
        for key, value in data.items():
            spec = schema.get(key)
            if spec is None:
                continue
            if spec.is_enum and isinstance(value, str):
                value = spec.match_symbol(value) or value
            kwargs[spec.attr] = value
        return cls(**kwargs)


@dataclass
class Collection(Generic[RecordT]):
    """Batch read envelope: found items and per-key error codes.

    A key lives in exactly one of the two maps.
    """

    results: Dict[str, RecordT] = field(default_factory=dict)
    errors: Dict[str, int] = field(default_factory=dict)

    def add_result(self, key: str, item: RecordT) -> None:
        self.errors.pop(key, None)
        self.results[key] = item

    def add_error(self, key: str, code: int) -> None:
        self.results.pop(key, None)
        self.errors[key] = code

    def __len__(self) -> int:
        return len(self.results) + len(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": {key: item.to_dict() for key, item in self.results.items()},
            "errors": dict(self.errors),
        }
