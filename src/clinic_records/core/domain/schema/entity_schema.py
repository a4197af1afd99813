"""
Explicit per-entity schema tables.

Every name that reaches the core from a request (filter properties, sort
fields, projected fields, patch paths) is resolved here, so an unknown name
fails at validation time instead of surfacing as an ORM error.
"""
from __future__ import annotations

import enum
import re
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from clinic_records.core.domain.events.exceptions import ValidationError

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_TRUE = {"true", "1"}
_FALSE = {"false", "0"}


class FieldType(enum.Enum):
    STRING = "string"
    INTEGER = "integer"
    DECIMAL = "decimal"
    DATE = "date"
    DATETIME = "datetime"
    BOOLEAN = "boolean"
    UUID = "uuid"

    @property
    def is_ordered(self) -> bool:
        return self not in (FieldType.BOOLEAN, FieldType.UUID)


def normalize_name(name: str) -> str:
    """`CreatedOn`, `createdOn` and `created_on` share one lookup key."""
    return name.replace("_", "").replace("-", "").strip().lower()


@dataclass(frozen=True)
class FieldSpec:
    name: str
    type: FieldType
    filterable: bool = True
    sortable: bool = True
    searchable: bool = False
    immutable: bool = False
    server_managed: bool = False

    @property
    def writable(self) -> bool:
        return not (self.immutable or self.server_managed)

    def coerce(self, raw: Any) -> Any:
        """
        Converts a wire value (usually a string from a filter) to the
        native type of the field; raises ValidationError on mismatch.
        """
        if raw is None:
            return None
        try:
            return _COERCERS[self.type](raw)
        except (ValueError, TypeError, InvalidOperation) as exc:
            raise ValidationError(
                f"Value '{raw}' is not a valid {self.type.value} for '{self.name}'.",
                errors=[{"field": self.name, "message": str(exc) or "invalid value"}],
            ) from exc


def _to_string(raw: Any) -> str:
    if isinstance(raw, (dict, list)):
        raise TypeError("expected a scalar")
    return str(raw)


def _to_integer(raw: Any) -> int:
    if isinstance(raw, bool):
        raise TypeError("expected an integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if not raw.is_integer():
            raise ValueError("expected an integer")
        return int(raw)
    text = str(raw).strip()
    if not _INTEGER_RE.match(text):
        raise ValueError("expected an integer")
    return int(text)


def _to_decimal(raw: Any) -> Decimal:
    if isinstance(raw, bool):
        raise TypeError("expected a number")
    value = Decimal(str(raw).strip())
    if not value.is_finite():
        raise ValueError("expected a finite number")
    return value


def _to_date(raw: Any) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    return date.fromisoformat(str(raw).strip())


def _to_datetime(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        value = raw
    else:
        text = str(raw).strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _to_boolean(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError("expected true or false")


def _to_uuid(raw: Any) -> uuid.UUID:
    if isinstance(raw, uuid.UUID):
        return raw
    return uuid.UUID(str(raw).strip())


_COERCERS = {
    FieldType.STRING: _to_string,
    FieldType.INTEGER: _to_integer,
    FieldType.DECIMAL: _to_decimal,
    FieldType.DATE: _to_date,
    FieldType.DATETIME: _to_datetime,
    FieldType.BOOLEAN: _to_boolean,
    FieldType.UUID: _to_uuid,
}


# Identity, tenant and audit columns present on every entity.
AUDIT_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("id", FieldType.UUID, immutable=True),
    FieldSpec("tenant_id", FieldType.UUID, immutable=True, filterable=False, sortable=False),
    FieldSpec("created_on", FieldType.DATETIME, immutable=True),
    FieldSpec("created_by", FieldType.UUID, immutable=True),
    FieldSpec("updated_on", FieldType.DATETIME, server_managed=True),
    FieldSpec("updated_by", FieldType.UUID, server_managed=True),
)


@dataclass(frozen=True)
class EntitySchema:
    entity_name: str
    fields: tuple[FieldSpec, ...]
    _index: dict[str, FieldSpec] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: dict[str, FieldSpec] = {}
        for spec in self.fields:
            key = normalize_name(spec.name)
            if key in index:
                raise ValueError(f"duplicate field '{spec.name}' in {self.entity_name} schema")
            index[key] = spec
        object.__setattr__(self, "_index", index)

    @classmethod
    def with_audit_fields(cls, entity_name: str, business_fields: Iterable[FieldSpec]) -> EntitySchema:
        return cls(entity_name, (*AUDIT_FIELDS, *business_fields))

    # ------------------------------------------------------------------ lookup
    def find(self, name: str | None) -> FieldSpec | None:
        if not name:
            return None
        return self._index.get(normalize_name(name))

    def get(self, name: str) -> FieldSpec:
        spec = self.find(name)
        if spec is None:
            raise ValidationError(
                f"Property '{name}' does not exist on {self.entity_name}.",
                errors=[{"field": name, "message": "unknown property"}],
            )
        return spec

    def filterable(self, name: str) -> FieldSpec:
        spec = self.get(name)
        if not spec.filterable:
            raise ValidationError(
                f"Property '{name}' cannot be used as a filter on {self.entity_name}.",
                errors=[{"field": name, "message": "not filterable"}],
            )
        return spec

    def sortable(self, name: str) -> FieldSpec:
        spec = self.get(name)
        if not spec.sortable:
            raise ValidationError(
                f"Property '{name}' cannot be used to sort {self.entity_name}.",
                errors=[{"field": name, "message": "not sortable"}],
            )
        return spec

    def project(self, names: Sequence[str]) -> tuple[str, ...]:
        """Canonical names for a projection, in request order, duplicates dropped."""
        out: list[str] = []
        for name in names:
            canonical = self.get(name).name
            if canonical not in out:
                out.append(canonical)
        return tuple(out)

    # ------------------------------------------------------------------ groups
    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def searchable_fields(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.searchable)

    @property
    def business_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if f.writable)

    @property
    def immutable_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if f.immutable)

    def canonicalize(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Renames payload keys to schema names; keys that match no field
        are dropped.
        """
        out: dict[str, Any] = {}
        for key, value in payload.items():
            spec = self.find(key) if isinstance(key, str) else None
            if spec is not None:
                out[spec.name] = value
        return out
