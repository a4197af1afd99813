from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from typing import Any

from clinic_records.core.domain.schema.entity_schema import FieldType


class FilterOperator(enum.Enum):
    """Operators understood by list filters, in wire order (index = legacy numeric code)."""
    EQUAL = "Equal"
    NOT_EQUAL = "NotEqual"
    GREATER_THAN = "GreaterThan"
    LESS_THAN = "LessThan"
    GREATER_OR_EQUAL = "GreaterOrEqual"
    LESS_OR_EQUAL = "LessOrEqual"
    CONTAINS = "Contains"
    STARTS_WITH = "StartsWith"
    ENDS_WITH = "EndsWith"
    IN = "In"

    @property
    def is_comparison(self) -> bool:
        return self in _COMPARISONS

    @property
    def is_text_match(self) -> bool:
        return self in _TEXT_MATCHES

    def accepts(self, field_type: FieldType) -> bool:
        if self.is_comparison:
            return field_type.is_ordered
        if self.is_text_match:
            return field_type is FieldType.STRING
        return True


_COMPARISONS = frozenset({
    FilterOperator.GREATER_THAN,
    FilterOperator.LESS_THAN,
    FilterOperator.GREATER_OR_EQUAL,
    FilterOperator.LESS_OR_EQUAL,
})
_TEXT_MATCHES = frozenset({
    FilterOperator.CONTAINS,
    FilterOperator.STARTS_WITH,
    FilterOperator.ENDS_WITH,
})


class SortOrder(enum.Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Predicate:
    """One validated filter: canonical field, operator and native-typed value."""
    field: str
    operator: FilterOperator
    value: Any


@dataclass(frozen=True)
class OrderKey:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class ListSpecification:
    """
    Fully validated list request, ready for a repository to execute.

    `tenant_id` is always applied before the predicates; `search_fields`
    are OR-ed with `search_term` and the result AND-ed with `predicates`.
    """
    tenant_id: uuid.UUID
    predicates: tuple[Predicate, ...]
    search_term: str | None
    search_fields: tuple[str, ...]
    ordering: tuple[OrderKey, ...]
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size
