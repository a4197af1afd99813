"""
Query Resolver: turns client list parameters into a validated
ListSpecification and executes it against an entity repository.

Validation order matters for error reporting and mirrors the HTTP
contract: page size, page number, sort order, filters, sort field.
Nothing touches the repository until every check has passed.
"""
from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import Any

import structlog

from clinic_records.core.application.cqrs import PagedResult
from clinic_records.core.application.dtos.filter_dto import FilterCriteria
from clinic_records.core.domain.events.exceptions import ValidationError
from clinic_records.core.domain.repositories.entity_repository import EntityRepository
from clinic_records.core.domain.schema.entity_schema import EntitySchema
from clinic_records.core.domain.specifications.list_specification import (
    FilterOperator,
    ListSpecification,
    OrderKey,
    Predicate,
    SortOrder,
)

logger = structlog.get_logger(__name__)

PAGE_SIZE_INVALID = "Page size invalid."
PAGE_NUMBER_INVALID = "Page mumber invalid."
SORT_ORDER_INVALID = "Sort order invalid."

DEFAULT_ORDERING = (OrderKey("created_on"), OrderKey("id"))
TIE_BREAKER = OrderKey("id")


class QueryResolver:

    # ------------------------------------------------------------------ pagination
    @staticmethod
    def validate_pagination(page_number: Any, page_size: Any) -> tuple[int, int]:
        """Checks page size first, then page number; non-integers count as invalid."""
        size = _as_int(page_size)
        if size is None or size < 1:
            raise ValidationError(PAGE_SIZE_INVALID, errors=[{"field": "pageSize", "message": "must be >= 1"}])
        number = _as_int(page_number)
        if number is None or number < 1:
            raise ValidationError(PAGE_NUMBER_INVALID, errors=[{"field": "pageNumber", "message": "must be >= 1"}])
        return number, size

    @staticmethod
    def parse_sort_order(sort_order: str | SortOrder | None) -> SortOrder:
        if isinstance(sort_order, SortOrder):
            return sort_order
        if sort_order is None or not str(sort_order).strip():
            return SortOrder.ASC
        try:
            return SortOrder(str(sort_order).strip().lower())
        except ValueError:
            raise ValidationError(
                SORT_ORDER_INVALID, errors=[{"field": "sortOrder", "message": "expected asc or desc"}]
            ) from None

    # ------------------------------------------------------------------ compile
    def compile(  # noqa: PLR0913
        self,
        schema: EntitySchema,
        tenant_id: uuid.UUID,
        filters: Sequence[FilterCriteria] | None,
        search_term: str | None,
        page_number: Any,
        page_size: Any,
        sort_field: str | None = None,
        sort_order: str | SortOrder | None = None,
    ) -> ListSpecification:
        page, size = self.validate_pagination(page_number, page_size)
        order = self.parse_sort_order(sort_order)
        predicates = tuple(self._predicate(schema, c) for c in (filters or ()))
        term = search_term.strip() if search_term and search_term.strip() else None

        return ListSpecification(
            tenant_id=tenant_id,
            predicates=predicates,
            search_term=term,
            search_fields=schema.searchable_fields if term else (),
            ordering=self._ordering(schema, sort_field, order),
            page=page,
            page_size=size,
        )

    # ------------------------------------------------------------------ resolve
    def resolve(  # noqa: PLR0913
        self,
        collection: EntityRepository,
        schema: EntitySchema,
        tenant_id: uuid.UUID,
        filters: Sequence[FilterCriteria] | None,
        search_term: str | None,
        page_number: Any,
        page_size: Any,
        sort_field: str | None = None,
        sort_order: str | SortOrder | None = None,
    ) -> PagedResult:
        spec = self.compile(
            schema, tenant_id, filters, search_term, page_number, page_size, sort_field, sort_order
        )
        result = collection.find_page(spec)
        logger.debug(
            "query.resolved",
            entity=schema.entity_name,
            predicates=len(spec.predicates),
            search=bool(spec.search_term),
            page=spec.page,
            page_size=spec.page_size,
            total=result.total,
        )
        return result

    # ------------------------------------------------------------------ helpers
    @staticmethod
    def _predicate(schema: EntitySchema, criteria: FilterCriteria) -> Predicate:
        spec = schema.filterable(criteria.property_name)
        op = criteria.operator

        if not op.accepts(spec.type):
            raise ValidationError(
                f"Operator '{op.value}' cannot be applied to '{spec.name}' ({spec.type.value}).",
                errors=[{"field": criteria.property_name, "message": f"operator {op.value} not supported"}],
            )

        if criteria.value is None:
            if op in (FilterOperator.EQUAL, FilterOperator.NOT_EQUAL):
                return Predicate(spec.name, op, None)
            raise ValidationError(
                f"Operator '{op.value}' on '{spec.name}' requires a value.",
                errors=[{"field": criteria.property_name, "message": "value is required"}],
            )

        if op is FilterOperator.IN:
            items = [item.strip() for item in criteria.value.split(",") if item.strip()]
            if not items:
                raise ValidationError(
                    f"Operator 'In' on '{spec.name}' requires at least one value.",
                    errors=[{"field": criteria.property_name, "message": "empty list"}],
                )
            return Predicate(spec.name, op, tuple(spec.coerce(item) for item in items))

        if op.is_text_match:
            return Predicate(spec.name, op, criteria.value)

        return Predicate(spec.name, op, spec.coerce(criteria.value))

    @staticmethod
    def _ordering(schema: EntitySchema, sort_field: str | None, order: SortOrder) -> tuple[OrderKey, ...]:
        if not sort_field or not sort_field.strip():
            if order is SortOrder.DESC:
                return tuple(OrderKey(k.field, descending=True) for k in DEFAULT_ORDERING)
            return DEFAULT_ORDERING
        spec = schema.sortable(sort_field.strip())
        primary = OrderKey(spec.name, descending=order is SortOrder.DESC)
        if spec.name == TIE_BREAKER.field:
            return (primary,)
        return (primary, TIE_BREAKER)


def _as_int(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if raw is None:
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None
