from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from django.db import models, transaction
from django.db.models import Q

from clinic_records.core.application.cqrs import PagedResult
from clinic_records.core.domain.entities._base import TenantScopedEntity
from clinic_records.core.domain.repositories.entity_repository import EntityRepository
from clinic_records.core.domain.specifications.list_specification import (
    FilterOperator,
    ListSpecification,
    Predicate,
)

_LOOKUPS = {
    FilterOperator.EQUAL: "exact",
    FilterOperator.NOT_EQUAL: "exact",
    FilterOperator.GREATER_THAN: "gt",
    FilterOperator.LESS_THAN: "lt",
    FilterOperator.GREATER_OR_EQUAL: "gte",
    FilterOperator.LESS_OR_EQUAL: "lte",
    FilterOperator.CONTAINS: "icontains",
    FilterOperator.STARTS_WITH: "istartswith",
    FilterOperator.ENDS_WITH: "iendswith",
    FilterOperator.IN: "in",
}


class DjangoEntityRepoImpl(EntityRepository):
    """
    Generic Django ORM adapter. Every queryset starts from
    `tenant_id=<caller tenant>` before anything else is applied.
    """

    def __init__(self, model: type[models.Model], entity_cls: type[TenantScopedEntity]) -> None:
        self.model = model
        self.entity_cls = entity_cls
        self.log = structlog.get_logger(__name__).bind(table=model._meta.db_table)

    def _scoped(self, tenant_id: uuid.UUID):
        return self.model.objects.filter(tenant_id=tenant_id)

    # ------------------------------------------------------------------  writes
    def add(self, entity: TenantScopedEntity) -> TenantScopedEntity:
        obj = self.model.objects.create(**entity.to_dict())
        return self.entity_cls.from_model(obj)

    def save(self, entity: TenantScopedEntity) -> TenantScopedEntity:
        values: dict[str, Any] = entity.to_dict()
        values.pop("id")
        updated = self._scoped(entity.tenant_id).filter(id=entity.id).update(**values)
        if not updated:
            self.log.warning("entity.save_missed", entity_id=str(entity.id))
        return entity

    def delete(self, tenant_id: uuid.UUID, entity_id: uuid.UUID) -> bool:
        deleted, _ = self._scoped(tenant_id).filter(id=entity_id).delete()
        return deleted > 0

    @contextmanager
    def locked(self, tenant_id: uuid.UUID, entity_id: uuid.UUID) -> Iterator[TenantScopedEntity | None]:
        with transaction.atomic():
            obj = self._scoped(tenant_id).select_for_update().filter(id=entity_id).first()
            yield self.entity_cls.from_model(obj) if obj is not None else None

    # ------------------------------------------------------------------  reads
    def find_by_id(self, tenant_id: uuid.UUID, entity_id: uuid.UUID) -> TenantScopedEntity | None:
        obj = self._scoped(tenant_id).filter(id=entity_id).first()
        return self.entity_cls.from_model(obj) if obj is not None else None

    def find_page(self, spec: ListSpecification) -> PagedResult[TenantScopedEntity]:
        qs = self._scoped(spec.tenant_id)

        for predicate in spec.predicates:
            qs = qs.filter(self._to_q(predicate))

        if spec.search_term and spec.search_fields:
            search = Q()
            for name in spec.search_fields:
                search |= Q(**{f"{name}__icontains": spec.search_term})
            qs = qs.filter(search)

        total = qs.count()
        ordering = [f"-{key.field}" if key.descending else key.field for key in spec.ordering]
        # bounds past the counted rows overflow the database's integer limits
        if spec.offset >= total:
            items = []
        else:
            end = spec.offset + min(spec.limit, total - spec.offset)
            rows = qs.order_by(*ordering)[spec.offset : end]
            items = [self.entity_cls.from_model(obj) for obj in rows]
        return PagedResult(items=items, total=total, page=spec.page, page_size=spec.page_size)

    @staticmethod
    def _to_q(predicate: Predicate) -> Q:
        if predicate.value is None:
            # only Equal / NotEqual carry a null operand
            return Q(**{f"{predicate.field}__isnull": predicate.operator is FilterOperator.EQUAL})

        q = Q(**{f"{predicate.field}__{_LOOKUPS[predicate.operator]}": predicate.value})
        return ~q if predicate.operator is FilterOperator.NOT_EQUAL else q
