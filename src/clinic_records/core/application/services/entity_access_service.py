from __future__ import annotations

import uuid
from collections.abc import Mapping, Sequence
from typing import Any

from clinic_records.core.application.commands.entity_commands import (
    CreateEntityCommand,
    DeleteEntityCommand,
    PatchEntityCommand,
    UpdateEntityCommand,
)
from clinic_records.core.application.cqrs import CommandBus, PagedResult, QueryBus
from clinic_records.core.application.dtos.context_dto import EntityProjection, RequestContext
from clinic_records.core.application.dtos.filter_dto import FilterCriteria
from clinic_records.core.application.dtos.patch_dto import PATCH_OPERATION_TYPES, PatchOperation, parse_patch_document
from clinic_records.core.application.queries.entity_queries import GetEntityQuery, ListEntitiesQuery
from clinic_records.core.application.services.entity_registry import EntityDefinition
from clinic_records.core.application.services.query_resolver import QueryResolver


class EntityAccessService:
    """
    Facade used by the HTTP layer for one entity type.

    Stateless: every call takes an explicit RequestContext, validates its
    input and dispatches a command or query through the buses.
    """

    def __init__(self, definition: EntityDefinition, command_bus: CommandBus, query_bus: QueryBus) -> None:
        self.definition = definition
        self.commands = command_bus
        self.queries = query_bus

    @property
    def entity_name(self) -> str:
        return self.definition.name

    # ------------------------------------------------ writes
    def create(self, ctx: RequestContext, payload: Mapping[str, Any]) -> uuid.UUID:
        return self.commands.dispatch(
            CreateEntityCommand(entity_name=self.entity_name, context=ctx, payload=payload)
        )

    def update(self, ctx: RequestContext, entity_id: uuid.UUID, payload: Mapping[str, Any]) -> bool:
        return self.commands.dispatch(
            UpdateEntityCommand(entity_name=self.entity_name, context=ctx, id=entity_id, payload=payload)
        )

    def patch(self, ctx: RequestContext, entity_id: uuid.UUID, operations: Sequence[PatchOperation] | Any) -> bool:
        """`operations` may be parsed operations or a raw decoded JSON array."""
        if not (
            isinstance(operations, (list, tuple))
            and all(isinstance(op, PATCH_OPERATION_TYPES) for op in operations)
        ):
            operations = parse_patch_document(operations)
        return self.commands.dispatch(
            PatchEntityCommand(entity_name=self.entity_name, context=ctx, id=entity_id, operations=tuple(operations))
        )

    def delete(self, ctx: RequestContext, entity_id: uuid.UUID) -> bool:
        return self.commands.dispatch(
            DeleteEntityCommand(entity_name=self.entity_name, context=ctx, id=entity_id)
        )

    # ------------------------------------------------ reads
    def get(  # noqa: PLR0913
        self,
        ctx: RequestContext,
        filters: Sequence[FilterCriteria] | None = None,
        search_term: str | None = None,
        page_number: Any = 1,
        page_size: Any = 10,
        sort_field: str | None = None,
        sort_order: str | None = "asc",
    ) -> PagedResult:
        page, size = QueryResolver.validate_pagination(page_number, page_size)
        return self.queries.dispatch(
            ListEntitiesQuery(
                filters=tuple(filters or ()),
                page=page,
                page_size=size,
                entity_name=self.entity_name,
                context=ctx,
                search_term=search_term,
                sort_field=sort_field,
                sort_order=sort_order,
            )
        )

    def get_by_id(
        self,
        ctx: RequestContext,
        entity_id: uuid.UUID,
        fields: str | Sequence[str] | None = None,
    ) -> EntityProjection:
        return self.queries.dispatch(
            GetEntityQuery(
                entity_name=self.entity_name,
                context=ctx,
                id=entity_id,
                fields=self._split_fields(fields),
            )
        )

    @staticmethod
    def _split_fields(fields: str | Sequence[str] | None) -> tuple[str, ...] | None:
        if fields is None:
            return None
        items = fields.split(",") if isinstance(fields, str) else list(fields)
        cleaned = tuple(item.strip() for item in items if item and item.strip())
        return cleaned or None
