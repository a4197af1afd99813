from collections.abc import Mapping

from clinic_records.core.application.cqrs import PagedResult, QueryHandler
from clinic_records.core.application.dtos.context_dto import EntityProjection
from clinic_records.core.application.queries.entity_queries import GetEntityQuery, ListEntitiesQuery
from clinic_records.core.application.services.entity_registry import EntityRegistry
from clinic_records.core.application.services.query_resolver import QueryResolver
from clinic_records.core.domain.events.exceptions import NotFoundError
from clinic_records.core.domain.repositories.entity_repository import EntityRepository


class ListEntitiesHandler(QueryHandler[ListEntitiesQuery, PagedResult]):
    def __init__(self, registry: EntityRegistry, repositories: Mapping[str, EntityRepository], resolver: QueryResolver):
        self._registry = registry
        self._repos = repositories
        self._resolver = resolver

    def handle(self, query: ListEntitiesQuery) -> PagedResult:
        definition = self._registry.get(query.entity_name)
        return self._resolver.resolve(
            self._repos[definition.name],
            definition.schema,
            query.context.tenant_id,
            query.filters,
            query.search_term,
            query.page,
            query.page_size,
            query.sort_field,
            query.sort_order,
        )


class GetEntityHandler(QueryHandler[GetEntityQuery, EntityProjection]):
    def __init__(self, registry: EntityRegistry, repositories: Mapping[str, EntityRepository]):
        self._registry = registry
        self._repos = repositories

    def handle(self, query: GetEntityQuery) -> EntityProjection:
        definition = self._registry.get(query.entity_name)
        # unknown projected names fail before the lookup
        fields = definition.schema.project(query.fields) if query.fields else None

        entity = self._repos[definition.name].find_by_id(query.context.tenant_id, query.id)
        if entity is None:
            raise NotFoundError(f"{definition.name} '{query.id}' was not found.")
        return EntityProjection(entity=entity, fields=fields)
