import uuid
from dataclasses import dataclass

from clinic_records.core.application.cqrs import PaginatedQueryDTO
from clinic_records.core.application.dtos.context_dto import RequestContext
from clinic_records.core.application.dtos.filter_dto import FilterCriteria


@dataclass(frozen=True, kw_only=True)
class ListEntitiesQuery(PaginatedQueryDTO[tuple[FilterCriteria, ...]]):
    entity_name: str
    context: RequestContext
    search_term: str | None = None
    sort_field: str | None = None
    sort_order: str | None = None


@dataclass(frozen=True)
class GetEntityQuery:
    entity_name: str
    context: RequestContext
    id: uuid.UUID
    fields: tuple[str, ...] | None = None
