import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from clinic_records.core.application.cqrs import CommandDTO
from clinic_records.core.application.dtos.context_dto import RequestContext
from clinic_records.core.application.dtos.patch_dto import PatchOperation


@dataclass(frozen=True)
class CreateEntityCommand(CommandDTO):
    entity_name: str
    context: RequestContext
    payload: Mapping[str, Any]


@dataclass(frozen=True)
class UpdateEntityCommand(CommandDTO):
    entity_name: str
    context: RequestContext
    id: uuid.UUID
    payload: Mapping[str, Any]


@dataclass(frozen=True)
class PatchEntityCommand(CommandDTO):
    entity_name: str
    context: RequestContext
    id: uuid.UUID
    operations: tuple[PatchOperation, ...]


@dataclass(frozen=True)
class DeleteEntityCommand(CommandDTO):
    entity_name: str
    context: RequestContext
    id: uuid.UUID
