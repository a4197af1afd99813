from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

import pydantic
from pydantic import BaseModel

from clinic_records.core.application.dtos.entity_dtos import DunningLetterDTO, PrescriptionDTO, TreatmentDTO
from clinic_records.core.domain.entities._base import TenantScopedEntity
from clinic_records.core.domain.entities.dunning_letter_entity import DunningLetterEntity
from clinic_records.core.domain.entities.prescription_entity import PrescriptionEntity
from clinic_records.core.domain.entities.treatment_entity import TreatmentEntity
from clinic_records.core.domain.events.exceptions import UnknownEntityError, ValidationError
from clinic_records.core.domain.schema.definitions import (
    DUNNING_LETTERS_SCHEMA,
    PRESCRIPTION_SCHEMA,
    TREATMENT_SCHEMA,
)
from clinic_records.core.domain.schema.entity_schema import EntitySchema


@dataclass(frozen=True)
class EntityDefinition:
    """Everything the generic core needs to serve one entity type."""
    name: str
    schema: EntitySchema
    entity_cls: type[TenantScopedEntity]
    payload_dto: type[BaseModel]

    def validate_payload(self, payload: Mapping[str, Any], error_cls: type[ValidationError] = ValidationError) -> dict[str, Any]:
        """
        Validates business attributes and returns them as native values.
        Keys are resolved through the schema; unknown keys are ignored.
        """
        if not isinstance(payload, Mapping):
            raise error_cls(f"{self.name} payload must be a JSON object.")
        data = self.schema.canonicalize(dict(payload))
        try:
            model = self.payload_dto.model_validate(data)
        except pydantic.ValidationError as exc:
            raise error_cls(
                f"{self.name} payload is invalid.",
                errors=[
                    {"field": ".".join(str(p) for p in err["loc"]) or "__all__", "message": err["msg"]}
                    for err in exc.errors()
                ],
            ) from exc
        return model.model_dump()


class EntityRegistry:
    def __init__(self, definitions: Iterable[EntityDefinition]) -> None:
        self._definitions: dict[str, EntityDefinition] = {}
        for definition in definitions:
            self._definitions[definition.name.lower()] = definition

    def get(self, name: str) -> EntityDefinition:
        try:
            return self._definitions[name.lower()]
        except KeyError:
            raise UnknownEntityError(f"Entity '{name}' is not registered.") from None

    def __iter__(self) -> Iterator[EntityDefinition]:
        return iter(self._definitions.values())


def default_definitions() -> list[EntityDefinition]:
    return [
        EntityDefinition(DUNNING_LETTERS_SCHEMA.entity_name, DUNNING_LETTERS_SCHEMA, DunningLetterEntity, DunningLetterDTO),
        EntityDefinition(PRESCRIPTION_SCHEMA.entity_name, PRESCRIPTION_SCHEMA, PrescriptionEntity, PrescriptionDTO),
        EntityDefinition(TREATMENT_SCHEMA.entity_name, TREATMENT_SCHEMA, TreatmentEntity, TreatmentDTO),
    ]
