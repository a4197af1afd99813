from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, fields, is_dataclass
from datetime import datetime
from typing import Any, TypeVar

T = TypeVar("T")


class EntityMixin:
    def to_dict(self) -> dict[str, Any]:
        """
        Shallow field → value mapping; values are deep-copied so callers
        can mutate the result freely.
        """
        return {f.name: copy.deepcopy(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_model(cls: type[T], model: Any) -> T:
        """
        Builds the entity from a Django model instance, reading one
        attribute per dataclass field.
        """
        if not is_dataclass(cls):
            raise TypeError(f"{cls.__name__} must be a dataclass")
        data: dict[str, Any] = {}
        for f in fields(cls):
            data[f.name] = getattr(model, f.name)
        return cls(**data)


@dataclass(slots=True, kw_only=True)
class TenantScopedEntity(EntityMixin):
    """Identity, tenant and audit trail shared by every stored entity."""
    id: uuid.UUID
    tenant_id: uuid.UUID
    created_on: datetime
    created_by: uuid.UUID
    updated_on: datetime | None = None
    updated_by: uuid.UUID | None = None
