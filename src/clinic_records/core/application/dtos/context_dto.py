from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RequestContext:
    """Caller identity handed explicitly to every entity access call."""
    tenant_id: uuid.UUID
    user_id: uuid.UUID


@dataclass(frozen=True)
class EntityProjection:
    """
    Entity returned by get-by-id. `fields` is None for the full
    representation, otherwise the canonical attribute names to expose.
    """
    entity: Any
    fields: tuple[str, ...] | None = None
