from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


# ───────────────────────────────────────────────
# Event base
# ───────────────────────────────────────────────
@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    event_id: uuid.UUID = field(default_factory=uuid.uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# ╭──────────────────────────────────────────────╮
# │ Entity lifecycle                             │
# ╰──────────────────────────────────────────────╯
@dataclass(frozen=True, kw_only=True)
class EntityEvent(DomainEvent):
    entity_name: str
    entity_id: uuid.UUID
    tenant_id: uuid.UUID
    user_id: uuid.UUID


@dataclass(frozen=True, kw_only=True)
class EntityCreatedEvent(EntityEvent):
    pass


@dataclass(frozen=True, kw_only=True)
class EntityUpdatedEvent(EntityEvent):
    pass


@dataclass(frozen=True, kw_only=True)
class EntityPatchedEvent(EntityEvent):
    changed_fields: tuple[str, ...] = ()


@dataclass(frozen=True, kw_only=True)
class EntityDeletedEvent(EntityEvent):
    pass
