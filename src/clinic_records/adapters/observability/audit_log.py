import structlog

from clinic_records.adapters.observability.metrics import ENTITY_OPERATIONS
from clinic_records.core.domain.events.events import (
    EntityCreatedEvent,
    EntityDeletedEvent,
    EntityEvent,
    EntityPatchedEvent,
    EntityUpdatedEvent,
)

_OPERATIONS = {
    EntityCreatedEvent: "create",
    EntityUpdatedEvent: "update",
    EntityPatchedEvent: "patch",
    EntityDeletedEvent: "delete",
}


class AuditTrailListener:
    """Writes one `audit.<operation>` log line per committed entity write."""

    def __init__(self, logger=None):
        self.log = logger or structlog.get_logger("clinic_records.audit")

    def __call__(self, event: EntityEvent) -> None:
        operation = _OPERATIONS.get(type(event), type(event).__name__)
        ENTITY_OPERATIONS.labels(event.entity_name, operation).inc()

        extra = {}
        if isinstance(event, EntityPatchedEvent):
            extra["changed_fields"] = list(event.changed_fields)

        self.log.info(
            f"audit.{operation}",
            event_id=str(event.event_id),
            entity=event.entity_name,
            entity_id=str(event.entity_id),
            tenant_id=str(event.tenant_id),
            user_id=str(event.user_id),
            occurred_at=event.occurred_at.isoformat(),
            **extra,
        )
