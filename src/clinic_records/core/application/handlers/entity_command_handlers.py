from __future__ import annotations

import dataclasses
import uuid
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

import structlog

from clinic_records.core.application.commands.entity_commands import (
    CreateEntityCommand,
    DeleteEntityCommand,
    PatchEntityCommand,
    UpdateEntityCommand,
)
from clinic_records.core.application.cqrs import CommandHandler, CommandResult
from clinic_records.core.application.services.entity_registry import EntityDefinition, EntityRegistry
from clinic_records.core.application.services.patch_merger import PatchMerger
from clinic_records.core.domain.entities._base import TenantScopedEntity
from clinic_records.core.domain.events.events import (
    EntityCreatedEvent,
    EntityDeletedEvent,
    EntityPatchedEvent,
    EntityUpdatedEvent,
)
from clinic_records.core.domain.events.exceptions import NotFoundError, ValidationError
from clinic_records.core.domain.repositories.entity_repository import EntityRepository

logger = structlog.get_logger(__name__)

MISMATCHED_ID = "Mismatched Id"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _EntityCommandHandler:
    def __init__(
        self,
        registry: EntityRegistry,
        repositories: Mapping[str, EntityRepository],
        clock: Callable[[], datetime] = utc_now,
    ):
        self._registry = registry
        self._repos = repositories
        self._clock = clock

    def _target(self, entity_name: str) -> tuple[EntityDefinition, EntityRepository]:
        definition = self._registry.get(entity_name)
        return definition, self._repos[definition.name]

    @staticmethod
    def _not_found(definition: EntityDefinition, entity_id: uuid.UUID) -> NotFoundError:
        return NotFoundError(f"{definition.name} '{entity_id}' was not found.")


# ───────────────────────────────────────────────
# Create
# ───────────────────────────────────────────────
class CreateEntityHandler(_EntityCommandHandler, CommandHandler[CreateEntityCommand]):
    def handle(self, command: CreateEntityCommand) -> CommandResult[uuid.UUID]:
        definition, repo = self._target(command.entity_name)
        attrs = definition.validate_payload(command.payload)
        ctx = command.context

        entity = definition.entity_cls(
            id=uuid.uuid4(),
            tenant_id=ctx.tenant_id,
            created_on=self._clock(),
            created_by=ctx.user_id,
            **attrs,
        )
        stored = repo.add(entity)
        logger.info("entity.created", entity=definition.name, entity_id=str(stored.id))

        return CommandResult(
            stored.id,
            events=(
                EntityCreatedEvent(
                    entity_name=definition.name,
                    entity_id=stored.id,
                    tenant_id=ctx.tenant_id,
                    user_id=ctx.user_id,
                ),
            ),
        )


# ───────────────────────────────────────────────
# Update (full replace of business attributes)
# ───────────────────────────────────────────────
class UpdateEntityHandler(_EntityCommandHandler, CommandHandler[UpdateEntityCommand]):
    def handle(self, command: UpdateEntityCommand) -> CommandResult[bool]:
        definition, repo = self._target(command.entity_name)
        if not isinstance(command.payload, Mapping):
            raise ValidationError(f"{definition.name} payload must be a JSON object.")

        body = definition.schema.canonicalize(dict(command.payload))
        if not self._same_id(body.get("id"), command.id):
            raise ValidationError(MISMATCHED_ID, errors=[{"field": "id", "message": "body id differs from path id"}])

        attrs = definition.validate_payload(body)
        ctx = command.context

        with repo.locked(ctx.tenant_id, command.id) as current:
            if current is None:
                raise self._not_found(definition, command.id)
            self._check_immutables(definition, body, current)
            updated = dataclasses.replace(
                current,
                **attrs,
                tenant_id=ctx.tenant_id,
                updated_on=self._clock(),
                updated_by=ctx.user_id,
            )
            repo.save(updated)

        logger.info("entity.updated", entity=definition.name, entity_id=str(command.id))
        return CommandResult(
            True,
            events=(
                EntityUpdatedEvent(
                    entity_name=definition.name,
                    entity_id=command.id,
                    tenant_id=ctx.tenant_id,
                    user_id=ctx.user_id,
                ),
            ),
        )

    @staticmethod
    def _same_id(body_id: Any, path_id: uuid.UUID) -> bool:
        if body_id is None:
            return False
        try:
            return uuid.UUID(str(body_id)) == path_id
        except ValueError:
            return False

    @staticmethod
    def _check_immutables(definition: EntityDefinition, body: dict[str, Any], current: TenantScopedEntity) -> None:
        """Identity and creation audit values may be echoed back but never changed."""
        for spec in definition.schema.immutable_fields:
            if spec.name == "id" or body.get(spec.name) is None:
                continue
            if spec.coerce(body[spec.name]) != getattr(current, spec.name):
                raise ValidationError(
                    f"Field '{spec.name}' is immutable.",
                    errors=[{"field": spec.name, "message": "immutable"}],
                )


# ───────────────────────────────────────────────
# Patch
# ───────────────────────────────────────────────
class PatchEntityHandler(_EntityCommandHandler, CommandHandler[PatchEntityCommand]):
    def __init__(
        self,
        registry: EntityRegistry,
        repositories: Mapping[str, EntityRepository],
        merger: PatchMerger,
        clock: Callable[[], datetime] = utc_now,
    ):
        super().__init__(registry, repositories, clock)
        self._merger = merger

    def handle(self, command: PatchEntityCommand) -> CommandResult[bool]:
        definition, repo = self._target(command.entity_name)
        ctx = command.context

        with repo.locked(ctx.tenant_id, command.id) as current:
            if current is None:
                raise self._not_found(definition, command.id)
            merged = self._merger.apply(definition, current, command.operations)
            stamped = dataclasses.replace(merged, updated_on=self._clock(), updated_by=ctx.user_id)
            repo.save(stamped)

        changed = tuple(
            f.name
            for f in definition.schema.business_fields
            if getattr(current, f.name) != getattr(merged, f.name)
        )
        logger.info(
            "entity.patched",
            entity=definition.name,
            entity_id=str(command.id),
            operations=len(command.operations),
            changed=list(changed),
        )
        return CommandResult(
            True,
            events=(
                EntityPatchedEvent(
                    entity_name=definition.name,
                    entity_id=command.id,
                    tenant_id=ctx.tenant_id,
                    user_id=ctx.user_id,
                    changed_fields=changed,
                ),
            ),
        )


# ───────────────────────────────────────────────
# Delete
# ───────────────────────────────────────────────
class DeleteEntityHandler(_EntityCommandHandler, CommandHandler[DeleteEntityCommand]):
    def handle(self, command: DeleteEntityCommand) -> CommandResult[bool]:
        definition, repo = self._target(command.entity_name)
        ctx = command.context

        if not repo.delete(ctx.tenant_id, command.id):
            raise self._not_found(definition, command.id)

        logger.info("entity.deleted", entity=definition.name, entity_id=str(command.id))
        return CommandResult(
            True,
            events=(
                EntityDeletedEvent(
                    entity_name=definition.name,
                    entity_id=command.id,
                    tenant_id=ctx.tenant_id,
                    user_id=ctx.user_id,
                ),
            ),
        )
