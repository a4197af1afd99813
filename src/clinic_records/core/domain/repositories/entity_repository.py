from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Generic, TypeVar

from clinic_records.core.domain.entities._base import TenantScopedEntity
from clinic_records.core.domain.specifications.list_specification import ListSpecification

if TYPE_CHECKING:
    from clinic_records.core.application.cqrs import PagedResult

E = TypeVar("E", bound=TenantScopedEntity)


class EntityRepository(ABC, Generic[E]):
    """Tenant-scoped persistence port for one entity type."""

    @abstractmethod
    def add(self, entity: E) -> E:
        """Persists a new entity and returns the stored version."""
        ...

    @abstractmethod
    def find_by_id(self, tenant_id: uuid.UUID, entity_id: uuid.UUID) -> E | None:
        """Returns the entity when it exists inside `tenant_id`, else None."""
        ...

    @abstractmethod
    def find_page(self, spec: ListSpecification) -> PagedResult[E]:
        """Executes a validated list specification."""
        ...

    @abstractmethod
    def save(self, entity: E) -> E:
        """Overwrites an existing entity (same id and tenant)."""
        ...

    @abstractmethod
    def delete(self, tenant_id: uuid.UUID, entity_id: uuid.UUID) -> bool:
        """Removes the entity; False when nothing matched inside `tenant_id`."""
        ...

    @abstractmethod
    def locked(self, tenant_id: uuid.UUID, entity_id: uuid.UUID) -> AbstractContextManager[E | None]:
        """
        Unit of work for read-modify-write: yields the current entity (or
        None) and keeps it protected against concurrent writers until the
        block exits. An exception inside the block discards every write.
        """
        ...
