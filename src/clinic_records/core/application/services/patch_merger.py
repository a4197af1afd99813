"""
Partial Update Merger: applies a patch document to an in-memory copy of
an entity. The input entity is never touched; the first failing operation
aborts the whole patch.
"""
from __future__ import annotations

import copy
import dataclasses
from collections.abc import Sequence
from typing import Any

import structlog

from clinic_records.core.application.dtos.patch_dto import (
    AddOperation,
    CopyOperation,
    MoveOperation,
    PatchOperation,
    RemoveOperation,
    ReplaceOperation,
    TestOperation,
)
from clinic_records.core.application.services.entity_registry import EntityDefinition
from clinic_records.core.domain.entities._base import TenantScopedEntity
from clinic_records.core.domain.events.exceptions import PatchError, ValidationError
from clinic_records.core.domain.schema.entity_schema import EntitySchema, FieldSpec

logger = structlog.get_logger(__name__)


class PatchMerger:

    def apply(
        self,
        definition: EntityDefinition,
        entity: TenantScopedEntity,
        operations: Sequence[PatchOperation],
    ) -> TenantScopedEntity:
        schema = definition.schema
        doc: dict[str, Any] = entity.to_dict()

        for index, op in enumerate(operations):
            try:
                self._apply_one(schema, doc, op)
            except PatchError as exc:
                logger.info(
                    "patch.rejected",
                    entity=definition.name,
                    entity_id=str(entity.id),
                    operation=index,
                    reason=exc.message,
                )
                raise

        business = {f.name: doc[f.name] for f in schema.business_fields if f.name in doc}
        validated = definition.validate_payload(business, error_cls=PatchError)
        return dataclasses.replace(entity, **validated)

    # ------------------------------------------------------------------ operations
    def _apply_one(self, schema: EntitySchema, doc: dict[str, Any], op: PatchOperation) -> None:
        target = self._writable(schema, op.path)

        if isinstance(op, (AddOperation, ReplaceOperation)):
            doc[target.name] = copy.deepcopy(op.value)

        elif isinstance(op, RemoveOperation):
            doc.pop(target.name, None)

        elif isinstance(op, CopyOperation):
            source = self._resolve(schema, op.from_)
            doc[target.name] = copy.deepcopy(self._read(doc, source))

        elif isinstance(op, MoveOperation):
            source = self._writable(schema, op.from_)
            value = self._read(doc, source)
            doc.pop(source.name, None)
            doc[target.name] = value

        elif isinstance(op, TestOperation):
            self._test(target, self._read(doc, target), op)

        else:  # pragma: no cover - the discriminated union is closed
            raise PatchError(f"Unsupported patch operation '{getattr(op, 'op', op)}'.")

    # ------------------------------------------------------------------ paths
    @staticmethod
    def _resolve(schema: EntitySchema, path: str) -> FieldSpec:
        if not path.startswith("/") or path == "/":
            raise PatchError(
                f"Path '{path}' is not a valid pointer to a {schema.entity_name} field.",
                errors=[{"field": path, "message": "invalid path"}],
            )
        segments = path[1:].split("/")
        if len(segments) != 1:
            raise PatchError(
                f"Path '{path}' does not exist on {schema.entity_name}.",
                errors=[{"field": path, "message": "nested paths are not supported"}],
            )
        name = segments[0].replace("~1", "/").replace("~0", "~")
        spec = schema.find(name)
        if spec is None:
            raise PatchError(
                f"Path '{path}' does not exist on {schema.entity_name}.",
                errors=[{"field": path, "message": "unknown path"}],
            )
        return spec

    def _writable(self, schema: EntitySchema, path: str) -> FieldSpec:
        spec = self._resolve(schema, path)
        if spec.immutable:
            raise PatchError(
                f"Path '{path}' targets immutable field '{spec.name}'.",
                errors=[{"field": path, "message": "immutable"}],
            )
        if spec.server_managed:
            raise PatchError(
                f"Path '{path}' targets server-managed field '{spec.name}'.",
                errors=[{"field": path, "message": "server managed"}],
            )
        return spec

    @staticmethod
    def _read(doc: dict[str, Any], spec: FieldSpec) -> Any:
        return doc.get(spec.name)

    @staticmethod
    def _test(spec: FieldSpec, current: Any, op: TestOperation) -> None:
        try:
            expected = spec.coerce(op.value)
            actual = spec.coerce(current)
        except ValidationError as exc:
            raise PatchError(
                f"Test operation failed for path '{op.path}'.",
                errors=exc.errors,
            ) from exc
        if expected != actual:
            raise PatchError(
                f"Test operation failed for path '{op.path}'.",
                errors=[{"field": op.path, "message": "value mismatch"}],
            )
