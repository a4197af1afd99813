"""Tests for applying patch documents to entity snapshots."""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from django.test import SimpleTestCase

from clinic_records.core.application.dtos.patch_dto import (
    PATCH_DOCUMENT_MISSING,
    ReplaceOperation,
    parse_patch_document,
)
from clinic_records.core.application.services.entity_registry import EntityRegistry, default_definitions
from clinic_records.core.application.services.patch_merger import PatchMerger
from clinic_records.core.domain.entities.treatment_entity import TreatmentEntity
from clinic_records.core.domain.events.exceptions import PatchError


def treatment(**overrides) -> TreatmentEntity:
    values = dict(
        id=uuid.uuid4(),
        tenant_id=uuid.uuid4(),
        created_on=datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc),
        created_by=uuid.uuid4(),
        name="Root canal",
        patient_name="Ana Souza",
        tooth="36",
        status="planned",
        start_date=date(2024, 2, 1),
        end_date=date(2024, 3, 1),
        sessions=3,
        cost=Decimal("850.00"),
    )
    values.update(overrides)
    return TreatmentEntity(**values)


class ParsePatchDocumentTests(SimpleTestCase):
    def test_missing_document(self) -> None:
        with self.assertRaises(PatchError) as ctx:
            parse_patch_document(None)
        self.assertEqual(ctx.exception.message, PATCH_DOCUMENT_MISSING)

    def test_document_must_be_an_array(self) -> None:
        with self.assertRaises(PatchError):
            parse_patch_document({"op": "replace", "path": "/name", "value": "x"})

    def test_unknown_operation(self) -> None:
        with self.assertRaises(PatchError) as ctx:
            parse_patch_document([{"op": "increment", "path": "/sessions", "value": 1}])
        self.assertEqual(ctx.exception.message, "Patch document contains invalid operations.")

    def test_from_alias(self) -> None:
        ops = parse_patch_document([{"op": "copy", "from": "/name", "path": "/notes"}])
        self.assertEqual(ops[0].from_, "/name")


class PatchMergerTests(SimpleTestCase):
    def setUp(self) -> None:
        self.definition = EntityRegistry(default_definitions()).get("Treatment")
        self.merger = PatchMerger()

    def apply(self, entity, document):
        return self.merger.apply(self.definition, entity, parse_patch_document(document))

    def test_replace_and_add_coerce_through_validation(self) -> None:
        original = treatment()
        patched = self.apply(original, [
            {"op": "replace", "path": "/status", "value": "in_progress"},
            {"op": "add", "path": "/EndDate", "value": "2024-04-15"},
        ])
        self.assertEqual(patched.status, "in_progress")
        self.assertEqual(patched.end_date, date(2024, 4, 15))
        self.assertEqual(original.status, "planned")

    def test_remove_restores_default(self) -> None:
        patched = self.apply(treatment(sessions=5), [{"op": "remove", "path": "/sessions"}])
        self.assertEqual(patched.sessions, 1)

    def test_copy(self) -> None:
        patched = self.apply(treatment(), [{"op": "copy", "from": "/patient_name", "path": "/notes"}])
        self.assertEqual(patched.notes, "Ana Souza")
        self.assertEqual(patched.patient_name, "Ana Souza")

    def test_move(self) -> None:
        patched = self.apply(treatment(notes="upper left"), [{"op": "move", "from": "/notes", "path": "/tooth"}])
        self.assertEqual(patched.tooth, "upper left")
        self.assertIsNone(patched.notes)

    def test_successful_test_operation(self) -> None:
        patched = self.apply(treatment(), [
            {"op": "test", "path": "/sessions", "value": "3"},
            {"op": "replace", "path": "/sessions", "value": 4},
        ])
        self.assertEqual(patched.sessions, 4)

    def test_failed_test_aborts_everything(self) -> None:
        original = treatment()
        with self.assertRaises(PatchError) as ctx:
            self.apply(original, [
                {"op": "replace", "path": "/name", "value": "Extraction"},
                {"op": "test", "path": "/status", "value": "completed"},
            ])
        self.assertEqual(ctx.exception.message, "Test operation failed for path '/status'.")
        self.assertEqual(original.name, "Root canal")

    def test_immutable_and_server_managed_paths_are_rejected(self) -> None:
        for path in ("/id", "/TenantId", "/created_on", "/createdBy", "/updated_on", "/updated_by"):
            with self.subTest(path=path), self.assertRaises(PatchError):
                self.apply(treatment(), [{"op": "replace", "path": path, "value": str(uuid.uuid4())}])

    def test_immutable_path_rejection_even_after_valid_ops(self) -> None:
        original = treatment()
        with self.assertRaises(PatchError) as ctx:
            self.apply(original, [
                {"op": "replace", "path": "/name", "value": "Crown"},
                {"op": "replace", "path": "/created_by", "value": str(uuid.uuid4())},
            ])
        self.assertEqual(ctx.exception.message, "Path '/created_by' targets immutable field 'created_by'.")
        self.assertEqual(original.name, "Root canal")

    def test_unknown_and_nested_paths(self) -> None:
        for path in ("/colour", "/name/first", "name", "/"):
            with self.subTest(path=path), self.assertRaises(PatchError):
                self.apply(treatment(), [{"op": "replace", "path": path, "value": "x"}])

    def test_result_is_revalidated(self) -> None:
        with self.assertRaises(PatchError) as ctx:
            self.apply(treatment(), [{"op": "replace", "path": "/end_date", "value": "2023-12-31"}])
        self.assertEqual(ctx.exception.message, "Treatment payload is invalid.")

        with self.assertRaises(PatchError):
            self.apply(treatment(), [{"op": "remove", "path": "/name"}])

    def test_identity_and_audit_survive(self) -> None:
        original = treatment()
        patched = self.merger.apply(
            self.definition, original, [ReplaceOperation(op="replace", path="/cost", value="99.90")]
        )
        self.assertEqual(patched.cost, Decimal("99.90"))
        self.assertEqual(
            (patched.id, patched.tenant_id, patched.created_on, patched.created_by),
            (original.id, original.tenant_id, original.created_on, original.created_by),
        )
