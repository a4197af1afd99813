"""Tests for the per-entity schema tables and value coercion."""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from django.test import SimpleTestCase

from clinic_records.core.application.services.entity_registry import EntityRegistry, default_definitions
from clinic_records.core.domain.events.exceptions import UnknownEntityError, ValidationError
from clinic_records.core.domain.schema.definitions import (
    DUNNING_LETTERS_SCHEMA,
    PRESCRIPTION_SCHEMA,
    TREATMENT_SCHEMA,
)


class EntitySchemaLookupTests(SimpleTestCase):
    def test_names_resolve_regardless_of_casing_style(self) -> None:
        for name in ("created_on", "CreatedOn", "createdOn", "CREATEDON"):
            self.assertEqual(DUNNING_LETTERS_SCHEMA.get(name).name, "created_on")

    def test_unknown_property_is_a_validation_error(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            PRESCRIPTION_SCHEMA.get("dose")
        self.assertEqual(ctx.exception.message, "Property 'dose' does not exist on Prescription.")

    def test_tenant_is_neither_filterable_nor_sortable(self) -> None:
        with self.assertRaises(ValidationError):
            TREATMENT_SCHEMA.filterable("TenantId")
        with self.assertRaises(ValidationError):
            TREATMENT_SCHEMA.sortable("tenant_id")

    def test_long_text_is_not_sortable(self) -> None:
        with self.assertRaises(ValidationError):
            PRESCRIPTION_SCHEMA.sortable("instructions")
        self.assertEqual(PRESCRIPTION_SCHEMA.filterable("instructions").name, "instructions")

    def test_projection_keeps_request_order_and_drops_duplicates(self) -> None:
        self.assertEqual(
            DUNNING_LETTERS_SCHEMA.project(["Status", "name", "status", "Id"]),
            ("status", "name", "id"),
        )

    def test_business_fields_exclude_identity_and_audit(self) -> None:
        names = {f.name for f in TREATMENT_SCHEMA.business_fields}
        self.assertNotIn("id", names)
        self.assertNotIn("tenant_id", names)
        self.assertNotIn("updated_on", names)
        self.assertIn("sessions", names)

    def test_canonicalize_renames_and_drops_unknown_keys(self) -> None:
        out = DUNNING_LETTERS_SCHEMA.canonicalize({"Name": "x", "DunningLevel": 2, "colour": "red"})
        self.assertEqual(out, {"name": "x", "dunning_level": 2})


class FieldCoercionTests(SimpleTestCase):
    def test_integer_rejects_fractions_and_text(self) -> None:
        spec = DUNNING_LETTERS_SCHEMA.get("dunning_level")
        self.assertEqual(spec.coerce("3"), 3)
        for raw in ("3.5", "three", True):
            with self.assertRaises(ValidationError):
                spec.coerce(raw)

    def test_decimal_date_and_boolean(self) -> None:
        self.assertEqual(DUNNING_LETTERS_SCHEMA.get("amount_due").coerce("12.50"), Decimal("12.50"))
        self.assertEqual(PRESCRIPTION_SCHEMA.get("valid_until").coerce("2024-02-29"), date(2024, 2, 29))
        self.assertIs(PRESCRIPTION_SCHEMA.get("is_active").coerce("TRUE"), True)
        self.assertIs(PRESCRIPTION_SCHEMA.get("is_active").coerce("0"), False)
        with self.assertRaises(ValidationError):
            PRESCRIPTION_SCHEMA.get("is_active").coerce("maybe")
        with self.assertRaises(ValidationError):
            DUNNING_LETTERS_SCHEMA.get("amount_due").coerce("NaN")

    def test_datetime_without_offset_is_utc(self) -> None:
        spec = DUNNING_LETTERS_SCHEMA.get("created_on")
        self.assertEqual(spec.coerce("2024-05-01T10:00:00"), datetime(2024, 5, 1, 10, tzinfo=timezone.utc))
        self.assertEqual(spec.coerce("2024-05-01T10:00:00Z"), datetime(2024, 5, 1, 10, tzinfo=timezone.utc))

    def test_uuid(self) -> None:
        value = uuid.uuid4()
        self.assertEqual(DUNNING_LETTERS_SCHEMA.get("id").coerce(str(value)), value)
        with self.assertRaises(ValidationError) as ctx:
            DUNNING_LETTERS_SCHEMA.get("id").coerce("not-a-uuid")
        self.assertEqual(ctx.exception.message, "Value 'not-a-uuid' is not a valid uuid for 'id'.")


class EntityRegistryTests(SimpleTestCase):
    def setUp(self) -> None:
        self.registry = EntityRegistry(default_definitions())

    def test_lookup_is_case_insensitive(self) -> None:
        self.assertEqual(self.registry.get("dunningletters").name, "DunningLetters")
        self.assertEqual({d.name for d in self.registry}, {"DunningLetters", "Prescription", "Treatment"})

    def test_unknown_entity(self) -> None:
        with self.assertRaises(UnknownEntityError):
            self.registry.get("Invoice")

    def test_payload_validation_reports_every_broken_field(self) -> None:
        definition = self.registry.get("Treatment")
        with self.assertRaises(ValidationError) as ctx:
            definition.validate_payload({"name": "", "sessions": 0})
        self.assertEqual(ctx.exception.message, "Treatment payload is invalid.")
        self.assertEqual({e["field"] for e in ctx.exception.errors}, {"name", "sessions"})

    def test_payload_cross_field_rule(self) -> None:
        definition = self.registry.get("Prescription")
        with self.assertRaises(ValidationError):
            definition.validate_payload(
                {"name": "Amoxicillin", "prescribed_on": "2024-03-10", "valid_until": "2024-03-01"}
            )

    def test_payload_defaults_are_applied(self) -> None:
        attrs = self.registry.get("DunningLetters").validate_payload({"Name": "First reminder"})
        self.assertEqual(attrs["name"], "First reminder")
        self.assertEqual(attrs["dunning_level"], 1)
        self.assertEqual(attrs["status"], "draft")
