"""Tests for filter parsing and list-request compilation."""

import json
import uuid
from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase

from clinic_records.core.application.dtos.filter_dto import FilterCriteria, parse_filters
from clinic_records.core.application.services.query_resolver import (
    PAGE_NUMBER_INVALID,
    PAGE_SIZE_INVALID,
    SORT_ORDER_INVALID,
    QueryResolver,
)
from clinic_records.core.domain.events.exceptions import FilterParseError, ValidationError
from clinic_records.core.domain.schema.definitions import DUNNING_LETTERS_SCHEMA, PRESCRIPTION_SCHEMA
from clinic_records.core.domain.specifications.list_specification import FilterOperator, OrderKey

TENANT = uuid.uuid4()


def criteria(name, operator, value):
    return FilterCriteria(PropertyName=name, Operator=operator, Value=value)


class ParseFiltersTests(SimpleTestCase):
    def test_blank_means_no_filters(self) -> None:
        self.assertEqual(parse_filters(None), [])
        self.assertEqual(parse_filters("   "), [])

    def test_accepts_pascal_and_camel_keys_and_operator_forms(self) -> None:
        raw = json.dumps([
            {"PropertyName": "status", "Operator": "Equal", "Value": "sent"},
            {"propertyName": "dunningLevel", "operator": 4, "value": 2},
            {"property_name": "name", "operator": "contains", "value": "rem"},
        ])
        parsed = parse_filters(raw)
        self.assertEqual([c.operator for c in parsed], [
            FilterOperator.EQUAL, FilterOperator.GREATER_OR_EQUAL, FilterOperator.CONTAINS,
        ])
        self.assertEqual(parsed[1].value, "2")

    def test_list_values_are_joined(self) -> None:
        parsed = parse_filters('[{"PropertyName": "status", "Operator": "In", "Value": ["draft", "sent"]}]')
        self.assertEqual(parsed[0].value, "draft,sent")

    def test_malformed_json_and_shapes_are_rejected(self) -> None:
        for raw in ("{not json", '{"PropertyName": "x"}', '[{"Operator": "Equal"}]', '[{"PropertyName": "x", "Operator": "Like"}]'):
            with self.subTest(raw=raw), self.assertRaises(FilterParseError):
                parse_filters(raw)


class PaginationValidationTests(SimpleTestCase):
    def test_literal_messages(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            QueryResolver.validate_pagination(1, 0)
        self.assertEqual(ctx.exception.message, PAGE_SIZE_INVALID)
        self.assertEqual(PAGE_SIZE_INVALID, "Page size invalid.")

        with self.assertRaises(ValidationError) as ctx:
            QueryResolver.validate_pagination(0, 10)
        self.assertEqual(ctx.exception.message, PAGE_NUMBER_INVALID)
        self.assertEqual(PAGE_NUMBER_INVALID, "Page mumber invalid.")

    def test_page_size_is_checked_before_page_number(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            QueryResolver.validate_pagination(-1, -1)
        self.assertEqual(ctx.exception.message, PAGE_SIZE_INVALID)

    def test_non_integers_count_as_invalid(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            QueryResolver.validate_pagination("1", "ten")
        self.assertEqual(ctx.exception.message, PAGE_SIZE_INVALID)
        with self.assertRaises(ValidationError) as ctx:
            QueryResolver.validate_pagination("1.5", "10")
        self.assertEqual(ctx.exception.message, PAGE_NUMBER_INVALID)

    def test_numeric_strings_are_accepted(self) -> None:
        self.assertEqual(QueryResolver.validate_pagination("3", "25"), (3, 25))


class CompileTests(SimpleTestCase):
    def setUp(self) -> None:
        self.resolver = QueryResolver()

    def compile(self, schema=DUNNING_LETTERS_SCHEMA, **kwargs):
        params = {"filters": None, "search_term": None, "page_number": 1, "page_size": 10}
        params.update(kwargs)
        return self.resolver.compile(schema, TENANT, **params)

    def test_defaults(self) -> None:
        spec = self.compile()
        self.assertEqual(spec.tenant_id, TENANT)
        self.assertEqual(spec.predicates, ())
        self.assertEqual(spec.ordering, (OrderKey("created_on"), OrderKey("id")))
        self.assertEqual((spec.offset, spec.limit), (0, 10))

    def test_offset_follows_page(self) -> None:
        spec = self.compile(page_number=3, page_size=20)
        self.assertEqual((spec.offset, spec.limit), (40, 20))

    def test_values_are_coerced_to_native_types(self) -> None:
        spec = self.compile(filters=[
            criteria("AmountDue", "GreaterThan", "100.5"),
            criteria("DueDate", "LessOrEqual", "2024-06-30"),
            criteria("status", "In", "draft, sent"),
        ])
        self.assertEqual(spec.predicates[0].field, "amount_due")
        self.assertEqual(spec.predicates[0].value, Decimal("100.5"))
        self.assertEqual(spec.predicates[1].value, date(2024, 6, 30))
        self.assertEqual(spec.predicates[2].value, ("draft", "sent"))

    def test_type_mismatch_fails_instead_of_coercing(self) -> None:
        with self.assertRaises(ValidationError):
            self.compile(filters=[criteria("dunning_level", "Equal", "high")])

    def test_operator_must_fit_the_field_type(self) -> None:
        with self.assertRaises(ValidationError):
            self.compile(filters=[criteria("dunning_level", "Contains", "1")])
        with self.assertRaises(ValidationError):
            self.compile(schema=PRESCRIPTION_SCHEMA, filters=[criteria("is_active", "GreaterThan", "true")])

    def test_null_only_for_equality(self) -> None:
        spec = self.compile(filters=[criteria("sent_on", "Equal", None)])
        self.assertIsNone(spec.predicates[0].value)
        with self.assertRaises(ValidationError):
            self.compile(filters=[criteria("sent_on", "GreaterThan", None)])

    def test_unknown_filter_property(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self.compile(filters=[criteria("colour", "Equal", "red")])
        self.assertEqual(ctx.exception.message, "Property 'colour' does not exist on DunningLetters.")

    def test_search_uses_searchable_fields_only_when_term_present(self) -> None:
        self.assertEqual(self.compile(search_term="  ").search_fields, ())
        spec = self.compile(search_term=" acme ")
        self.assertEqual(spec.search_term, "acme")
        self.assertEqual(spec.search_fields, ("name", "reference_number", "recipient_name", "notes"))

    def test_sort_field_gets_id_tie_breaker(self) -> None:
        spec = self.compile(sort_field="DueDate", sort_order="DESC")
        self.assertEqual(spec.ordering, (OrderKey("due_date", descending=True), OrderKey("id")))

    def test_desc_without_field_reverses_default(self) -> None:
        spec = self.compile(sort_order="desc")
        self.assertEqual(spec.ordering, (OrderKey("created_on", True), OrderKey("id", True)))

    def test_invalid_sort_order_and_field(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self.compile(sort_order="sideways")
        self.assertEqual(ctx.exception.message, SORT_ORDER_INVALID)
        with self.assertRaises(ValidationError):
            self.compile(sort_field="notes")

    def test_pagination_errors_win_over_filter_errors(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self.compile(page_size=0, filters=[criteria("colour", "Equal", "red")])
        self.assertEqual(ctx.exception.message, PAGE_SIZE_INVALID)
