from __future__ import annotations

from typing import Any

import pydantic
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from clinic_records.core.domain.events.exceptions import FilterParseError
from clinic_records.core.domain.specifications.list_specification import FilterOperator

_OPERATORS_BY_NAME = {op.value.lower(): op for op in FilterOperator}
_OPERATORS_BY_INDEX = list(FilterOperator)


class FilterCriteria(BaseModel):
    """
    One list predicate as sent by clients:
    `{"PropertyName": "status", "Operator": "Equal", "Value": "sent"}`.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    property_name: str = Field(
        validation_alias=AliasChoices("PropertyName", "propertyName", "property_name"),
        min_length=1,
    )
    operator: FilterOperator = Field(
        default=FilterOperator.EQUAL,
        validation_alias=AliasChoices("Operator", "operator"),
    )
    value: str | None = Field(
        default=None,
        validation_alias=AliasChoices("Value", "value"),
    )

    @field_validator("operator", mode="before")
    @classmethod
    def _parse_operator(cls, raw: Any) -> FilterOperator:
        if isinstance(raw, FilterOperator):
            return raw
        if isinstance(raw, int) and not isinstance(raw, bool):
            if 0 <= raw < len(_OPERATORS_BY_INDEX):
                return _OPERATORS_BY_INDEX[raw]
            raise ValueError(f"unknown operator index {raw}")
        if isinstance(raw, str) and raw.strip().lower() in _OPERATORS_BY_NAME:
            return _OPERATORS_BY_NAME[raw.strip().lower()]
        raise ValueError(f"unknown operator '{raw}'")

    @field_validator("value", mode="before")
    @classmethod
    def _stringify_value(cls, raw: Any) -> str | None:
        if raw is None or isinstance(raw, str):
            return raw
        if isinstance(raw, bool):
            return "true" if raw else "false"
        if isinstance(raw, (int, float)):
            return str(raw)
        if isinstance(raw, list):
            return ",".join(str(v) for v in raw)
        raise ValueError("value must be a string, number, boolean or list")


_FILTER_LIST = TypeAdapter(list[FilterCriteria])


def parse_filters(raw: str | None) -> list[FilterCriteria]:
    """
    Parses the JSON `filters` query parameter. Blank input means "no
    filters"; anything that is not a JSON array of criteria is rejected.
    """
    if raw is None or not raw.strip():
        return []
    try:
        return _FILTER_LIST.validate_json(raw)
    except pydantic.ValidationError as exc:
        raise FilterParseError(
            "Filters must be a JSON array of {PropertyName, Operator, Value} objects.",
            errors=[
                {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in exc.errors()
            ],
        ) from exc
