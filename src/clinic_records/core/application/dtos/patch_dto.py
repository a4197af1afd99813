from __future__ import annotations

from typing import Annotated, Any, Literal, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from clinic_records.core.domain.events.exceptions import PatchError


class _PatchOperationBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    path: str


class AddOperation(_PatchOperationBase):
    op: Literal["add"]
    value: Any


class ReplaceOperation(_PatchOperationBase):
    op: Literal["replace"]
    value: Any


class RemoveOperation(_PatchOperationBase):
    op: Literal["remove"]


class CopyOperation(_PatchOperationBase):
    op: Literal["copy"]
    from_: str = Field(alias="from")


class MoveOperation(_PatchOperationBase):
    op: Literal["move"]
    from_: str = Field(alias="from")


class TestOperation(_PatchOperationBase):
    op: Literal["test"]
    value: Any


PatchOperation = Annotated[
    Union[AddOperation, ReplaceOperation, RemoveOperation, CopyOperation, MoveOperation, TestOperation],  # noqa: UP007
    Field(discriminator="op"),
]

PATCH_OPERATION_TYPES = (AddOperation, ReplaceOperation, RemoveOperation, CopyOperation, MoveOperation, TestOperation)
PATCH_DOCUMENT_MISSING = "Patch document is missing."

_PATCH_DOCUMENT = TypeAdapter(list[PatchOperation])


def parse_patch_document(raw: Any) -> list[PatchOperation]:
    """
    Validates a decoded JSON body as a patch document (ordered list of
    operations). Raises PatchError describing every invalid operation.
    """
    if raw is None:
        raise PatchError(PATCH_DOCUMENT_MISSING)
    if not isinstance(raw, list):
        raise PatchError("Patch document must be a JSON array of operations.")
    try:
        return _PATCH_DOCUMENT.validate_python(raw)
    except pydantic.ValidationError as exc:
        raise PatchError(
            "Patch document contains invalid operations.",
            errors=[
                {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in exc.errors()
            ],
        ) from exc
