"""
Business-attribute payloads. The same model validates Create, Update and
the result of a Patch, so all three enforce identical constraints.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
ShortText = Annotated[str, StringConstraints(max_length=255)]
Money = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]


class _PayloadDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")


class DunningLetterDTO(_PayloadDTO):
    name: Name
    reference_number: Annotated[str, StringConstraints(max_length=50)] | None = None
    recipient_name: ShortText | None = None
    amount_due: Money | None = None
    due_date: date | None = None
    dunning_level: int = Field(default=1, ge=1, le=5)
    status: Literal["draft", "sent", "paid", "cancelled"] = "draft"
    sent_on: datetime | None = None
    notes: str | None = None


class PrescriptionDTO(_PayloadDTO):
    name: Name
    patient_name: ShortText | None = None
    dosage: Annotated[str, StringConstraints(max_length=100)] | None = None
    frequency: Annotated[str, StringConstraints(max_length=100)] | None = None
    prescribed_on: date | None = None
    valid_until: date | None = None
    refills: int = Field(default=0, ge=0)
    prescriber: ShortText | None = None
    is_active: bool = True
    instructions: str | None = None

    @model_validator(mode="after")
    def _check_validity_window(self):
        if self.prescribed_on and self.valid_until and self.valid_until < self.prescribed_on:
            raise ValueError("valid_until must not be earlier than prescribed_on")
        return self


class TreatmentDTO(_PayloadDTO):
    name: Name
    patient_name: ShortText | None = None
    tooth: Annotated[str, StringConstraints(max_length=10)] | None = None
    status: Literal["planned", "in_progress", "completed", "cancelled"] = "planned"
    start_date: date | None = None
    end_date: date | None = None
    sessions: int = Field(default=1, ge=1)
    cost: Money | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def _check_period(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be earlier than start_date")
        return self
