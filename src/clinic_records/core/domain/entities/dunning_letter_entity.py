from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from clinic_records.core.domain.entities._base import TenantScopedEntity


@dataclass(slots=True, kw_only=True)
class DunningLetterEntity(TenantScopedEntity):
    name: str
    reference_number: str | None = None
    recipient_name: str | None = None
    amount_due: Decimal | None = None
    due_date: date | None = None
    dunning_level: int = 1
    status: str = "draft"
    sent_on: datetime | None = None
    notes: str | None = None

