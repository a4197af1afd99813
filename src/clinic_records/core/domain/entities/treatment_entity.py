from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from clinic_records.core.domain.entities._base import TenantScopedEntity


@dataclass(slots=True, kw_only=True)
class TreatmentEntity(TenantScopedEntity):
    name: str
    patient_name: str | None = None
    tooth: str | None = None
    status: str = "planned"
    start_date: date | None = None
    end_date: date | None = None
    sessions: int = 1
    cost: Decimal | None = None
    notes: str | None = None
