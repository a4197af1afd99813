from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from clinic_records.core.domain.entities._base import TenantScopedEntity


@dataclass(slots=True, kw_only=True)
class PrescriptionEntity(TenantScopedEntity):
    name: str
    patient_name: str | None = None
    dosage: str | None = None
    frequency: str | None = None
    prescribed_on: date | None = None
    valid_until: date | None = None
    refills: int = 0
    prescriber: str | None = None
    is_active: bool = True
    instructions: str | None = None

