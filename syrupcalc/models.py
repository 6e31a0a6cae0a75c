from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Literal, Optional

DoseBasis = Literal["per_dose", "per_day"]

class DrugRecord(BaseModel):
    """Одна строка каталога сиропов (неизменяемая)."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    min_dose_per_kg: float = Field(ge=0)
    max_dose_per_kg: float = Field(ge=0)
    interval_hours: int = Field(gt=0)
    dose_basis: DoseBasis
    note: Optional[str] = None
    # только подпись на экране, в расчёте не участвует
    unit_override: Optional[str] = None

    @model_validator(mode="after")
    def _check_range(self):
        if self.min_dose_per_kg > self.max_dose_per_kg:
            raise ValueError(f"{self.id}: min_dose_per_kg > max_dose_per_kg")
        return self

class ParsedStrength(BaseModel):
    concentration_mg: float
    volume_ml: float

class DoseResult(BaseModel):
    display_volume: str
    unit: Literal["ml"] = "ml"
    doses_per_day: float
    interval_hours: int

class DoseRow(BaseModel):
    """Строка для отображения: препарат + результат (или None, если дозы нет)."""
    record: DrugRecord
    result: Optional[DoseResult] = None
    range_label: str
