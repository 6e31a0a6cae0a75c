# syrupcalc/calculators/core.py
import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Mapping, Optional

from syrupcalc.models import DoseResult, DrugRecord
from syrupcalc.calculators.strength import parse_strength


def estimate_weight(age_years: float) -> float:
    """Ориентировочный вес по возрасту: (возраст + 4) * 2. Границы возраста не проверяем."""
    return (age_years + 4) * 2


def round_half_up(value: float, step: str = "0.1") -> Decimal:
    """Округление половины вверх по десятичной записи числа."""
    number = Decimal(str(value))
    with localcontext() as ctx:
        # quantize требует, чтобы все цифры результата влезли в точность контекста
        ctx.prec = max(ctx.prec, number.adjusted() + 3)
        return number.quantize(Decimal(step), rounding=ROUND_HALF_UP)


def format_volume(ml: float) -> str:
    """
    До 10 мл — один знак после запятой (шприц), от 10 мл — целое (мерный стаканчик).
    Округление half-up в обоих случаях.
    """
    return str(round_half_up(ml, "0.1" if ml < 10 else "1"))


def is_valid_weight(weight_kg) -> bool:
    if weight_kg is None or isinstance(weight_kg, bool):
        return False
    try:
        return math.isfinite(weight_kg) and weight_kg > 0
    except TypeError:
        return False


def compute_dose(
    weight_kg: Optional[float],
    record: DrugRecord,
    overrides: Optional[Mapping[str, float]] = None,
) -> Optional[DoseResult]:
    """
    Объём сиропа на один приём для веса weight_kg.
    Нет веса / вес не число / <= 0 / нет концентрации -> None, исключений не бросаем.
    """
    if not is_valid_weight(weight_kg):
        return None

    strength = parse_strength(record.name, record_id=record.id, overrides=overrides)
    if not strength.concentration_mg or not strength.volume_ml:
        return None

    # 1. Разовая доза в мг/кг
    freq = 24 / record.interval_hours
    target_min = record.min_dose_per_kg
    target_max = record.max_dose_per_kg
    if record.dose_basis == "per_day":
        target_min = record.min_dose_per_kg / freq
        target_max = record.max_dose_per_kg / freq

    # 2. ((мг/кг * вес) * мл) / мг
    def to_ml(mg_per_kg: float) -> float:
        return (mg_per_kg * weight_kg * strength.volume_ml) / strength.concentration_mg

    ml_min, ml_max = to_ml(target_min), to_ml(target_max)
    if not (math.isfinite(ml_min) and math.isfinite(ml_max)):
        # переполнение float у огромного веса
        return None

    low = format_volume(ml_min)
    high = format_volume(ml_max)
    display = low if low == high else f"{low} - {high}"

    return DoseResult(
        display_volume=display,
        unit="ml",
        doses_per_day=freq,
        interval_hours=record.interval_hours,
    )
