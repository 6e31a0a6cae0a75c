# syrupcalc/calculators/strength.py
import re
from typing import Mapping, Optional

from syrupcalc.models import ParsedStrength
from syrupcalc.utils import get_concentration_overrides

# "125 mg", "3,35 g", "1000 IU" — берём первое совпадение
_STRENGTH_RE = re.compile(r"(\d+(?:[.,]\d+)?)\s*(mg|g|IU)", re.IGNORECASE)
# "/5 mL"
_VOLUME_RE = re.compile(r"/(\d+(?:[.,]\d+)?)\s*ml", re.IGNORECASE)

# Стандартный объём для детских сиропов
DEFAULT_VOLUME_ML = 5.0


def _to_float(raw: str) -> float:
    return float(raw.replace(",", "."))


def parse_strength(
    name: str,
    record_id: Optional[str] = None,
    overrides: Optional[Mapping[str, float]] = None,
) -> ParsedStrength:
    """
    Достать концентрацию из названия препарата: мг на объём (мл).

    Нет совпадения по массе — концентрация 0 (вызывающий код считает это «дозы нет»).
    Нет объёма — 5 мл.
    Поправки для комбинированных препаратов ищутся по id записи, а не по цифрам в названии.
    """
    m = _STRENGTH_RE.search(name or "")
    concentration = _to_float(m.group(1)) if m else 0.0

    if record_id is not None:
        if overrides is None:
            overrides = get_concentration_overrides()
        if record_id in overrides:
            concentration = float(overrides[record_id])

    v = _VOLUME_RE.search(name or "")
    volume = _to_float(v.group(1)) if v else DEFAULT_VOLUME_ML

    return ParsedStrength(concentration_mg=concentration, volume_ml=volume)
