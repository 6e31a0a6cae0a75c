# syrupcalc/utils.py
from __future__ import annotations

import math
from pathlib import Path
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from syrupcalc.models import DrugRecord


# ---------- Загрузка каталога ----------
# Путь к YAML с каталогом сиропов
_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "catalog.yml"


@lru_cache(maxsize=1)
def load_catalog() -> Dict[str, Any]:
    """
    Прочитать каталог (YAML) и вернуть как dict.
    Кешируем результат в памяти; чтобы сбросить — вызвать load_catalog.cache_clear().
    """
    if not _CATALOG_PATH.exists():
        raise FileNotFoundError(f"Не найден каталог: {_CATALOG_PATH}")

    with _CATALOG_PATH.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    data.setdefault("drugs", [])
    data.setdefault("concentration_overrides", {})
    return data


@lru_cache(maxsize=1)
def get_drugs() -> Tuple[DrugRecord, ...]:
    """Все записи каталога в порядке файла. Ошибка в данных — ValidationError при загрузке."""
    drugs = tuple(DrugRecord(**row) for row in load_catalog()["drugs"])
    ids = [d.id for d in drugs]
    dupes = sorted({i for i in ids if ids.count(i) > 1})
    if dupes:
        raise ValueError(f"Повторяющиеся id в каталоге: {', '.join(dupes)}")
    return drugs


@lru_cache(maxsize=1)
def get_concentration_overrides() -> Mapping[str, float]:
    """id записи -> концентрация (мг), по которой откалиброван диапазон дозы."""
    raw = load_catalog()["concentration_overrides"]
    return MappingProxyType({str(k): float(v) for k, v in raw.items()})


def find_drug(drug_id: str) -> Optional[DrugRecord]:
    return next((d for d in get_drugs() if d.id == drug_id), None)


def catalog_path() -> Path:
    """Утилита: вернуть путь к текущему YAML с каталогом (иногда полезно для отладки)."""
    return _CATALOG_PATH


# ---------- Ввод чисел ----------

def parse_number(text: Optional[str]) -> Optional[float]:
    """
    '11,2' / ' 11.2 ' -> 11.2. Пустая строка, мусор, nan и inf -> None.
    Знак не проверяем: неположительные значения отсекает калькулятор.
    """
    text = (text or "").strip().replace(",", ".")
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value
