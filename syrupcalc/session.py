# syrupcalc/session.py
import math
from typing import Literal, Optional

from pydantic import BaseModel

from syrupcalc.calculators.core import estimate_weight, round_half_up

InputMode = Literal["weight", "age"]


def _one_decimal(value: float) -> float:
    if not math.isfinite(value):
        return value
    return float(round_half_up(value, "0.1"))


class InputState(BaseModel):
    """
    Что ввёл пользователь: вес или возраст. Живёт только в памяти
    (context.user_data у бота, один запрос у веб-страницы).
    """
    mode: InputMode = "weight"
    weight_kg: Optional[float] = None
    age_years: Optional[float] = None

    def switch_mode(self, mode: InputMode) -> None:
        # значения не сбрасываем: рассчитанный по возрасту вес остаётся на экране
        self.mode = mode

    def set_weight(self, value: Optional[float]) -> None:
        self.weight_kg = value

    def set_age(self, value: Optional[float]) -> None:
        """Возраст -> ориентировочный вес (до 0.1 кг). Пустой возраст очищает вес."""
        self.age_years = value
        if value is None:
            self.weight_kg = None
        else:
            self.weight_kg = _one_decimal(estimate_weight(value))

    def set_value(self, value: Optional[float]) -> None:
        """Ввод в поле текущего режима."""
        if self.mode == "age":
            self.set_age(value)
        else:
            self.set_weight(value)

    def clear(self) -> None:
        self.set_value(None)

    @property
    def is_estimated(self) -> bool:
        return self.mode == "age" and self.age_years is not None and self.weight_kg is not None
