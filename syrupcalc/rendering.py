# syrupcalc/rendering.py
"""
Отрисовка каталога для текущего веса: текст для Telegram, HTML для веб-страницы
и словари для JSON. Расчёт — в calculators.core, здесь только вид.
"""
import html
from typing import Any, Dict, Iterable, List, Optional

from syrupcalc.calculators.core import compute_dose, is_valid_weight
from syrupcalc.models import DoseRow, DrugRecord
from syrupcalc.session import InputState
from syrupcalc.texts import CREDIT, DISCLAIMER, FORMULA_FOOTER, TITLE
from syrupcalc.utils import get_drugs

PLACEHOLDER = "--"


def _num(value: float) -> str:
    # 1.0 -> "1", 0.125 -> "0.125"
    return f"{value:g}"


def _echo(value: float) -> str:
    # введённое число целиком: 1234567.0 -> "1234567"
    text = f"{value}"
    return text[:-2] if text.endswith(".0") else text


def range_label(record: DrugRecord) -> str:
    unit = record.unit_override or "mg"
    basis = "(Daily)" if record.dose_basis == "per_day" else "(Single)"
    return f"Range: {_num(record.min_dose_per_kg)}-{_num(record.max_dose_per_kg)} {unit}/kg {basis}"


def build_rows(weight_kg: Optional[float], drugs: Optional[Iterable[DrugRecord]] = None) -> List[DoseRow]:
    """Каждая запись считается отдельно; запись без концентрации получает result=None."""
    if drugs is None:
        drugs = get_drugs()
    return [
        DoseRow(record=d, result=compute_dose(weight_kg, d), range_label=range_label(d))
        for d in drugs
    ]


def estimated_weight_line(state: InputState) -> Optional[str]:
    if not state.is_estimated or not is_valid_weight(state.weight_kg):
        return None
    return f"Est. Weight: {state.weight_kg:.1f} kg"


# ---------- Telegram ----------

def render_text(state: InputState, rows: Optional[List[DoseRow]] = None) -> str:
    """Одно сообщение со всем списком. Без parse_mode: в названиях есть «+» и скобки."""
    if rows is None:
        rows = build_rows(state.weight_kg)

    lines = [f"🧮 {TITLE}"]
    est = estimated_weight_line(state)
    if est:
        lines.append(f"⚖️ {est}")
    elif is_valid_weight(state.weight_kg):
        lines.append(f"⚖️ Weight: {_echo(state.weight_kg)} kg")
    lines.append("")

    if not is_valid_weight(state.weight_kg):
        # вес не введён или не годится — просто список препаратов
        for row in rows:
            lines.append(f"• {row.record.name} — {PLACEHOLDER}")
        return "\n".join(lines)

    for row in rows:
        lines.append(f"💊 {row.record.name}")
        lines.append(f"   {row.range_label}")
        if row.record.note:
            lines.append(f"   ℹ️ {row.record.note}")
        if row.result:
            lines.append(
                f"   ➜ {row.result.display_volume} {row.result.unit} · every {row.result.interval_hours} hrs"
            )
        else:
            lines.append(f"   ➜ {PLACEHOLDER}")
        lines.append("")

    lines.append(FORMULA_FOOTER)
    lines.append("")
    lines.append(DISCLAIMER)
    return "\n".join(lines)


# ---------- JSON ----------

def row_to_dict(row: DoseRow) -> Dict[str, Any]:
    return {
        "id": row.record.id,
        "name": row.record.name,
        "range": row.range_label,
        "note": row.record.note,
        "dose": row.result.model_dump() if row.result else None,
    }


# ---------- HTML ----------

def _row_html(row: DoseRow, has_weight: bool) -> str:
    name = html.escape(row.record.name)
    if not has_weight:
        return f'<li class="row muted"><span>{name}</span><span class="ph">{PLACEHOLDER}</span></li>'

    note = f'<div class="note">{html.escape(row.record.note)}</div>' if row.record.note else ""
    if row.result:
        dose = (
            f'<div class="dose">{html.escape(row.result.display_volume)}<small>{row.result.unit}</small></div>'
            f'<div class="every">Every {row.result.interval_hours} hrs</div>'
        )
    else:
        dose = f'<div class="dose ph">{PLACEHOLDER}</div>'
    return (
        f'<li class="row"><div><b>{name}</b>'
        f'<div class="range">{html.escape(row.range_label)}</div>{note}</div>'
        f'<div class="right">{dose}</div></li>'
    )


_STYLE = """
body{font-family:sans-serif;background:#f1f5f9;margin:0}
header{background:#0d9488;color:#fff;padding:16px;font-size:20px;font-weight:bold}
form{background:#fff;padding:16px;border-bottom:1px solid #e2e8f0}
.tabs a{display:inline-block;padding:8px 12px;margin-right:8px;border-radius:8px;background:#f8fafc;color:#64748b;text-decoration:none}
.tabs a.on{background:#ccfbf1;color:#0f766e}
input{width:100%;padding:12px;font-size:18px;margin-top:12px;box-sizing:border-box}
.est{margin-top:8px;font-size:12px;text-align:center;color:#0d9488}
ul{list-style:none;margin:16px;padding:0;background:#fff;border-radius:12px}
.row{display:flex;justify-content:space-between;padding:16px;border-bottom:1px solid #f1f5f9}
.muted{opacity:.5}.range{font-size:12px;color:#94a3b8}.note{font-size:12px;color:#60a5fa;font-style:italic}
.right{text-align:right}.dose{font-size:20px;font-weight:bold;color:#0d9488}
.every{font-size:12px;color:#64748b}.ph{color:#cbd5e1}
footer{text-align:center;font-size:12px;color:#94a3b8;margin:24px 32px}
"""


def render_html(state: InputState, rows: Optional[List[DoseRow]] = None) -> str:
    if rows is None:
        rows = build_rows(state.weight_kg)
    has_weight = is_valid_weight(state.weight_kg)

    if state.mode == "age":
        field, value, unit = "age", state.age_years, "yrs"
    else:
        field, value, unit = "weight", state.weight_kg, "kg"
    value_attr = html.escape(_echo(value)) if value is not None else ""

    weight_tab = "on" if state.mode == "weight" else ""
    age_tab = "on" if state.mode == "age" else ""
    est = estimated_weight_line(state)
    est_html = f'<div class="est">{html.escape(est)}</div>' if est else ""

    footer = ""
    if has_weight:
        formula = "<br>".join(html.escape(line) for line in FORMULA_FOOTER.splitlines())
        footer = f"<footer><p>{formula}</p><p>{html.escape(DISCLAIMER)}</p><b>{html.escape(CREDIT)}</b></footer>"

    items = "".join(_row_html(r, has_weight) for r in rows)
    return (
        "<!doctype html><html><head><meta charset=\"utf-8\">"
        "<meta name=\"viewport\" content=\"width=device-width, initial-scale=1\">"
        f"<title>{html.escape(TITLE)}</title><style>{_STYLE}</style></head><body>"
        f"<header>{html.escape(TITLE)}</header>"
        "<form method=\"get\" action=\"/\">"
        f'<div class="tabs"><a class="{weight_tab}" href="/?mode=weight">By Weight (kg)</a>'
        f'<a class="{age_tab}" href="/?mode=age">By Age (yr)</a></div>'
        f'<input type="hidden" name="mode" value="{state.mode}">'
        f'<input type="number" step="any" name="{field}" value="{value_attr}" placeholder="Enter {field.capitalize()}... ({unit})" autofocus>'
        f"{est_html}</form>"
        f"<ul>{items}</ul>{footer}</body></html>"
    )
