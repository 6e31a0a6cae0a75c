from syrupcalc.rendering import (
    PLACEHOLDER, build_rows, range_label, render_html, render_text, row_to_dict,
)
from syrupcalc.session import InputState
from syrupcalc.utils import find_drug, get_drugs


def test_range_labels():
    assert range_label(find_drug("amoxicillin_125")) == "Range: 25-50 mg/kg (Daily)"
    assert range_label(find_drug("paracetamol_125")) == "Range: 10-15 mg/kg (Single)"
    assert range_label(find_drug("lactulose_3_35")) == "Range: 0.5-1 g/kg (Daily)"


def test_rows_keep_catalog_order_and_isolate_failures():
    rows = build_rows(10)
    assert [r.record.id for r in rows] == [d.id for d in get_drugs()]
    by_id = {r.record.id: r for r in rows}
    assert by_id["chlorphenamine_paracetamol"].result is None
    assert by_id["paracetamol_125"].result.display_volume == "4.0 - 6.0"


def test_text_without_weight_shows_placeholders():
    text = render_text(InputState())
    assert "Amoxicillin 125 mg/5 mL — --" in text
    assert "Formula" not in text


def test_text_with_weight():
    state = InputState()
    state.set_weight(10)
    text = render_text(state)
    assert "Weight: 10 kg" in text
    assert "➜ 4.0 - 6.0 ml · every 6 hrs" in text
    assert "ℹ️ Based on Paracetamol" in text
    assert f"➜ {PLACEHOLDER}" in text
    assert "((Dose_mg * Weight) * Vol_ml) / Conc_mg" in text


def test_text_in_age_mode_shows_estimate():
    state = InputState(mode="age")
    state.set_age(2)
    assert "Est. Weight: 12.0 kg" in render_text(state)


def test_row_to_dict():
    row = build_rows(12, [find_drug("loratadine_5")])[0]
    data = row_to_dict(row)
    assert data["id"] == "loratadine_5"
    assert data["dose"]["display_volume"] == "2.4"
    assert data["dose"]["unit"] == "ml"
    assert data["dose"]["interval_hours"] == 24

    empty = row_to_dict(build_rows(None, [find_drug("loratadine_5")])[0])
    assert empty["dose"] is None


def test_html_page():
    state = InputState()
    state.set_weight(10)
    page = render_html(state)
    assert page.startswith("<!doctype html>")
    assert 'name="weight" value="10"' in page
    assert "4.0 - 6.0<small>ml</small>" in page
    assert "Chlorphenamine + Paracetamol" in page
    assert "Every 6 hrs" in page


def test_html_without_weight():
    state = InputState()
    page = render_html(state)
    assert "Tussilet syrup (Dex + Guaifenesin)" in page
    assert 'class="row muted"' in page
    assert "<footer>" not in page


def test_negative_weight_renders_like_empty_input():
    state = InputState()
    state.set_weight(-5)
    text = render_text(state)
    assert "Weight:" not in text
    assert "Amoxicillin 125 mg/5 mL — --" in text
    assert "Formula" not in text

    page = render_html(state)
    assert "<footer>" not in page
    assert 'class="row muted"' in page


def test_html_echoes_typed_value_in_full():
    state = InputState()
    state.set_weight(1234567)
    page = render_html(state)
    assert 'name="weight" value="1234567"' in page
    assert "Weight: 1234567 kg" in render_text(state)

    state.set_weight(12.25)
    assert 'value="12.25"' in render_html(state)
