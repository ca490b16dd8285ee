# test_unit_conversion.py
import re

import pytest

from unit_conversion import convert_weight, format_dosage, format_weight, weight_to_kg, weight_unit


def test_mg_per_kg_to_imperial():
    assert format_dosage("15 mg/kg IV q8h", "imperial") == "33.1 mg/lb IV q8h"


def test_mg_per_lb_to_metric():
    assert format_dosage("50 mg/lb", "metric") == "22.7 mg/kg"


def test_unit_match_is_case_insensitive():
    assert format_dosage("15 MG/KG", "imperial") == "33.1 mg/lb"


@pytest.mark.parametrize("text, system", [
    ("15 mg/kg", "metric"),
    ("33.1 mg/lb", "imperial"),
    ("500 mg PO q12h", "imperial"),
    ("1 g IV q24h", "metric"),
])
def test_text_without_conversion_is_unchanged(text, system):
    assert format_dosage(text, system) == text


def test_empty_text_passes_through():
    assert format_dosage("", "imperial") == ""
    assert format_dosage(None, "metric") is None


def test_round_trip_stays_within_a_tenth():
    imperial = format_dosage("15 mg/kg", "imperial")
    metric = format_dosage(imperial, "metric")
    value = float(re.match(r"([\d.]+) mg/kg", metric).group(1))
    assert abs(value - 15) <= 0.1


def test_every_token_is_converted():
    assert format_dosage("10 mg/kg then 5 mg/kg daily", "imperial") == "22.0 mg/lb then 11.0 mg/lb daily"


def test_convert_weight():
    assert convert_weight(10, "kg", "imperial") == 22.0
    assert convert_weight(22, "lb", "metric") == 10.0
    assert convert_weight(10, "kg", "metric") == 10


def test_weight_to_kg():
    assert weight_to_kg(22.0462, "lb") == pytest.approx(10.0, rel=1e-3)
    assert weight_to_kg(12.5, "kg") == 12.5
    assert weight_to_kg(None, "lb") is None


def test_format_weight():
    assert format_weight(10, "imperial") == "22.0 lb"
    assert format_weight(10, "metric") == "10.0 kg"
    assert format_weight(None, "metric") == "N/A"


def test_weight_unit_defaults_to_metric():
    assert weight_unit("imperial") == "lb"
    assert weight_unit("unknown") == "kg"
