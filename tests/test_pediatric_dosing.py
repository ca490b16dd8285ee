# test_pediatric_dosing.py
import pytest

from models import AdultDosing, PediatricDosingRule
from pediatric_dosing import (
    PediatricDoseCalculator,
    doses_per_day,
    format_result,
    parse_adult_dose_mg,
    round_nearest_ten,
    round_tiered,
    select_rule,
)


@pytest.fixture
def calculator():
    return PediatricDoseCalculator("tiered")


@pytest.fixture
def bounded_rule():
    return PediatricDosingRule(
        dose_per_kg=90, frequency="q12h", max_daily=4000, min_weight=3, max_weight=40
    )


@pytest.fixture
def neonatal_rule():
    return PediatricDosingRule.model_validate({
        "dosePerKg": 60,
        "frequency": "q6h",
        "maxDaily": 4000,
        "minWeight": 2,
        "maxWeight": 60,
        "neonate": {"dosePerKg": 30, "frequency": "q12h", "maxAge": 28, "notes": ["Adjust by postmenstrual age"]},
    })


def test_standard_ten_kilo_child(calculator, standard_rule):
    result = calculator.calculate(10, "child", standard_rule)
    assert result.total_daily_dose == 150
    assert result.doses_per_day == 3
    assert result.per_dose == 50
    assert result.rounded_dose == 50
    assert result.warnings == []
    assert result.is_weight_valid and result.is_weight_in_range


def test_forty_kilo_child(calculator, standard_rule):
    result = calculator.calculate(40, "adolescent", standard_rule)
    assert result.per_dose == 200
    assert result.rounded_dose == 200


def test_implausible_weight_still_calculates(calculator, standard_rule):
    result = calculator.calculate(1, "neonate", standard_rule)
    assert not result.is_weight_valid
    assert result.total_daily_dose == 15
    assert result.per_dose == 5
    assert any("between 2-100 kg" in w for w in result.warnings)


def test_daily_maximum_caps_the_dose(calculator):
    rule = PediatricDosingRule(dose_per_kg=100, frequency="q6h", max_daily=4000)
    result = calculator.calculate(50, "adolescent", rule)
    assert result.is_max_dose_exceeded
    assert result.total_daily_dose == 4000
    assert result.per_dose == 1000
    assert result.rounded_dose == 1000
    assert any("capped at 4000 mg/day" in w for w in result.warnings)


def test_outside_rule_weight_range_returns_raw_dose(calculator, bounded_rule):
    result = calculator.calculate(45, "adolescent", bounded_rule)
    assert not result.is_weight_in_range
    assert result.per_dose == result.total_daily_dose == result.rounded_dose == 45 * 90
    assert not result.is_max_dose_exceeded
    assert any("above maximum recommended weight" in w for w in result.warnings)


def test_below_rule_minimum_weight(calculator, bounded_rule):
    result = calculator.calculate(2.5, "infant", bounded_rule)
    assert not result.is_weight_in_range
    assert result.rounded_dose == pytest.approx(225)
    assert any("below minimum recommended weight" in w for w in result.warnings)


def test_neonate_uses_sub_rule(calculator, neonatal_rule):
    result = calculator.calculate(3, "neonate", neonatal_rule)
    assert result.frequency == "q12h"
    assert result.doses_per_day == 2
    assert result.per_dose == 45
    assert result.notes == ["Adjust by postmenstrual age"]


def test_neonate_sub_rule_inherits_weight_bounds(calculator, neonatal_rule):
    result = calculator.calculate(1.5, "neonate", neonatal_rule)
    assert not result.is_weight_in_range
    assert result.per_dose == pytest.approx(45)


def test_non_neonate_ignores_sub_rule(calculator, neonatal_rule):
    result = calculator.calculate(10, "infant", neonatal_rule)
    assert result.frequency == "q6h"
    assert result.per_dose == 150


def test_select_rule_maps_neonatal_age(neonatal_rule):
    active = select_rule(neonatal_rule, "neonate")
    assert active.max_age_days == 28
    assert (active.min_weight, active.max_weight) == (2, 60)


def test_adult_dose_exceeded(calculator):
    rule = PediatricDosingRule(dose_per_kg=50, frequency="q24h")
    result = calculator.calculate(30, "adolescent", rule, adult_dose="1 g")
    assert result.is_above_adult_dose
    assert any("verify with pharmacy" in w for w in result.warnings)


def test_adult_dose_equal_counts_as_exceeded(calculator):
    rule = PediatricDosingRule(dose_per_kg=50, frequency="q24h")
    adult = AdultDosing(dose="1 g", route="IV", frequency="q24h")
    assert calculator.calculate(20, "child", rule, adult_dose=adult).is_above_adult_dose


def test_adult_dose_range_keeps_its_unit(calculator):
    rule = PediatricDosingRule(dose_per_kg=10, frequency="q24h")
    result = calculator.calculate(5, "child", rule, adult_dose="1-2 g")
    assert not result.is_above_adult_dose
    assert result.warnings == []


def test_weight_based_adult_dose_skips_comparison(calculator):
    rule = PediatricDosingRule(dose_per_kg=60, frequency="q6h")
    result = calculator.calculate(40, "adolescent", rule, adult_dose="15-20 mg/kg")
    assert not result.is_above_adult_dose


def test_age_below_rule_minimum(calculator):
    rule = PediatricDosingRule(dose_per_kg=10, frequency="q24h", min_age_days=180)
    assert not calculator.calculate(3, "neonate", rule).is_age_valid
    assert calculator.calculate(8, "infant", rule).is_age_valid
    assert not calculator.calculate(8, "infant", rule, age_days=100).is_age_valid
    assert calculator.calculate(8, None, rule).is_age_valid


def test_unknown_rounding_strategy():
    with pytest.raises(ValueError):
        PediatricDoseCalculator("nearest_7")


def test_nearest_ten_strategy(standard_rule):
    result = PediatricDoseCalculator("nearest_10").calculate(13, "child", standard_rule)
    assert result.per_dose == 65
    assert result.rounded_dose == 70


@pytest.mark.parametrize("dose, expected", [
    (7.4, 5),
    (62.5, 65),
    (112.5, 125),
    (1049, 1000),
    (1050, 1100),
])
def test_round_tiered(dose, expected):
    assert round_tiered(dose) == expected


@pytest.mark.parametrize("dose, expected", [(44, 40), (45, 50), (1234, 1230)])
def test_round_nearest_ten(dose, expected):
    assert round_nearest_ten(dose) == expected


@pytest.mark.parametrize("frequency, expected", [
    ("q8h", 3),
    ("Q6H", 4),
    ("q36h", 24 / 36),
    ("q0h", 1),
    ("daily", 1),
    ("q8-12h", 1),
    (None, 1),
])
def test_doses_per_day(frequency, expected):
    assert doses_per_day(frequency) == expected


@pytest.mark.parametrize("dose, expected", [
    ("500 mg", 500),
    ("1 g", 1000),
    ("1.5g", 1500),
    ("1-2 g", 1000),
    ("250-500 mg", 250),
    ("250 mcg", 0.25),
    ("15-20 mg/kg", None),
    ("as directed", None),
    (None, None),
])
def test_parse_adult_dose_mg(dose, expected):
    assert parse_adult_dose_mg(dose) == expected


def test_dose_curve(calculator, standard_rule):
    curve = calculator.dose_curve(standard_rule, [10, 20])
    assert list(curve.columns) == ["Weight (kg)", "Dose (mg)", "Daily Dose (mg)", "Capped"]
    assert curve["Dose (mg)"].tolist() == [50, 100]


def test_format_result(calculator, standard_rule):
    text = format_result(calculator.calculate(10, "child", standard_rule))
    assert text == "50 mg q8h (max 4000 mg/day)"
