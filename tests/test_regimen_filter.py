# test_regimen_filter.py
import pytest

from regimen_filter import (
    available_treatment_lines,
    cohort_regimens,
    default_setting,
    locate_treatment,
    matches_setting,
    scenario_title,
    select_regimens,
)


@pytest.fixture
def regimens(make_regimen):
    return {
        "outpatient_mild": make_regimen("Amoxicillin", route="PO", setting="outpatient"),
        "inpatient_moderate": make_regimen("Ceftriaxone + Azithromycin"),
        "icu_severe": make_regimen("Piperacillin-Tazobactam + Vancomycin", setting="icu"),
    }


def test_icu_includes_untagged_regimen(regimens):
    assert list(select_regimens(regimens, "icu")) == ["inpatient_moderate", "icu_severe"]


def test_outpatient_includes_untagged_regimen(regimens):
    assert list(select_regimens(regimens, "outpatient")) == ["outpatient_mild", "inpatient_moderate"]


def test_inpatient_only_untagged(regimens):
    assert list(select_regimens(regimens, "inpatient")) == ["inpatient_moderate"]


def test_untagged_regimens_show_in_every_setting(make_regimen):
    line = {
        "outpatient_mild": make_regimen("Amoxicillin", route="PO"),
        "inpatient_moderate": make_regimen("Ceftriaxone + Azithromycin"),
        "icu_severe": make_regimen("Piperacillin-Tazobactam + Vancomycin", setting="icu"),
    }
    assert list(select_regimens(line, "icu")) == ["outpatient_mild", "inpatient_moderate", "icu_severe"]
    assert list(select_regimens(line, "outpatient")) == ["outpatient_mild", "inpatient_moderate"]


def test_selected_values_are_the_same_records(regimens):
    selected = select_regimens(regimens, "icu")
    assert selected["icu_severe"] is regimens["icu_severe"]


def test_setting_named_in_key(make_regimen):
    regimen = make_regimen(setting="inpatient")
    assert matches_setting("icu_step_down", regimen, "icu")
    assert not matches_setting("ward_step_down", regimen, "icu")


def test_combination_keys_shown_in_every_setting(make_regimen):
    regimen = make_regimen(setting="inpatient")
    assert matches_setting("mrsa_combination", regimen, "outpatient")
    assert not matches_setting("combination_setting_specific", regimen, "outpatient")


def test_empty_input():
    assert select_regimens({}, "icu") == {}


def test_cohort_regimens(pneumonia):
    line = pneumonia.treatment_lines.first_line
    assert "outpatient_child" in cohort_regimens(line, pediatric=True)
    assert "outpatient_healthy" in cohort_regimens(line, pediatric=False)
    assert cohort_regimens(None, pediatric=False) == {}


def test_available_treatment_lines(pneumonia):
    assert available_treatment_lines(pneumonia) == [
        ("first_line", "First Line"),
        ("second_line", "Second Line"),
    ]


def test_default_setting(pneumonia):
    assert default_setting(pneumonia) == "outpatient"


def test_locate_treatment(pneumonia):
    assert locate_treatment(pneumonia, "icu_severe") == ("first_line", "icu")
    assert locate_treatment(pneumonia, "inpatient_moderate") == ("first_line", "inpatient")
    assert locate_treatment(pneumonia, "penicillin_allergy_inpatient") == ("second_line", "inpatient")
    assert locate_treatment(pneumonia, "missing_scenario") == ("first_line", "outpatient")


def test_scenario_title():
    assert scenario_title("outpatient_healthy") == "Outpatient Healthy"
