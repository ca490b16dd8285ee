# regimen_filter.py
from config import TREATMENT_LINES

DEFAULT_SETTING = "outpatient"


def matches_setting(scenario_key, regimen, active_setting):
    """Permissive OR-rule: a regimen is hidden only if every check fails."""
    key = scenario_key.lower()
    setting = (active_setting or "").lower()

    if not regimen.setting:
        return True
    if regimen.setting == active_setting:
        return True
    if setting and setting in key:
        return True
    if "combination" in key and "setting_specific" not in key:
        return True
    return False


def select_regimens(regimens, active_setting):
    """
    Regimens of one cohort that apply to the active care setting.

    Parameters:
    - regimens: Mapping of scenario key -> Regimen (one treatment-line cohort)
    - active_setting: "outpatient", "inpatient" or "icu"

    Returns:
    - dict in the original insertion order; may be empty
    """
    return {
        key: regimen
        for key, regimen in regimens.items()
        if matches_setting(key, regimen, active_setting)
    }


def cohort_regimens(treatment_line, pediatric):
    """Pediatric regimens in pediatric mode, adult regimens otherwise."""
    if treatment_line is None:
        return {}
    if pediatric:
        return dict(treatment_line.pediatric)
    return dict(treatment_line.adult)


def available_treatment_lines(condition):
    return [(line_id, TREATMENT_LINES[line_id]) for line_id, _ in condition.treatment_lines.items()]


def default_setting(condition):
    settings = condition.filters.applicable.setting
    return settings[0] if settings else DEFAULT_SETTING


def locate_treatment(condition, scenario_key):
    """
    Treatment line and setting holding a scenario, for decision-tree jumps.

    Falls back to ("first_line", "outpatient") when the key is not found.
    """
    found_line, found_setting = "first_line", DEFAULT_SETTING

    for line_id, line in condition.treatment_lines.items():
        regimen = line.adult.get(scenario_key) or line.pediatric.get(scenario_key)
        if regimen is None:
            continue
        found_line = line_id
        if regimen.setting:
            found_setting = regimen.setting
        elif "inpatient" in scenario_key:
            found_setting = "inpatient"
        elif "icu" in scenario_key:
            found_setting = "icu"
        else:
            found_setting = DEFAULT_SETTING

    return found_line, found_setting


def scenario_title(scenario_key):
    return " ".join(word.capitalize() for word in scenario_key.split("_"))
