# unit_conversion.py
import re

from config import CONVERSION_FACTORS, UNIT_SYSTEMS

WEIGHT_DOSE_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(mg/kg|mg/lb)", re.IGNORECASE)


def format_dosage(text, unit_system):
    """
    Rewrite weight-based dose tokens for the active unit system.

    "15 mg/kg" becomes "33.1 mg/lb" in imperial and "50 mg/lb" becomes
    "22.7 mg/kg" in metric. Tokens already in the target unit and all other
    text pass through unchanged.
    """
    if not text:
        return text

    def _convert(match):
        value = float(match.group(1))
        unit = match.group(2).lower()
        if unit_system == "metric" and unit == "mg/lb":
            return f"{value * CONVERSION_FACTORS['LB_TO_KG']:.1f} mg/kg"
        if unit_system == "imperial" and unit == "mg/kg":
            return f"{value * CONVERSION_FACTORS['KG_TO_LB']:.1f} mg/lb"
        return match.group(0)

    return WEIGHT_DOSE_PATTERN.sub(_convert, text)


def convert_weight(value, from_unit, unit_system):
    """Convert a weight into the unit of the active system, one decimal."""
    if from_unit == "kg" and unit_system == "imperial":
        return round(value * CONVERSION_FACTORS["KG_TO_LB"], 1)
    if from_unit == "lb" and unit_system == "metric":
        return round(value * CONVERSION_FACTORS["LB_TO_KG"], 1)
    return value


def weight_to_kg(value, unit):
    if value is None:
        return None
    if unit == "lb":
        return value * CONVERSION_FACTORS["LB_TO_KG"]
    return value


def weight_unit(unit_system):
    return UNIT_SYSTEMS.get(unit_system, UNIT_SYSTEMS["metric"])["weight_unit"]


def format_weight(weight_kg, unit_system):
    if weight_kg is None:
        return "N/A"
    value = convert_weight(weight_kg, "kg", unit_system)
    return f"{value:.1f} {weight_unit(unit_system)}"
