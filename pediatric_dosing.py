# pediatric_dosing.py
import math
import re
from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd

from config import AGE_GROUP_DAYS, WEIGHT_LIMITS

FREQUENCY_PATTERN = re.compile(r"q(\d+)h", re.IGNORECASE)
ADULT_DOSE_PATTERN = re.compile(r"(\d+(?:\.\d+)?)(?:\s*-\s*\d+(?:\.\d+)?)?\s*(mcg|mg|g)?\b", re.IGNORECASE)
PER_KG_PATTERN = re.compile(r"/\s*kg", re.IGNORECASE)


def _round_half_up(value, step):
    return math.floor(value / step + 0.5) * step


def round_tiered(dose):
    """Round to practical increments: 100 mg from 1000 mg, 25 mg from 100 mg, else 5 mg."""
    if dose >= 1000:
        return _round_half_up(dose, 100)
    if dose >= 100:
        return _round_half_up(dose, 25)
    return _round_half_up(dose, 5)


def round_nearest_ten(dose):
    """Flat rounding to the nearest 10 mg regardless of magnitude."""
    return _round_half_up(dose, 10)


ROUNDING_STRATEGIES = {
    "tiered": round_tiered,
    "nearest_10": round_nearest_ten,
}


def doses_per_day(frequency):
    """Doses per day for a 'q<N>h' frequency; anything unparsable counts as once daily."""
    match = FREQUENCY_PATTERN.search(frequency or "")
    if not match:
        return 1
    interval = int(match.group(1))
    if interval <= 0:
        return 1
    return 24 / interval


def parse_adult_dose_mg(adult_dose):
    """
    First numeric amount of an adult dose in mg.

    Accepts a dose string ("500 mg", "1 g") or an AdultDosing record. Weight
    based doses ("15 mg/kg") and text without a number return None. A range
    ("1-2 g") counts as its lower bound in the unit written after it.
    """
    text = getattr(adult_dose, "dose", adult_dose)
    if not text:
        return None
    text = str(text)
    if PER_KG_PATTERN.search(text):
        return None
    match = ADULT_DOSE_PATTERN.search(text)
    if not match:
        return None
    value = float(match.group(1))
    unit = (match.group(2) or "mg").lower()
    if unit == "g":
        return value * 1000
    if unit == "mcg":
        return value / 1000
    return value


@dataclass(frozen=True)
class ActiveRule:
    dose_per_kg: float
    frequency: str
    max_daily: Optional[float] = None
    min_weight: Optional[float] = None
    max_weight: Optional[float] = None
    min_age_days: Optional[float] = None
    max_age_days: Optional[float] = None
    notes: tuple = ()


@dataclass
class PediatricDoseResult:
    per_dose: float
    doses_per_day: float
    total_daily_dose: float
    rounded_dose: float
    frequency: str
    max_daily: Optional[float] = None
    notes: List[str] = field(default_factory=list)
    is_weight_valid: bool = True
    is_weight_in_range: bool = True
    is_age_valid: bool = True
    is_max_dose_exceeded: bool = False
    is_above_adult_dose: bool = False
    warnings: List[str] = field(default_factory=list)


def select_rule(rule, age_group):
    """Neonatal sub-rule for neonates (keeping the parent's weight bounds), else the rule itself."""
    if age_group == "neonate" and rule.neonate is not None:
        neonate = rule.neonate
        return ActiveRule(
            dose_per_kg=neonate.dose_per_kg,
            frequency=neonate.frequency,
            max_daily=neonate.max_daily,
            min_weight=rule.min_weight,
            max_weight=rule.max_weight,
            min_age_days=neonate.min_age,
            max_age_days=neonate.max_age,
            notes=tuple(neonate.notes),
        )
    return ActiveRule(
        dose_per_kg=rule.dose_per_kg,
        frequency=rule.frequency,
        max_daily=rule.max_daily,
        min_weight=rule.min_weight,
        max_weight=rule.max_weight,
        min_age_days=rule.min_age_days,
        max_age_days=rule.max_age_days,
        notes=tuple(rule.notes),
    )


class PediatricDoseCalculator:
    def __init__(self, rounding):
        if rounding not in ROUNDING_STRATEGIES:
            raise ValueError(
                f"Unknown rounding strategy '{rounding}'. Choose one of: {', '.join(ROUNDING_STRATEGIES)}"
            )
        self.rounding = rounding
        self._round_dose = ROUNDING_STRATEGIES[rounding]

    def calculate(self, weight_kg, age_group, rule, adult_dose=None, age_days=None):
        """
        Weight-based pediatric dose for one indication.

        Parameters:
        - weight_kg: Patient weight in kg
        - age_group: "neonate", "infant", "child", "adolescent" or None
        - rule: PediatricDosingRule for the indication
        - adult_dose: Adult dose text or AdultDosing, for the exceeds-adult check
        - age_days: Exact age in days, when known

        Returns:
        - PediatricDoseResult with every warning that applies
        """
        active = select_rule(rule, age_group)
        warnings = []

        # Global plausibility bounds are advisory only
        is_weight_valid = WEIGHT_LIMITS["MIN"] <= weight_kg <= WEIGHT_LIMITS["MAX"]
        if not is_weight_valid:
            warnings.append(
                f"Weight should be between {WEIGHT_LIMITS['MIN']}-{WEIGHT_LIMITS['MAX']} kg "
                f"(entered {weight_kg:g} kg)"
            )

        is_age_valid = self._check_age(active, age_group, age_days, warnings)
        per_day = doses_per_day(active.frequency)

        # Outside the rule's own weight range: raw dose, no capping or rounding
        out_of_range = None
        if active.min_weight is not None and weight_kg < active.min_weight:
            out_of_range = (
                f"Patient weight ({weight_kg:g} kg) below minimum recommended weight ({active.min_weight:g} kg)"
            )
        elif active.max_weight is not None and weight_kg > active.max_weight:
            out_of_range = (
                f"Patient weight ({weight_kg:g} kg) above maximum recommended weight ({active.max_weight:g} kg)"
            )
        if out_of_range:
            raw_dose = weight_kg * active.dose_per_kg
            warnings.append(out_of_range)
            return PediatricDoseResult(
                per_dose=raw_dose,
                doses_per_day=per_day,
                total_daily_dose=raw_dose,
                rounded_dose=raw_dose,
                frequency=active.frequency,
                max_daily=active.max_daily,
                notes=list(active.notes),
                is_weight_valid=is_weight_valid,
                is_weight_in_range=False,
                is_age_valid=is_age_valid,
                warnings=warnings,
            )

        total_daily = weight_kg * active.dose_per_kg
        is_max_dose_exceeded = False
        if active.max_daily is not None and total_daily > active.max_daily:
            is_max_dose_exceeded = True
            total_daily = active.max_daily
            warnings.append(
                f"Calculated dose exceeds maximum daily dose, capped at {active.max_daily:g} mg/day"
            )

        per_dose = total_daily / per_day
        rounded_dose = self._round_dose(per_dose)

        is_above_adult_dose = False
        adult_dose_mg = parse_adult_dose_mg(adult_dose)
        if adult_dose_mg is not None and per_dose >= adult_dose_mg:
            is_above_adult_dose = True
            warnings.append(
                f"Calculated dose ({per_dose:.0f} mg) exceeds adult dose ({adult_dose_mg:g} mg) - verify with pharmacy"
            )

        return PediatricDoseResult(
            per_dose=per_dose,
            doses_per_day=per_day,
            total_daily_dose=total_daily,
            rounded_dose=rounded_dose,
            frequency=active.frequency,
            max_daily=active.max_daily,
            notes=list(active.notes),
            is_weight_valid=is_weight_valid,
            is_weight_in_range=True,
            is_age_valid=is_age_valid,
            is_max_dose_exceeded=is_max_dose_exceeded,
            is_above_adult_dose=is_above_adult_dose,
            warnings=warnings,
        )

    @staticmethod
    def _check_age(active, age_group, age_days, warnings):
        if active.min_age_days is None and active.max_age_days is None:
            return True

        if age_days is not None:
            low = high = age_days
            described = f"{age_days:g} days"
        elif age_group in AGE_GROUP_DAYS:
            low, high = AGE_GROUP_DAYS[age_group]
            described = f"age group '{age_group}'"
        else:
            return True

        if active.min_age_days is not None and high < active.min_age_days:
            warnings.append(f"Patient {described} is below minimum age ({active.min_age_days:g} days)")
            return False
        if active.max_age_days is not None and low > active.max_age_days:
            warnings.append(f"Patient {described} is above maximum age ({active.max_age_days:g} days)")
            return False
        return True

    def dose_curve(self, rule, weights, age_group=None):
        """Rounded and daily doses across a range of weights, for charting."""
        rows = []
        for weight in weights:
            result = self.calculate(float(weight), age_group, rule)
            rows.append({
                "Weight (kg)": float(weight),
                "Dose (mg)": result.rounded_dose,
                "Daily Dose (mg)": result.total_daily_dose,
                "Capped": result.is_max_dose_exceeded,
            })
        return pd.DataFrame(rows)


def format_result(result):
    """One-line dose summary followed by warning lines."""
    text = f"{result.rounded_dose:g} mg {result.frequency}"
    if result.max_daily is not None:
        text += f" (max {result.max_daily:g} mg/day)"
    for warning in result.warnings:
        text += f"\n⚠️ {warning}"
    return text
