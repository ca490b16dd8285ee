# session_state.py
"""
Per-session UI preferences: unit system, pediatric context and filters.

Values are frozen dataclasses stored in a mutable mapping (st.session_state
in the app, a plain dict in tests). Every update stores a new value, so a
reader never observes a half-applied change.
"""
from dataclasses import dataclass, replace
from typing import Optional

from config import AGE_GROUPS, ALLERGIES, DEFAULT_FILTERS, POPULATIONS, SETTINGS, UNIT_SYSTEMS

UNITS_KEY = "unit_preferences"
PEDIATRIC_KEY = "pediatric_context"
FILTERS_KEY = "filter_state"


@dataclass(frozen=True)
class UnitPreferences:
    system: str = "metric"

    @property
    def weight_unit(self):
        return UNIT_SYSTEMS[self.system]["weight_unit"]

    @property
    def height_unit(self):
        return UNIT_SYSTEMS[self.system]["height_unit"]


@dataclass(frozen=True)
class PediatricContext:
    enabled: bool = False
    weight_kg: Optional[float] = None
    age_group: Optional[str] = None

    @property
    def ready(self):
        """Pediatric mode with enough information to calculate doses."""
        return self.enabled and self.weight_kg is not None and self.weight_kg > 0


@dataclass(frozen=True)
class FilterState:
    allergy: str = DEFAULT_FILTERS["allergy"]
    setting: str = DEFAULT_FILTERS["setting"]
    population: str = DEFAULT_FILTERS["population"]

    @property
    def active_count(self):
        return sum(
            getattr(self, name) != default for name, default in DEFAULT_FILTERS.items()
        )


class SessionPreferences:
    def __init__(self, store):
        self.store = store

    # Units
    @property
    def units(self):
        return self.store.get(UNITS_KEY) or UnitPreferences()

    def set_unit_system(self, system):
        if system not in UNIT_SYSTEMS:
            raise ValueError(f"Unknown unit system '{system}'")
        self.store[UNITS_KEY] = UnitPreferences(system=system)
        return self.units

    def toggle_unit_system(self):
        current = self.units.system
        return self.set_unit_system("imperial" if current == "metric" else "metric")

    # Pediatric context
    @property
    def pediatric(self):
        return self.store.get(PEDIATRIC_KEY) or PediatricContext()

    def _update_pediatric(self, **changes):
        self.store[PEDIATRIC_KEY] = replace(self.pediatric, **changes)
        return self.pediatric

    def toggle_pediatric_mode(self):
        return self._update_pediatric(enabled=not self.pediatric.enabled)

    def set_pediatric_mode(self, enabled):
        return self._update_pediatric(enabled=bool(enabled))

    def set_weight(self, weight_kg):
        if weight_kg is not None and weight_kg <= 0:
            weight_kg = None
        return self._update_pediatric(weight_kg=weight_kg)

    def set_age_group(self, age_group):
        if age_group is not None and age_group not in AGE_GROUPS:
            raise ValueError(f"Unknown age group '{age_group}'")
        return self._update_pediatric(age_group=age_group)

    # Filters
    @property
    def filters(self):
        return self.store.get(FILTERS_KEY) or FilterState()

    def set_filter(self, **changes):
        allowed = {"allergy": ALLERGIES, "setting": SETTINGS, "population": POPULATIONS}
        for name, value in changes.items():
            if name not in allowed:
                raise ValueError(f"Unknown filter '{name}'")
            if value not in allowed[name]:
                raise ValueError(f"Unknown {name} '{value}'")
        self.store[FILTERS_KEY] = replace(self.filters, **changes)
        return self.filters

    def reset_filters(self):
        self.store[FILTERS_KEY] = FilterState()
        return self.filters

    def load_query_params(self, params):
        """Apply filters shared through a URL; invalid values keep the current filter."""
        changes = from_query_params(params)
        if changes:
            self.set_filter(**changes)
        return self.filters


def to_query_params(filters):
    """Non-default filters as URL query parameters."""
    return {
        name: getattr(filters, name)
        for name, default in DEFAULT_FILTERS.items()
        if getattr(filters, name) != default
    }


def from_query_params(params):
    """Filter values from URL query parameters; unknown values are ignored."""
    allowed = {"allergy": ALLERGIES, "setting": SETTINGS, "population": POPULATIONS}
    changes = {}
    for name, options in allowed.items():
        value = params.get(name)
        if isinstance(value, list):
            value = value[0] if value else None
        if value in options:
            changes[name] = value
    return changes
