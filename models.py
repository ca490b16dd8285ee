# models.py
"""
Typed records for the YAML guideline documents.

Documents are validated into these models by data_loader; everything past the
loader works with frozen, fully-typed records.
"""
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

Route = Literal["IV", "IM", "PO", "PR"]
Setting = Literal["outpatient", "inpatient", "icu"]
Allergy = Literal["none", "penicillin", "cephalosporin", "beta-lactam"]
Population = Literal["none", "pregnancy", "renal-impairment", "hepatic-impairment", "immunocompromised"]


class StewardshipTier(str, Enum):
    CORE = "Core"
    WATCH = "Watch"
    RESERVE = "Reserve"


class Record(BaseModel):
    # camelCase YAML keys and snake_case field names are both accepted
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


def _as_list(value):
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return value


class AdultDosing(Record):
    dose: str
    route: Route
    frequency: str
    duration: Optional[str] = None
    max_dose: Optional[str] = None
    notes: List[str] = []


class NeonatalDosingRule(Record):
    dose_per_kg: float = Field(gt=0)
    frequency: str
    max_daily: Optional[float] = None
    min_age: Optional[float] = None
    max_age: Optional[float] = None
    notes: List[str] = []


class PediatricDosingRule(Record):
    dose_per_kg: float = Field(gt=0)
    frequency: str
    max_daily: Optional[float] = None
    min_weight: Optional[float] = None
    max_weight: Optional[float] = None
    min_age_days: Optional[float] = None
    max_age_days: Optional[float] = None
    neonate: Optional[NeonatalDosingRule] = None
    notes: List[str] = []
    source: Optional[str] = None

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.min_weight is not None and self.max_weight is not None:
            if self.min_weight > self.max_weight:
                raise ValueError(
                    f"minWeight ({self.min_weight}) must not exceed maxWeight ({self.max_weight})"
                )
        return self


class Spectrum(Record):
    plus: List[str] = []
    minus: List[str] = []

    @model_validator(mode="after")
    def _check_disjoint(self):
        overlap = set(self.plus) & set(self.minus)
        if overlap:
            raise ValueError(f"Organisms listed as both covered and not covered: {sorted(overlap)}")
        return self


class RenalAdjustmentRow(Record):
    crcl: str
    dose: str
    frequency: str


class RenalAdjustment(Record):
    note: str
    table: List[RenalAdjustmentRow] = []


class PKPD(Record):
    half_life: Optional[str] = None
    vd: Optional[str] = None


class AntibioticRecord(Record):
    id: str
    name: str
    drug_class: str = Field(alias="class")
    spectrum: Optional[Spectrum] = None
    stewardship_tier: Optional[StewardshipTier] = None
    adult: Dict[str, AdultDosing] = {}
    paeds: Dict[str, PediatricDosingRule] = {}
    renal_adjustment: Optional[RenalAdjustment] = None
    hepatic_adjustment: Optional[str] = None
    pkpd: Optional[PKPD] = None
    adverse_effects: List[str] = []
    monitoring: List[str] = []
    pregnancy: Optional[str] = None
    cost: Optional[Literal["$", "$$", "$$$"]] = None
    references: List[str] = []
    last_updated: Optional[str] = None

    @field_validator("last_updated", mode="before")
    @classmethod
    def _date_to_text(cls, value):
        return None if value is None else str(value)


class Regimen(Record):
    regimen: str
    route: Route
    dosing: str
    duration: Optional[str] = None
    notes: List[str] = []
    monitoring: List[str] = []
    setting: Optional[str] = None
    populations: List[str] = []

    @field_validator("notes", "monitoring", "populations", mode="before")
    @classmethod
    def _coerce_list(cls, value):
        return _as_list(value)

    @property
    def components(self):
        """Antibiotic tokens of a '+'-joined regimen, in listed order."""
        return [part.strip() for part in self.regimen.split("+") if part.strip()]


class TreatmentLine(Record):
    adult: Dict[str, Regimen] = {}
    pediatric: Dict[str, Regimen] = {}

    @field_validator("adult", "pediatric", mode="before")
    @classmethod
    def _empty_cohort(cls, value):
        return {} if value is None else value


class TreatmentLines(Record):
    first_line: TreatmentLine
    second_line: Optional[TreatmentLine] = None
    third_line: Optional[TreatmentLine] = None

    def get(self, line_id):
        if line_id not in ("first_line", "second_line", "third_line"):
            return None
        return getattr(self, line_id)

    def items(self):
        for line_id in ("first_line", "second_line", "third_line"):
            line = getattr(self, line_id)
            if line is not None:
                yield line_id, line


class TreeOption(Record):
    text: str
    next: Optional[str] = None
    treatment: Optional[str] = None
    criteria: List[str] = []


class TreeNode(Record):
    question: str
    options: List[TreeOption]


class ApplicableFilters(Record):
    allergies: List[Allergy] = []
    setting: List[Setting] = []
    populations: List[Population] = []


class ConditionFilters(Record):
    applicable: ApplicableFilters = ApplicableFilters()


class Epidemiology(Record):
    incidence: Optional[str] = None
    common_pathogens: List[str] = []


class PatientInstructions(Record):
    general: List[str] = []
    purulent: List[str] = []
    follow_up: Dict[str, List[str]] = {}
    wound_care: List[str] = []
    stepdown_guidance: List[str] = []

    @field_validator("follow_up", mode="before")
    @classmethod
    def _coerce_follow_up(cls, value):
        if value is None:
            return {}
        return {key: _as_list(items) for key, items in value.items()}


class ConditionRecord(Record):
    id: str
    name: str
    category: str
    description: Optional[str] = None
    tags: List[str] = []
    epidemiology: Optional[Epidemiology] = None
    diagnostic_pearls: List[str] = []
    filters: ConditionFilters = ConditionFilters()
    empiric_logic: Optional[str] = None
    decision_tree: Dict[str, TreeNode] = {}
    treatment_lines: TreatmentLines
    patient_instructions: Optional[PatientInstructions] = None
    references: List[str] = []
    last_updated: Optional[str] = None

    @field_validator("last_updated", mode="before")
    @classmethod
    def _date_to_text(cls, value):
        return None if value is None else str(value)

    def regimen_tokens(self):
        """Every distinct antibiotic token across lines and cohorts."""
        tokens = []
        for _, line in self.treatment_lines.items():
            for cohort in (line.adult, line.pediatric):
                for regimen in cohort.values():
                    for token in regimen.components:
                        if token not in tokens:
                            tokens.append(token)
        return tokens
