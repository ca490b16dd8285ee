# clinical_logic.py
from config import ALLERGY_GUIDELINES, POPULATION_GUIDELINES, STEP_DOWN_CRITERIA

GUIDANCE_SECTIONS = ("alternatives", "recommendations", "notes")


class GuidelineAdvisor:
    def __init__(self, condition=None):
        self.condition = condition

    @staticmethod
    def allergy_guidance(allergy):
        """Alternatives, recommendations and notes for a reported allergy (empty when unknown)."""
        guidance = ALLERGY_GUIDELINES.get(allergy, {})
        return {section: list(guidance.get(section, [])) for section in GUIDANCE_SECTIONS}

    @staticmethod
    def population_guidance(population):
        guidance = POPULATION_GUIDELINES.get(population, {})
        return {section: list(guidance.get(section, [])) for section in GUIDANCE_SECTIONS}

    @staticmethod
    def guidance_title(kind, key):
        """Display title, e.g. ("population", "renal-impairment") -> "Renal Impairment Guidelines"."""
        label = " ".join(word.capitalize() for word in key.replace("-", " ").split())
        if kind == "allergy":
            return f"{label} Allergy Guidelines"
        return f"{label} Guidelines"

    @staticmethod
    def step_down_guidance(regimen=None):
        """
        Step-down criteria for a regimen.

        Parameters:
        - regimen: Regimen record, or None for the generic guidance

        Returns:
        - Dictionary with clinical stability criteria, IV-to-oral criteria
          and options; oral regimens get only the stability criteria
        """
        guidance = {
            "clinical_stability": {
                category: list(criteria)
                for category, criteria in STEP_DOWN_CRITERIA["clinical_stability"].items()
            },
            "iv_to_oral": [],
            "options": {},
        }

        if regimen is None or regimen.route in ("IV", "IM"):
            guidance["iv_to_oral"] = list(STEP_DOWN_CRITERIA["iv_to_oral"])
            guidance["options"] = dict(STEP_DOWN_CRITERIA["options"])

        if regimen is not None and regimen.duration:
            guidance["duration_note"] = f"Total course including oral step-down: {regimen.duration}"

        return guidance

    def instruction_sections(self):
        """Patient instruction blocks as ordered (title, items) pairs, empty blocks skipped."""
        if self.condition is None or self.condition.patient_instructions is None:
            return []

        instructions = self.condition.patient_instructions
        sections = [
            ("General Instructions", list(instructions.general)),
            ("Purulent Infection", list(instructions.purulent)),
            ("Wound Care", list(instructions.wound_care)),
            ("Stepdown Guidance", list(instructions.stepdown_guidance)),
        ]

        follow_up = [
            f"{key}: {item}"
            for key, items in instructions.follow_up.items()
            for item in items
        ]
        sections.append(("Follow-up Instructions", follow_up))

        return [(title, items) for title, items in sections if items]

    @staticmethod
    def active_guidance(allergy, population):
        """Guidance panels for the active allergy and population filters ("none" shows nothing)."""
        guidance = []
        if allergy and allergy != "none":
            guidance.append((
                GuidelineAdvisor.guidance_title("allergy", allergy),
                GuidelineAdvisor.allergy_guidance(allergy),
            ))
        if population and population != "none":
            guidance.append((
                GuidelineAdvisor.guidance_title("population", population),
                GuidelineAdvisor.population_guidance(population),
            ))
        return guidance
