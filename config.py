# config.py
import os
from pathlib import Path

DATA_DIR = Path(os.environ.get("ABX_GUIDE_DATA_DIR", Path(__file__).resolve().parent / "data"))

LOG_LEVEL = os.environ.get("ABX_GUIDE_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Canonical antibiotic id -> aliases (brand names, abbreviations)
ANTIBIOTIC_SYNONYMS = {
    "piperacillin-tazobactam": ["pip-tazo", "zosyn", "piptazo", "tazocin"],
    "trimethoprim-sulfamethoxazole": ["tmp-smx", "bactrim", "co-trimoxazole", "septra"],
    "amoxicillin-clavulanate": ["augmentin", "co-amoxiclav", "amox-clav"],
    "ampicillin-sulbactam": ["unasyn"],
    "ceftriaxone": ["rocephin"],
    "vancomycin": ["vanc"],
    "piperacillin": ["pip"],
    "gentamicin": ["gent"],
    "clindamycin": ["clinda"],
    "metronidazole": ["flagyl", "metro"],
    "azithromycin": ["zithromax", "azith"],
    "ciprofloxacin": ["cipro"],
    "levofloxacin": ["levo", "levaquin"],
    "meropenem": ["merrem", "mero"],
    "cefazolin": ["ancef", "kefzol"],
    "cefepime": ["maxipime"],
    "doxycycline": ["doxy"],
}

CONVERSION_FACTORS = {
    "KG_TO_LB": 2.20462,
    "LB_TO_KG": 0.453592,
    "CM_TO_IN": 0.393701,
    "IN_TO_CM": 2.54,
}

UNIT_SYSTEMS = {
    "metric": {"weight_unit": "kg", "height_unit": "cm", "display_name": "Metric (kg)"},
    "imperial": {"weight_unit": "lb", "height_unit": "in", "display_name": "Imperial (lb)"},
}

# Global plausibility bounds for pediatric weight (kg)
WEIGHT_LIMITS = {
    "MIN": 2,
    "MAX": 100,
}

AGE_GROUPS = {
    "neonate": "Neonate (0-28 days)",
    "infant": "Infant (1-12 months)",
    "child": "Child (1-12 years)",
    "adolescent": "Adolescent (12-18 years)",
}

# Inclusive day ranges used when only the age group is known
AGE_GROUP_DAYS = {
    "neonate": (0, 28),
    "infant": (29, 365),
    "child": (366, 4380),
    "adolescent": (4381, 6570),
}

# Integration choice between the two pediatric rounding strategies:
# "tiered" (5/25/100 mg steps) or "nearest_10"
PEDIATRIC_ROUNDING_STRATEGY = "tiered"

SETTINGS = {
    "outpatient": "Outpatient",
    "inpatient": "Inpatient",
    "icu": "ICU",
}

ALLERGIES = {
    "none": "None",
    "penicillin": "Penicillin",
    "cephalosporin": "Cephalosporin",
    "beta-lactam": "Beta-lactam",
}

POPULATIONS = {
    "none": "None",
    "pregnancy": "Pregnancy",
    "renal-impairment": "Renal Impairment",
    "hepatic-impairment": "Hepatic Impairment",
    "immunocompromised": "Immunocompromised",
}

TREATMENT_LINES = {
    "first_line": "First Line",
    "second_line": "Second Line",
    "third_line": "Third Line",
}

DEFAULT_FILTERS = {
    "allergy": "none",
    "setting": "outpatient",
    "population": "none",
}

ALLERGY_GUIDELINES = {
    "penicillin": {
        "alternatives": [
            "Macrolides (e.g., Azithromycin)",
            "Fluoroquinolones (e.g., Levofloxacin)",
            "Tetracyclines (e.g., Doxycycline)",
        ],
        "recommendations": [
            "Consider skin testing to confirm true penicillin allergy",
            "Many patients with reported penicillin allergy can safely receive cephalosporins",
        ],
        "notes": [
            "Cross-reactivity with cephalosporins is lower than previously thought (~2%)",
            "Document the nature of the allergic reaction (e.g., rash vs. anaphylaxis)",
        ],
    },
    "cephalosporin": {
        "alternatives": [
            "Fluoroquinolones (e.g., Levofloxacin)",
            "Macrolides (e.g., Azithromycin)",
            "Carbapenems (e.g., Meropenem)",
        ],
        "recommendations": [
            "Evaluate cross-reactivity risk with other beta-lactams",
            "Consider allergy consultation for severe reactions",
        ],
        "notes": [
            "Cross-reactivity patterns vary by generation of cephalosporin",
            "Document specific cephalosporin causing the reaction",
        ],
    },
    "beta-lactam": {
        "alternatives": [
            "Fluoroquinolones (e.g., Levofloxacin)",
            "Macrolides (e.g., Azithromycin)",
            "Vancomycin for serious Gram-positive infections",
        ],
        "recommendations": [
            "Avoid penicillins, cephalosporins and carbapenems until allergy is clarified",
            "Consider allergy consultation before re-challenge",
        ],
        "notes": [
            "Aztreonam has negligible cross-reactivity except with ceftazidime",
        ],
    },
}

POPULATION_GUIDELINES = {
    "pregnancy": {
        "recommendations": [
            "Prefer FDA Category A/B medications when possible",
            "Consider risk vs. benefit for each trimester",
            "Adjust dosing based on pregnancy-related physiological changes",
        ],
        "notes": [
            "Document gestational age when making treatment decisions",
            "Consider consulting with OB/GYN for complex cases",
        ],
    },
    "renal-impairment": {
        "recommendations": [
            "Calculate and document creatinine clearance",
            "Adjust dosing based on renal function",
            "Monitor renal function during therapy",
        ],
        "notes": [
            "Consider nephrology consultation for complex cases",
            "Regular monitoring of drug levels may be required",
        ],
    },
    "hepatic-impairment": {
        "recommendations": [
            "Review hepatic adjustment for each agent",
            "Monitor liver function tests during therapy",
        ],
        "notes": [
            "Child-Pugh class guides dose reduction for hepatically cleared agents",
        ],
    },
    "immunocompromised": {
        "recommendations": [
            "Consider broader spectrum empiric therapy",
            "Lower threshold for hospitalization",
            "Monitor closely for treatment response",
        ],
        "notes": [
            "Document type and degree of immunosuppression",
            "Consider infectious disease consultation",
        ],
    },
}

STEP_DOWN_CRITERIA = {
    "clinical_stability": {
        "Vital Signs": [
            "Temperature ≤37.8°C",
            "Heart rate ≤100/min",
            "Respiratory rate ≤24/min",
            "Systolic BP ≥90 mmHg",
            "O2 saturation ≥90% on room air",
        ],
        "Mental Status": [
            "Return to baseline mental status",
            "Able to take oral medications",
        ],
        "Nutrition/GI": [
            "Tolerating oral intake",
            "No nausea/vomiting",
        ],
    },
    "iv_to_oral": [
        "Patient meets clinical stability criteria for 24-48 hours",
        "No contraindications to oral intake",
        "No surgery planned within 24 hours",
        "No severe sepsis/shock",
        "Adequate oral absorption expected",
    ],
    "options": {
        "First Choice": "Switch to oral equivalent if available",
        "Alternative": "Switch to appropriate oral alternative based on susceptibilities",
    },
}
