# validation_utils.py
import streamlit as st

from config import AGE_GROUPS, WEIGHT_LIMITS


class ValidationUtils:
    @staticmethod
    def validate_pediatric_inputs(weight_kg, age_group=None, rule=None):
        """
        Validate pediatric patient inputs before dose calculation

        Parameters:
        - weight_kg: Patient weight in kg (None when not entered)
        - age_group: Selected age group (optional)
        - rule: PediatricDosingRule to check weight bounds against (optional)

        Returns:
        - List of warnings
        - List of errors
        """
        warnings = []
        errors = []

        if weight_kg is None:
            errors.append("Enter patient weight to calculate a pediatric dose")
            return warnings, errors

        if weight_kg <= 0:
            errors.append("Weight must be greater than zero")
            return warnings, errors

        if weight_kg < WEIGHT_LIMITS["MIN"] or weight_kg > WEIGHT_LIMITS["MAX"]:
            warnings.append(f"Weight should be between {WEIGHT_LIMITS['MIN']}-{WEIGHT_LIMITS['MAX']} kg")

        if age_group is None:
            warnings.append("Select an age group to apply neonatal and age-specific rules")
        elif age_group not in AGE_GROUPS:
            errors.append(f"Unknown age group '{age_group}'")

        if rule is not None:
            if rule.min_weight is not None and weight_kg < rule.min_weight:
                warnings.append(f"Weight is below this rule's minimum ({rule.min_weight:g} kg)")
            if rule.max_weight is not None and weight_kg > rule.max_weight:
                warnings.append(f"Weight is above this rule's maximum ({rule.max_weight:g} kg)")

        # Likely a unit or age-group entry error
        if age_group == "neonate" and weight_kg > 10:
            warnings.append("Weight is unusually high for a neonate. Verify weight and age group")

        return warnings, errors

    @staticmethod
    def display_validation_results(warnings, errors):
        """
        Display validation warnings and errors with proper formatting

        Returns:
        - Boolean indicating whether validation passed (True) or failed (False)
        """
        if errors:
            for error in errors:
                st.error(f"• {error}")
            return False

        if warnings:
            for warning in warnings:
                st.warning(f"• {warning}")

        return True

    @staticmethod
    def display_dose_warnings(result):
        """Render every warning attached to a pediatric dose result."""
        for warning in result.warnings:
            if "exceeds adult dose" in warning or "Weight should be" in warning:
                st.error(f"⚠️ {warning}")
            else:
                st.warning(f"⚠️ {warning}")
