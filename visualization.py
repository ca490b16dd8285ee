# visualization.py
import pandas as pd
import numpy as np
import altair as alt
import streamlit as st

from config import WEIGHT_LIMITS


class DoseVisualizer:
    @staticmethod
    def plot_dose_curve(curve, max_daily=None, patient_weight=None):
        """
        Generate a dose-by-weight chart.

        Parameters:
        - curve: DataFrame from PediatricDoseCalculator.dose_curve
        - max_daily: Maximum daily dose (mg) for the cap line (optional)
        - patient_weight: Current patient weight (kg) to mark (optional)

        Returns:
        - Altair chart object
        """
        per_dose = alt.Chart(curve).mark_line(color='firebrick', interpolate='step-after').encode(
            x=alt.X('Weight (kg)', title='Weight (kg)'),
            y=alt.Y('Dose (mg)', title='Dose (mg)', scale=alt.Scale(zero=True)),
            tooltip=['Weight (kg)', alt.Tooltip('Dose (mg)', format=".0f")]
        )

        daily = alt.Chart(curve).mark_line(color='steelblue', strokeDash=[4, 4]).encode(
            x='Weight (kg)',
            y=alt.Y('Daily Dose (mg)'),
            tooltip=['Weight (kg)', alt.Tooltip('Daily Dose (mg)', format=".0f")]
        )

        layers = [per_dose, daily]

        if max_daily:
            layers.append(
                alt.Chart(pd.DataFrame({'y': [max_daily]}))
                .mark_rule(color='orange')
                .encode(y='y', tooltip=alt.value(f"Max daily dose ({max_daily:g} mg)"))
            )

        if patient_weight:
            layers.append(
                alt.Chart(pd.DataFrame({'Weight (kg)': [patient_weight]}))
                .mark_rule(color='black', strokeDash=[2, 2])
                .encode(x='Weight (kg)', tooltip=alt.value("Patient weight"))
            )

        return alt.layer(*layers).properties(
            height=300,
            title='Dose by Weight'
        ).interactive()

    @staticmethod
    def weight_grid(rule, points=60):
        """Evenly spaced weights across the rule's range, clipped to the global limits."""
        low = rule.min_weight if rule.min_weight is not None else WEIGHT_LIMITS["MIN"]
        high = rule.max_weight if rule.max_weight is not None else WEIGHT_LIMITS["MAX"]
        low = max(low, WEIGHT_LIMITS["MIN"])
        high = min(high, WEIGHT_LIMITS["MAX"])
        if high <= low:
            high = low + 1
        return np.round(np.linspace(low, high, points), 1)

    @staticmethod
    def display_dose_chart(calculator, rule, age_group=None, patient_weight=None, key_suffix=""):
        """Show the dose-by-weight chart behind a checkbox."""
        if st.checkbox("Show dose by weight", key=f"show_dose_curve_{key_suffix}"):
            curve = calculator.dose_curve(rule, DoseVisualizer.weight_grid(rule), age_group)
            if curve.empty:
                st.warning("Cannot display chart for this rule")
                return
            chart = DoseVisualizer.plot_dose_curve(curve, rule.max_daily, patient_weight)
            st.altair_chart(chart, use_container_width=True)
