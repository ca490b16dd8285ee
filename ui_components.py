# ui_components.py
import logging
from datetime import datetime

import pandas as pd
import streamlit as st

from antibiotic_resolver import resolve_regimen
from config import AGE_GROUPS, PEDIATRIC_ROUNDING_STRATEGY, UNIT_SYSTEMS
from pediatric_dosing import PediatricDoseCalculator, format_result
from regimen_filter import scenario_title
from session_state import SessionPreferences, to_query_params
from unit_conversion import convert_weight, format_dosage, format_weight, weight_to_kg
from validation_utils import ValidationUtils
from visualization import DoseVisualizer

logger = logging.getLogger(__name__)

TIER_BADGES = {
    "Core": "🟢 Core",
    "Watch": "🟡 Watch",
    "Reserve": "🔴 Reserve",
}


class UIComponents:
    @staticmethod
    def create_sidebar():
        """Navigation plus unit and pediatric preferences; returns (page, preferences)."""
        st.sidebar.title("📊 Navigation")
        page = st.sidebar.radio(
            "Select Page",
            ["Condition Guidelines", "Antibiotic Lookup", "Search"]
        )

        prefs = SessionPreferences(st.session_state)
        UIComponents.load_url_filters(prefs)

        st.sidebar.title("⚙️ Preferences")
        systems = list(UNIT_SYSTEMS)
        system = st.sidebar.radio(
            "Units",
            systems,
            index=systems.index(prefs.units.system),
            format_func=lambda s: UNIT_SYSTEMS[s]["display_name"],
            horizontal=True
        )
        if system != prefs.units.system:
            prefs.set_unit_system(system)

        st.sidebar.title("🧒 Patient Context")
        enabled = st.sidebar.toggle("Pediatric Mode", value=prefs.pediatric.enabled)
        if enabled != prefs.pediatric.enabled:
            prefs.set_pediatric_mode(enabled)

        if prefs.pediatric.enabled:
            unit = prefs.units.weight_unit
            current = prefs.pediatric.weight_kg
            shown = convert_weight(current, "kg", prefs.units.system) if current else 0.0
            entered = st.sidebar.number_input(
                f"Weight ({unit})", min_value=0.0, max_value=500.0, value=float(shown), step=0.1,
                help="Leave at 0 to show adult doses"
            )
            prefs.set_weight(weight_to_kg(entered, unit) if entered > 0 else None)

            groups = [None] + list(AGE_GROUPS)
            age_group = st.sidebar.selectbox(
                "Age Group",
                groups,
                index=groups.index(prefs.pediatric.age_group),
                format_func=lambda g: "Select age group" if g is None else AGE_GROUPS[g]
            )
            prefs.set_age_group(age_group)

            if not prefs.pediatric.ready or prefs.pediatric.age_group is None:
                st.sidebar.warning(
                    "Enter weight and age group to see pediatric doses. Adult doses shown as fallback."
                )

        return page, prefs

    @staticmethod
    def load_url_filters(prefs):
        """Seed the session filters from the URL once, so shared links open the same view."""
        if st.session_state.get("filters_from_url"):
            return
        prefs.load_query_params(st.query_params.to_dict())
        st.session_state["filters_from_url"] = True

    @staticmethod
    def publish_filters(prefs):
        """Mirror the non-default filters into the URL."""
        params = to_query_params(prefs.filters)
        if st.query_params.to_dict() != params:
            st.query_params.clear()
            st.query_params.update(params)

    @staticmethod
    def display_regimen(scenario, regimen, catalog, prefs, selected=False, key_prefix=""):
        """Card for one regimen with a button per resolvable antibiotic."""
        with st.container(border=True):
            title = scenario_title(scenario)
            st.markdown(f"#### {'👉 ' if selected else ''}{title}")

            st.markdown("**Regimen:**")
            components = resolve_regimen(regimen.regimen, catalog)
            columns = st.columns(max(len(components), 1))
            for idx, (token, record) in enumerate(components):
                with columns[idx]:
                    if record is None:
                        logger.warning("No antibiotic record matched '%s' in regimen '%s'", token, regimen.regimen)
                        st.markdown(f"`{token}`")
                    elif st.button(f"💊 {token}", key=f"{key_prefix}{scenario}_{idx}"):
                        st.session_state["selected_antibiotic"] = record.id

            st.markdown(f"**Route:** {regimen.route}")
            st.markdown(f"**Dosing:** {format_dosage(regimen.dosing, prefs.units.system)}")
            if regimen.duration:
                st.markdown(f"**Duration:** {regimen.duration}")
            if regimen.notes:
                st.markdown("**Notes:**")
                for note in regimen.notes:
                    st.markdown(f"- {format_dosage(note, prefs.units.system)}")
            if regimen.monitoring:
                st.markdown("**Monitoring:**")
                for item in regimen.monitoring:
                    st.markdown(f"- {item}")

    @staticmethod
    def display_antibiotic(antibiotic, prefs, key_suffix=""):
        """Detail panel for one antibiotic."""
        tier = antibiotic.stewardship_tier.value if antibiotic.stewardship_tier else None
        header = f"### {antibiotic.name}"
        if tier:
            header += f"  {TIER_BADGES[tier]}"
        st.markdown(header)
        st.markdown(f"**Class:** {antibiotic.drug_class}")

        if antibiotic.spectrum:
            col1, col2 = st.columns(2)
            with col1:
                st.markdown("**✅ Covers**")
                st.dataframe(pd.DataFrame({"Organism": antibiotic.spectrum.plus}), hide_index=True)
            with col2:
                st.markdown("**❌ Does Not Cover**")
                st.dataframe(pd.DataFrame({"Organism": antibiotic.spectrum.minus}), hide_index=True)

        if prefs.pediatric.enabled:
            UIComponents.display_pediatric_dosing(antibiotic, prefs, key_suffix)
        if not prefs.pediatric.ready:
            UIComponents.display_adult_dosing(antibiotic, prefs)

        col1, col2 = st.columns(2)
        with col1:
            st.markdown("**Renal Adjustment**")
            renal = antibiotic.renal_adjustment
            st.write(renal.note if renal else "No adjustment needed")
            if renal and renal.table:
                st.dataframe(
                    pd.DataFrame([row.model_dump() for row in renal.table]).rename(
                        columns={"crcl": "CrCl", "dose": "Dose", "frequency": "Frequency"}
                    ),
                    hide_index=True
                )
        with col2:
            st.markdown("**Hepatic Adjustment**")
            st.write(antibiotic.hepatic_adjustment or "No adjustment needed")

        col1, col2 = st.columns(2)
        with col1:
            if antibiotic.adverse_effects:
                st.markdown("**Adverse Effects**")
                for effect in antibiotic.adverse_effects:
                    st.markdown(f"- {effect}")
        with col2:
            if antibiotic.monitoring:
                st.markdown("**Monitoring**")
                for item in antibiotic.monitoring:
                    st.markdown(f"- {item}")

        col1, col2 = st.columns(2)
        col1.markdown(f"**Pregnancy Category:** {antibiotic.pregnancy or 'Not specified'}")
        col2.markdown(f"**Cost:** {antibiotic.cost or 'Not specified'}")

        if antibiotic.references:
            with st.expander("📚 References"):
                for ref in antibiotic.references:
                    st.markdown(f"- {ref}")

    @staticmethod
    def display_adult_dosing(antibiotic, prefs):
        st.markdown("**Adult Dosing**")
        if not antibiotic.adult:
            st.info("No adult dosing information available.")
            return
        rows = []
        for indication, dosing in antibiotic.adult.items():
            rows.append({
                "Indication": indication,
                "Dose": format_dosage(dosing.dose, prefs.units.system),
                "Route": dosing.route,
                "Frequency": dosing.frequency,
                "Duration": dosing.duration or "",
                "Max Dose": dosing.max_dose or "",
            })
        st.dataframe(pd.DataFrame(rows), hide_index=True, use_container_width=True)
        for indication, dosing in antibiotic.adult.items():
            for note in dosing.notes:
                st.caption(f"{indication}: {note}")

    @staticmethod
    def display_pediatric_dosing(antibiotic, prefs, key_suffix=""):
        st.markdown("**Pediatric Dosing**")
        if not antibiotic.paeds:
            st.warning("No pediatric dosing information available. Please consult pediatric specialist.")
            return

        context = prefs.pediatric
        calculator = PediatricDoseCalculator(PEDIATRIC_ROUNDING_STRATEGY)

        for indication, rule in antibiotic.paeds.items():
            st.markdown(f"**{indication}:** {rule.dose_per_kg:g} mg/kg/day {rule.frequency}"
                        + (f" (max {rule.max_daily:g} mg/day)" if rule.max_daily else ""))

            warnings, errors = ValidationUtils.validate_pediatric_inputs(context.weight_kg, context.age_group, rule)
            if not ValidationUtils.display_validation_results(warnings, errors):
                continue

            # Only the same indication's adult dose is comparable
            adult_dose = antibiotic.adult.get(indication)
            result = calculator.calculate(context.weight_kg, context.age_group, rule, adult_dose)
            UIComponents.display_pediatric_result(indication, result, context.weight_kg, prefs.units.system)
            DoseVisualizer.display_dose_chart(
                calculator, rule, context.age_group, context.weight_kg,
                key_suffix=f"{key_suffix}_{antibiotic.id}_{indication}"
            )

    @staticmethod
    def display_pediatric_result(indication, result, weight_kg, unit_system="metric"):
        """Display a pediatric calculation with all of its warnings."""
        with st.container(border=True):
            st.markdown(f"**Calculated Dose for {indication}** ({format_weight(weight_kg, unit_system)})")
            ValidationUtils.display_dose_warnings(result)

            times = f"{result.doses_per_day:g}x daily" if result.doses_per_day > 1 else "daily"
            col1, col2, col3 = st.columns(3)
            col1.metric("Dose (mg)", f"{result.rounded_dose:g}", times)
            col2.metric("Total Daily (mg)", f"{result.total_daily_dose:.0f}")
            col3.metric("mg/kg/day", f"{result.total_daily_dose / weight_kg:.1f}")

            if result.is_weight_in_range and result.doses_per_day > 0:
                st.markdown(
                    f"**Administration:** Give {result.rounded_dose:g} mg every {24 / result.doses_per_day:g} hours"
                )
            for note in result.notes:
                st.caption(note)
            with st.expander("Copy dose summary"):
                st.code(format_result(result), language=None)

    @staticmethod
    def display_guidance(title, guidance):
        """Render alternatives, recommendations and notes under one heading."""
        with st.expander(f"ℹ️ {title}"):
            labels = {
                "alternatives": "Alternative Options",
                "recommendations": "Recommendations",
                "notes": "Additional Notes",
            }
            shown = False
            for section, label in labels.items():
                items = guidance.get(section) or []
                if items:
                    shown = True
                    st.markdown(f"**{label}**")
                    for item in items:
                        st.markdown(f"- {item}")
            if not shown:
                st.write("No specific guidance available.")

    @staticmethod
    def generate_report(condition, line_label, setting, regimens, prefs):
        """Plain-text summary of the regimens currently on screen."""
        current_time = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        report = f"# {condition.name} - Treatment Summary ({current_time})\n\n"
        report += f"- **Treatment Line**: {line_label}\n"
        report += f"- **Setting**: {setting}\n"
        report += f"- **Population**: {'Pediatric' if prefs.pediatric.enabled else 'Adult'}\n"
        report += f"- **Units**: {prefs.units.system}\n\n"

        for scenario, regimen in regimens.items():
            report += f"## {scenario_title(scenario)}\n"
            report += f"- Regimen: {regimen.regimen}\n"
            report += f"- Route: {regimen.route}\n"
            report += f"- Dosing: {format_dosage(regimen.dosing, prefs.units.system)}\n"
            if regimen.duration:
                report += f"- Duration: {regimen.duration}\n"
            for note in regimen.notes:
                report += f"- Note: {note}\n"
            report += "\n"

        report += "---\nThis summary is provided for reference only. Always use clinical judgment."
        return report

    @staticmethod
    def create_download_button(report_content, condition_id):
        timestamp = datetime.now().strftime('%Y%m%d_%H%M')
        st.download_button(
            label="📄 Download Summary",
            data=report_content,
            file_name=f"{condition_id}_summary_{timestamp}.txt",
            mime="text/plain",
            help="Download a printable version of the regimens shown"
        )
