# condition_module.py
import logging

import streamlit as st

from clinical_logic import GuidelineAdvisor
from config import ALLERGIES, POPULATIONS, SETTINGS
from data_loader import (
    DataUnavailable,
    list_categories,
    list_category_conditions,
    load_antibiotic,
    load_antibiotics_for_condition,
    load_condition,
)
from regimen_filter import (
    available_treatment_lines,
    cohort_regimens,
    default_setting,
    locate_treatment,
    select_regimens,
)
from ui_components import UIComponents

logger = logging.getLogger(__name__)


class ConditionModule:
    @staticmethod
    def show(prefs):
        st.title("📖 Condition Guidelines")

        categories = list_categories()
        if not categories:
            st.error("Guideline data unavailable. No categories found.")
            return

        col1, col2 = st.columns(2)
        with col1:
            category = st.selectbox(
                "Category",
                categories,
                format_func=lambda c: c.replace("-", " ").title()
            )
        conditions = list_category_conditions(category)
        if not conditions:
            st.warning("No conditions available in this category.")
            return
        with col2:
            names = {c.id: c.name for c in conditions}
            condition_id = st.selectbox("Condition", list(names), format_func=lambda c: names[c])

        try:
            condition = load_condition(category, condition_id)
        except DataUnavailable as e:
            logger.error("Condition %s/%s unavailable: %s", category, condition_id, e)
            st.error("Data unavailable for this condition.")
            return

        catalog = load_antibiotics_for_condition(condition)
        ConditionModule._condition_page(condition, catalog, prefs)

    @staticmethod
    def _condition_page(condition, catalog, prefs):
        st.header(condition.name)
        if condition.description:
            st.markdown(condition.description)
        if condition.empiric_logic:
            st.info(f"**Empiric Therapy Logic:** {condition.empiric_logic}")
        if condition.diagnostic_pearls:
            with st.expander("💡 Diagnostic Pearls"):
                for pearl in condition.diagnostic_pearls:
                    st.markdown(f"- {pearl}")

        state_key = f"condition_{condition.id}"
        state = st.session_state.setdefault(state_key, {
            "line": "first_line",
            "selected": None,
            "path": ["initial"],
        })

        if condition.decision_tree:
            ConditionModule._decision_tree(condition, state, prefs)

        st.markdown("### Treatment Options")
        lines = available_treatment_lines(condition)
        line_ids = [line_id for line_id, _ in lines]
        labels = dict(lines)
        state["line"] = st.radio(
            "Treatment Line",
            line_ids,
            index=line_ids.index(state["line"]) if state["line"] in line_ids else 0,
            format_func=lambda l: labels[l],
            horizontal=True
        )
        active = ConditionModule._filter_controls(condition, prefs)

        advisor = GuidelineAdvisor(condition)
        for title, guidance in advisor.active_guidance(active["allergy"], active["population"]):
            UIComponents.display_guidance(title, guidance)

        line = condition.treatment_lines.get(state["line"])
        pediatric = prefs.pediatric.enabled
        regimens = cohort_regimens(line, pediatric)
        if not regimens:
            st.warning(
                f"No {'pediatric' if pediatric else 'adult'} treatments available for this condition. "
                "Please consult with a specialist."
            )
            return

        filtered = select_regimens(regimens, active["setting"])
        if not filtered:
            st.warning(
                f"No regimens for {labels[state['line']]} in the "
                f"{SETTINGS.get(active['setting'], active['setting'])} setting."
            )
        for scenario, regimen in filtered.items():
            UIComponents.display_regimen(
                scenario, regimen, catalog, prefs,
                selected=scenario == state["selected"],
                key_prefix=f"{condition.id}_{state['line']}_"
            )

        ConditionModule._selected_antibiotic(prefs)

        if filtered:
            report = UIComponents.generate_report(
                condition, labels[state["line"]], SETTINGS.get(active["setting"], active["setting"]), filtered, prefs
            )
            UIComponents.create_download_button(report, condition.id)

        ConditionModule._step_down(advisor, filtered)

        sections = advisor.instruction_sections()
        if sections:
            st.markdown("### Patient Instructions")
            for title, items in sections:
                with st.expander(title):
                    for item in items:
                        st.markdown(f"- {item}")

        if condition.references:
            with st.expander("📚 References"):
                for ref in condition.references:
                    st.markdown(f"- {ref}")

    @staticmethod
    def _filter_controls(condition, prefs):
        """
        Setting, allergy and population pickers backed by the session filters.

        Only the values a condition lists are offered. A filter that does not
        apply here is shown as the first option but left unchanged in the
        session, so it still applies on the next condition that lists it.

        Returns:
        - Dictionary of the filter values in effect on this page
        """
        applicable = condition.filters.applicable
        filters = prefs.filters
        choices = {
            "setting": ("Setting", list(applicable.setting) or [default_setting(condition)], SETTINGS),
            "allergy": ("Allergy", ConditionModule._options(applicable.allergies, ALLERGIES), ALLERGIES),
            "population": ("Population", ConditionModule._options(applicable.populations, POPULATIONS), POPULATIONS),
        }

        active = {}
        changes = {}
        columns = st.columns(len(choices))
        for column, (name, (label, options, names)) in zip(columns, choices.items()):
            current = getattr(filters, name)
            index = options.index(current) if current in options else 0
            with column:
                chosen = st.selectbox(label, options, index=index, format_func=lambda v, names=names: names.get(v, v))
            active[name] = chosen
            if chosen != options[index]:
                changes[name] = chosen

        if changes:
            prefs.set_filter(**changes)

        count = prefs.filters.active_count
        if count:
            col1, col2 = st.columns([3, 1])
            col1.caption(f"{count} filter{'s' if count > 1 else ''} active")
            if col2.button("Reset filters", key=f"reset_filters_{condition.id}"):
                prefs.reset_filters()
                UIComponents.publish_filters(prefs)
                st.rerun()

        UIComponents.publish_filters(prefs)
        return active

    @staticmethod
    def _options(applicable, table):
        # "none" always leads
        if not applicable:
            return list(table)
        return ["none"] + [key for key in table if key != "none" and key in applicable]

    @staticmethod
    def _decision_tree(condition, state, prefs):
        tree = condition.decision_tree
        node_id = state["path"][-1]
        node = tree.get(node_id)
        if node is None:
            logger.warning("Decision tree for %s has no node '%s'", condition.id, node_id)
            state["path"] = ["initial"]
            return

        with st.container(border=True):
            st.markdown(f"**🧭 {node.question}**")
            for idx, option in enumerate(node.options):
                if st.button(option.text, key=f"tree_{condition.id}_{node_id}_{idx}"):
                    if option.treatment:
                        state["line"], setting = locate_treatment(condition, option.treatment)
                        prefs.set_filter(setting=setting)
                        UIComponents.publish_filters(prefs)
                        state["selected"] = option.treatment
                    elif option.next:
                        state["path"] = state["path"] + [option.next]
                    st.rerun()
                for criterion in option.criteria:
                    st.caption(f"• {criterion}")
            if len(state["path"]) > 1 and st.button("← Back to previous question", key=f"tree_back_{condition.id}"):
                state["path"] = state["path"][:-1]
                st.rerun()

    @staticmethod
    def _selected_antibiotic(prefs):
        antibiotic_id = st.session_state.get("selected_antibiotic")
        if not antibiotic_id:
            return
        try:
            antibiotic = load_antibiotic(antibiotic_id)
        except DataUnavailable as e:
            logger.warning("Antibiotic %s unavailable: %s", antibiotic_id, e)
            st.error(f"Data unavailable for {antibiotic_id}.")
            return
        with st.container(border=True):
            UIComponents.display_antibiotic(antibiotic, prefs, key_suffix="condition")
            if st.button("Close", key="close_antibiotic"):
                st.session_state["selected_antibiotic"] = None
                st.rerun()

    @staticmethod
    def _step_down(advisor, regimens):
        iv_regimen = next((r for r in regimens.values() if r.route in ("IV", "IM")), None)
        if iv_regimen is None:
            return
        guidance = advisor.step_down_guidance(iv_regimen)
        with st.expander("⬇️ Step-Down Therapy Guidance"):
            st.markdown("**Clinical Stability Criteria**")
            for category, criteria in guidance["clinical_stability"].items():
                st.markdown(f"*{category}*")
                for criterion in criteria:
                    st.markdown(f"- {criterion}")
            st.markdown("**IV to Oral Conversion Criteria**")
            for criterion in guidance["iv_to_oral"]:
                st.markdown(f"- {criterion}")
            for label, text in guidance["options"].items():
                st.markdown(f"**{label}:** {text}")
            if "duration_note" in guidance:
                st.caption(guidance["duration_note"])
