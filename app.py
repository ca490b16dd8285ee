# app.py
import logging

import streamlit as st

from antibiotic_module import AntibioticModule
from condition_module import ConditionModule
from config import LOG_FORMAT, LOG_LEVEL
from ui_components import UIComponents
from unit_conversion import format_weight

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

# Set page configuration
st.set_page_config(
    page_title="Antibiotic Guidelines",
    page_icon="💊",
    layout="wide"
)

st.markdown("""
<style>
    .main .block-container {
        padding-top: 2rem;
    }
    h1, h2, h3 {
        margin-top: 0.8rem;
        margin-bottom: 0.8rem;
    }
    .stAlert {
        margin-top: 0.5rem;
        margin-bottom: 0.5rem;
    }
</style>
""", unsafe_allow_html=True)


def main():
    """Main application entry point"""
    page, prefs = UIComponents.create_sidebar()

    st.markdown("A reference for empiric antibiotic treatment guidelines")

    context = prefs.pediatric
    if context.enabled:
        weight = format_weight(context.weight_kg, prefs.units.system) if context.weight_kg else "not entered"
        st.info(f"**Pediatric Mode** | **Weight**: {weight} | **Age Group**: {context.age_group or 'not selected'}")

    st.markdown("---")

    if page == "Condition Guidelines":
        ConditionModule.show(prefs)
    elif page == "Antibiotic Lookup":
        AntibioticModule.lookup(prefs)
    elif page == "Search":
        AntibioticModule.search_page()

    st.markdown("---")
    st.markdown("""
    <div style="text-align: center; color: #666;">
        <p><small>This tool is a reference display for educational purposes only.<br>
        It is not a substitute for professional medical judgment or local guidelines.</small></p>
    </div>
    """, unsafe_allow_html=True)


if __name__ == "__main__":
    main()
