# antibiotic_module.py
import streamlit as st

from data_loader import list_antibiotics
from search import search
from ui_components import UIComponents


class AntibioticModule:
    @staticmethod
    def lookup(prefs):
        st.title("💊 Antibiotic Lookup")

        antibiotics = list_antibiotics()
        if not antibiotics:
            st.error("Antibiotic data unavailable.")
            return

        tiers = ["All"] + sorted({a.stewardship_tier.value for a in antibiotics if a.stewardship_tier})
        tier = st.radio("Stewardship Tier", tiers, horizontal=True)
        if tier != "All":
            antibiotics = [a for a in antibiotics if a.stewardship_tier and a.stewardship_tier.value == tier]

        by_id = {a.id: a for a in antibiotics}
        if not by_id:
            st.info("No antibiotics in this tier.")
            return

        preselected = st.session_state.get("selected_antibiotic")
        ids = list(by_id)
        antibiotic_id = st.selectbox(
            "Antibiotic",
            ids,
            index=ids.index(preselected) if preselected in ids else 0,
            format_func=lambda i: f"{by_id[i].name} ({by_id[i].drug_class})"
        )
        UIComponents.display_antibiotic(by_id[antibiotic_id], prefs, key_suffix="lookup")

    @staticmethod
    def search_page():
        st.title("🔎 Search")
        term = st.text_input("Search conditions and antibiotics", placeholder="e.g., Zosyn, pneumonia, MRSA")
        if not term:
            return

        results = search(term)
        if not results:
            st.info(f"No results for '{term}'.")
            return

        for result in results:
            icon = "💊" if result.type == "antibiotic" else "📖"
            location = f" · {result.category}" if result.category else ""
            st.markdown(f"{icon} **{result.name}**{location}")
            if result.description:
                st.caption(result.description)
            if result.type == "antibiotic" and st.button("View details", key=f"search_{result.id}"):
                st.session_state["selected_antibiotic"] = result.id
                st.info("Open Antibiotic Lookup to see the full record.")
