"""
NeuroLattice Savings Site
=========================
Streamlit application with the savings calculator and the contact form.
"""

import streamlit as st

from .calculator_page import show_calculator
from .contact_page import show_contact
from .logging_config import configure_logging

PAGES = {
    "📈 Savings Calculator": show_calculator,
    "✉️ Contact": show_contact,
}


def run():
    # st.set_page_config() is handled by the main app
    configure_logging()

    st.sidebar.title("⚡ NeuroLattice")
    page = st.sidebar.radio("Navigation", list(PAGES.keys()), key="page")
    st.sidebar.markdown("---")

    PAGES[page]()
