import streamlit as st

import roi_calculator.streamlit_app as calc

# Page Config
st.set_page_config(page_title="NeuroLattice Savings Calculator", layout="wide")

if __name__ == "__main__":
    calc.run()
