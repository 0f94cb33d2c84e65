"""
Configuration
=============
Settings are read from the process environment first (serverless / uvicorn
deployments) and fall back to Streamlit secrets when running inside the app.
"""

import os
from typing import Optional

COMPANY_NAME = "NeuroLattice"
CONTACT_URL = "https://www.neuro-lattice.com/contact"

EMAILJS_SEND_URL = "https://api.emailjs.com/api/v1.0/email/send"
EMAILJS_TIMEOUT_SECONDS = 10

# Environment variable names for the relay credentials
SERVICE_ID_ENV = "VITE_EMAILJS_SERVICE_ID"
TEMPLATE_ID_ENV = "VITE_EMAILJS_TEMPLATE_ID"
PUBLIC_KEY_ENV = "VITE_EMAILJS_PUBLIC_KEY"
PRIVATE_KEY_ENV = "EMAILJS_PRIVATE_KEY"

LOG_LEVEL_ENV = "ROI_CALCULATOR_LOG_LEVEL"


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    """Return a setting from the environment, then st.secrets, then default."""
    value = os.getenv(name)
    if value:
        return value

    import streamlit as st
    from streamlit.errors import StreamlitAPIException

    try:
        value = st.secrets.get(name)
    except (FileNotFoundError, StreamlitAPIException):
        # No secrets.toml outside of a configured Streamlit deployment
        value = None

    return value or default
