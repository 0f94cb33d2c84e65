"""
Contact Page
============
Inquiry form that hands submissions to the email relay.
"""

import streamlit as st

from .email_relay import handle_send_email

SPEND_OPTIONS = ["Under $5k", "$5k - $20k", "$20k - $100k", "$100k+"]
DEFAULT_SPEND = "Under $5k"
CONTACT_EMAIL = "satyam@neuro-lattice.com"


def is_valid(name: str, email: str, company: str) -> bool:
    """Name, email and company are required."""
    return all(value.strip() for value in (name or '', email or '', company or ''))


def failure_message(body: dict) -> str:
    """Text shown when the relay refuses or fails a send."""
    message = f"Failed to send: {body.get('error') or 'Server rejected request'}"
    if body.get('debug'):
        message += f"\n\nDEBUG INFO:\n{body['debug']}"
    return message


def show_contact():
    """Render the contact form."""
    st.title("Talk to Us")
    st.markdown(
        "Ready to reduce your infra spend? Tell us about your models and we'll show "
        "you how much you can save."
    )
    st.markdown(f"**Email:** {CONTACT_EMAIL}")

    with st.form("contact_form", clear_on_submit=False):
        name = st.text_input("Name *", placeholder="Your Name")
        email = st.text_input("Email *", placeholder="name@work-email.com")
        company = st.text_input("Company *", placeholder="Your Company")
        models = st.text_input("What models do you run?",
                               placeholder="e.g. Llama 3, ResNet-50, SDXL...")
        spend = st.selectbox("Monthly inference spend", SPEND_OPTIONS,
                             index=SPEND_OPTIONS.index(DEFAULT_SPEND))
        submitted = st.form_submit_button("Send Message", type="primary")

    if not submitted:
        return

    if not is_valid(name, email, company):
        st.warning("Please fill in your name, email and company.")
        return

    with st.spinner("Sending..."):
        status_code, body = handle_send_email('POST', {
            'name': name,
            'email': email,
            'company': company,
            'models': models,
            'spend': spend,
        })

    if status_code == 200:
        st.success("Message sent successfully!")
    else:
        st.error(failure_message(body))
