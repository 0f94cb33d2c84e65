"""
Contact Form Email Relay
========================
Forwards contact-form submissions to the EmailJS REST API using server-held
credentials, so the browser never sees the private key.

handle_send_email() is the framework-free handler: it always returns a
(status_code, json_body) pair. relay_api.py mounts it on FastAPI and the
Streamlit contact page calls it in-process.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

import requests

from .config import (
    EMAILJS_SEND_URL, EMAILJS_TIMEOUT_SECONDS,
    PRIVATE_KEY_ENV, PUBLIC_KEY_ENV, SERVICE_ID_ENV, TEMPLATE_ID_ENV,
    get_setting,
)
from .logging_config import get_logger

logger = get_logger(__name__)

MISSING_CONFIG_MESSAGE = "Missing backend configuration. Need EMAILJS_PRIVATE_KEY."


class RelayErrorKind(Enum):
    METHOD_NOT_ALLOWED = "method_not_allowed"
    MISSING_CONFIGURATION = "missing_configuration"
    UPSTREAM_REJECTION = "upstream_rejection"
    TRANSPORT_FAILURE = "transport_failure"


class RelayError(Exception):
    """A failed send, carrying the HTTP status and message for the caller."""

    def __init__(self, kind: RelayErrorKind, status_code: int, message: str,
                 debug: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
        self.message = message
        self.debug = debug

    def to_response(self) -> Tuple[int, Dict]:
        body = {'error': self.message}
        if self.debug:
            body['debug'] = self.debug
        return self.status_code, body


# =============================================================================
# DATA
# =============================================================================

@dataclass
class ContactSubmission:
    """Fields posted by the contact form. Only name/email/company are required client-side."""
    name: str = ''
    email: str = ''
    company: str = ''
    models: str = ''
    spend: str = ''

    @classmethod
    def from_dict(cls, payload: Optional[Dict]) -> 'ContactSubmission':
        if not isinstance(payload, dict):
            payload = {}

        def _text(key: str) -> str:
            value = payload.get(key)
            return '' if value is None else str(value)

        return cls(
            name=_text('name'),
            email=_text('email'),
            company=_text('company'),
            models=_text('models'),
            spend=_text('spend'),
        )

    def template_params(self) -> Dict[str, str]:
        """Template variables for the EmailJS inquiry template."""
        return {
            'title': f"New Inquiry from {self.company or 'Website'}",
            'name': self.name,
            'email': self.email,
            'message': (
                f"\nUser Email: {self.email}"
                f"\nCompany: {self.company or 'N/A'}"
                f"\nModels: {self.models or 'Not specified'}"
                f"\nSpend: {self.spend}"
                "\n    "
            ),
        }


@dataclass
class RelayConfig:
    """EmailJS account identifiers and keys."""
    service_id: Optional[str] = None
    template_id: Optional[str] = None
    public_key: Optional[str] = None
    private_key: Optional[str] = None

    _ENV_NAMES = {
        'service_id': SERVICE_ID_ENV,
        'template_id': TEMPLATE_ID_ENV,
        'public_key': PUBLIC_KEY_ENV,
        'private_key': PRIVATE_KEY_ENV,
    }

    @classmethod
    def load(cls) -> 'RelayConfig':
        return cls(**{attr: get_setting(env) for attr, env in cls._ENV_NAMES.items()})

    def missing(self) -> List[str]:
        """Environment names of the values that are not set."""
        return [env for attr, env in self._ENV_NAMES.items() if not getattr(self, attr)]

    def require(self):
        missing = self.missing()
        if missing:
            raise RelayError(
                RelayErrorKind.MISSING_CONFIGURATION, 500, MISSING_CONFIG_MESSAGE,
                debug=f"Missing: {', '.join(missing)}",
            )


# =============================================================================
# SENDING
# =============================================================================

def send_contact_email(submission: ContactSubmission, config: RelayConfig,
                       session: Optional[requests.Session] = None) -> None:
    """
    POST one submission to EmailJS.

    Raises:
        RelayError: configuration missing, EmailJS rejected the request, or the
            request never completed. No retries.
    """
    config.require()

    body = {
        'service_id': config.service_id,
        'template_id': config.template_id,
        'user_id': config.public_key,
        'accessToken': config.private_key,
        'template_params': submission.template_params(),
    }

    post = session.post if session is not None else requests.post
    try:
        response = post(
            EMAILJS_SEND_URL,
            json=body,
            headers={'Content-Type': 'application/json'},
            timeout=EMAILJS_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        logger.error("EmailJS request failed: %s", e)
        raise RelayError(
            RelayErrorKind.TRANSPORT_FAILURE, 500, f"Internal Server Error: {e}"
        ) from e

    if not response.ok:
        logger.warning("EmailJS rejected inquiry (HTTP %s)", response.status_code)
        raise RelayError(
            RelayErrorKind.UPSTREAM_REJECTION, response.status_code,
            f"EmailJS Error: {response.text}",
        )

    logger.info("Relayed inquiry from company=%r", submission.company or 'Website')


def handle_send_email(method: str, payload: Optional[Dict],
                      config: Optional[RelayConfig] = None,
                      session: Optional[requests.Session] = None) -> Tuple[int, Dict]:
    """Serve one relay request and return (status_code, json_body)."""
    if method.upper() != 'POST':
        return RelayError(
            RelayErrorKind.METHOD_NOT_ALLOWED, 405, "Method not allowed"
        ).to_response()

    config = config or RelayConfig.load()
    submission = ContactSubmission.from_dict(payload)
    try:
        send_contact_email(submission, config, session=session)
    except RelayError as e:
        if e.kind == RelayErrorKind.MISSING_CONFIGURATION:
            logger.error("Relay not configured: %s", e.debug)
        return e.to_response()

    return 200, {'success': True}
