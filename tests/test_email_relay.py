"""
Email relay tests
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from roi_calculator import email_relay
from roi_calculator.config import EMAILJS_SEND_URL, EMAILJS_TIMEOUT_SECONDS
from roi_calculator.email_relay import (
    ContactSubmission, RelayConfig, RelayError, RelayErrorKind,
    handle_send_email, send_contact_email,
)


def _response(ok=True, status_code=200, text="OK"):
    response = MagicMock()
    response.ok = ok
    response.status_code = status_code
    response.text = text
    return response


class TestContactSubmission:
    """Template parameter construction."""

    def test_template_params(self, contact_payload):
        params = ContactSubmission.from_dict(contact_payload).template_params()

        assert params['title'] == "New Inquiry from Analytical Engines"
        assert params['name'] == "Ada Lovelace"
        assert params['email'] == "ada@example.com"
        assert params['message'] == (
            "\nUser Email: ada@example.com"
            "\nCompany: Analytical Engines"
            "\nModels: Llama 3"
            "\nSpend: $5k - $20k"
            "\n    "
        )

    def test_blank_optional_fields(self):
        params = ContactSubmission.from_dict({'name': 'A', 'email': 'a@b.c'}).template_params()

        assert params['title'] == "New Inquiry from Website"
        assert "Company: N/A" in params['message']
        assert "Models: Not specified" in params['message']

    def test_non_dict_payload(self):
        assert ContactSubmission.from_dict(None) == ContactSubmission()
        assert ContactSubmission.from_dict(["x"]) == ContactSubmission()


class TestRelayConfig:
    """Credential loading and validation."""

    def test_load_from_environment(self, monkeypatch):
        monkeypatch.setenv("VITE_EMAILJS_SERVICE_ID", "svc")
        monkeypatch.setenv("VITE_EMAILJS_TEMPLATE_ID", "tpl")
        monkeypatch.setenv("VITE_EMAILJS_PUBLIC_KEY", "pub")
        monkeypatch.setenv("EMAILJS_PRIVATE_KEY", "priv")

        config = RelayConfig.load()

        assert config == RelayConfig("svc", "tpl", "pub", "priv")
        assert config.missing() == []

    def test_missing_names(self):
        config = RelayConfig(service_id="svc", public_key="pub")

        assert config.missing() == ["VITE_EMAILJS_TEMPLATE_ID", "EMAILJS_PRIVATE_KEY"]

    def test_require_raises(self):
        with pytest.raises(RelayError) as exc_info:
            RelayConfig().require()

        assert exc_info.value.kind == RelayErrorKind.MISSING_CONFIGURATION
        assert exc_info.value.status_code == 500
        assert "EMAILJS_PRIVATE_KEY" in exc_info.value.debug


class TestSendContactEmail:
    """Upstream call."""

    def test_posts_expected_body(self, relay_config, contact_payload):
        submission = ContactSubmission.from_dict(contact_payload)
        with patch.object(email_relay.requests, 'post', return_value=_response()) as post:
            send_contact_email(submission, relay_config)

        post.assert_called_once()
        args, kwargs = post.call_args
        assert args[0] == EMAILJS_SEND_URL
        assert kwargs['timeout'] == EMAILJS_TIMEOUT_SECONDS
        assert kwargs['json'] == {
            'service_id': "service_test",
            'template_id': "template_test",
            'user_id': "public_test",
            'accessToken': "private_test",
            'template_params': submission.template_params(),
        }

    def test_uses_session_when_given(self, relay_config):
        session = MagicMock()
        session.post.return_value = _response()

        send_contact_email(ContactSubmission(name="A"), relay_config, session=session)

        session.post.assert_called_once()


class TestHandleSendEmail:
    """Handler responses for every outcome."""

    def test_success(self, relay_config, contact_payload):
        with patch.object(email_relay.requests, 'post', return_value=_response()):
            assert handle_send_email('POST', contact_payload, config=relay_config) == (
                200, {'success': True})

    def test_method_not_allowed(self, relay_config):
        with patch.object(email_relay.requests, 'post') as post:
            status, body = handle_send_email('GET', None, config=relay_config)

        assert status == 405
        assert body == {'error': "Method not allowed"}
        post.assert_not_called()

    def test_missing_configuration(self, contact_payload):
        with patch.object(email_relay.requests, 'post') as post:
            status, body = handle_send_email(
                'POST', contact_payload, config=RelayConfig(service_id="svc"))

        assert status == 500
        assert body['error'] == "Missing backend configuration. Need EMAILJS_PRIVATE_KEY."
        assert body['debug'] == (
            "Missing: VITE_EMAILJS_TEMPLATE_ID, VITE_EMAILJS_PUBLIC_KEY, EMAILJS_PRIVATE_KEY"
        )
        post.assert_not_called()

    def test_missing_configuration_from_settings(self, contact_payload, monkeypatch):
        monkeypatch.setattr(email_relay, 'get_setting', lambda name: None)

        status, body = handle_send_email('POST', contact_payload)

        assert status == 500
        assert "VITE_EMAILJS_SERVICE_ID" in body['debug']

    def test_upstream_rejection(self, relay_config, contact_payload):
        rejected = _response(ok=False, status_code=400, text="The template ID is invalid")
        with patch.object(email_relay.requests, 'post', return_value=rejected):
            status, body = handle_send_email('POST', contact_payload, config=relay_config)

        assert status == 400
        assert body == {'error': "EmailJS Error: The template ID is invalid"}

    def test_transport_failure(self, relay_config, contact_payload):
        failure = requests.ConnectionError("connection refused")
        with patch.object(email_relay.requests, 'post', side_effect=failure):
            status, body = handle_send_email('POST', contact_payload, config=relay_config)

        assert status == 500
        assert body == {'error': "Internal Server Error: connection refused"}
