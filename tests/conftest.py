"""Shared fixtures for the calculator and relay tests."""

import pytest

from roi_calculator.email_relay import RelayConfig
from roi_calculator.engine import TrafficUnit, WorkloadInput


@pytest.fixture
def make_workload():
    """Factory for WorkloadInput built from catalog names.

    Defaults to the A100 / Cloud (On-demand) / 2048 MB / 100 rps scenario.
    """

    def _make(gpu="A100", deployment="Cloud (On-demand)", activation_mb=2048,
              traffic=100, unit=TrafficUnit.REQUESTS_PER_SECOND):
        return WorkloadInput.from_names(
            gpu=gpu,
            deployment=deployment,
            peak_activation_memory_mb=activation_mb,
            traffic_value=traffic,
            traffic_unit=unit,
        )

    return _make


@pytest.fixture
def relay_config():
    """A fully populated relay configuration."""
    return RelayConfig(
        service_id="service_test",
        template_id="template_test",
        public_key="public_test",
        private_key="private_test",
    )


@pytest.fixture
def contact_payload():
    return {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "company": "Analytical Engines",
        "models": "Llama 3",
        "spend": "$5k - $20k",
    }
