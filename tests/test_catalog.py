"""
Hardware catalog tests
"""

import pytest

from roi_calculator.catalog import (
    DEPLOYMENT_MODES, GPU_CATALOG, DeploymentMode, HardwareProfile,
    deployment_names, get_deployment, get_gpu, gpu_names,
)


class TestCatalog:
    """Catalog contents."""

    def test_gpu_order(self):
        assert gpu_names() == ["T4", "L4", "A10", "A100", "H100"]

    def test_a100_profile(self):
        a100 = get_gpu("A100")

        assert a100.hourly_cost_usd == 3.50
        assert a100.vram_gb == 80
        assert a100.memory_bandwidth_gb_s == 2000

    def test_all_profiles_positive(self):
        for profile in GPU_CATALOG.values():
            assert profile.hourly_cost_usd > 0
            assert profile.memory_bandwidth_gb_s > 0

    def test_deployment_multipliers(self):
        assert deployment_names() == ["Cloud (On-demand)", "Cloud (Reserved)", "Private / Colocation"]
        assert get_deployment("Cloud (Reserved)").multiplier == 0.6
        assert all(0 < mode.multiplier <= 1 for mode in DEPLOYMENT_MODES.values())

    def test_unknown_names(self):
        with pytest.raises(KeyError, match="B200"):
            get_gpu("B200")
        with pytest.raises(KeyError, match="Spot"):
            get_deployment("Spot")


class TestValidation:
    """Invariants enforced on construction."""

    def test_rejects_non_positive_cost(self):
        with pytest.raises(ValueError):
            HardwareProfile("X", hourly_cost_usd=0, vram_gb=8, memory_bandwidth_gb_s=100)

    def test_rejects_non_positive_bandwidth(self):
        with pytest.raises(ValueError):
            HardwareProfile("X", hourly_cost_usd=1, vram_gb=8, memory_bandwidth_gb_s=-1)

    @pytest.mark.parametrize("multiplier", [0, 1.5, -0.2])
    def test_rejects_bad_multiplier(self, multiplier):
        with pytest.raises(ValueError):
            DeploymentMode("X", multiplier)
