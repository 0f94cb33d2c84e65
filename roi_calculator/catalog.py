"""
Hardware & Deployment Catalog
=============================
Fixed reference data for the savings calculator: the GPU profiles users can
pick from and the deployment modes that discount their hourly price.
"""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class HardwareProfile:
    """A GPU SKU with its on-demand price and memory characteristics."""
    name: str
    hourly_cost_usd: float
    vram_gb: int
    memory_bandwidth_gb_s: float

    def __post_init__(self):
        if self.hourly_cost_usd <= 0:
            raise ValueError(f"{self.name}: hourly cost must be positive")
        if self.memory_bandwidth_gb_s <= 0:
            raise ValueError(f"{self.name}: memory bandwidth must be positive")


@dataclass(frozen=True)
class DeploymentMode:
    """How the fleet is bought. Multiplier scales the hourly GPU price."""
    name: str
    multiplier: float

    def __post_init__(self):
        if not 0 < self.multiplier <= 1:
            raise ValueError(f"{self.name}: multiplier must be in (0, 1]")


# =============================================================================
# CATALOGS
# =============================================================================

GPU_CATALOG: Dict[str, HardwareProfile] = {
    'T4': HardwareProfile('T4', hourly_cost_usd=0.35, vram_gb=16, memory_bandwidth_gb_s=300),
    'L4': HardwareProfile('L4', hourly_cost_usd=0.80, vram_gb=24, memory_bandwidth_gb_s=600),
    'A10': HardwareProfile('A10', hourly_cost_usd=1.00, vram_gb=24, memory_bandwidth_gb_s=600),
    'A100': HardwareProfile('A100', hourly_cost_usd=3.50, vram_gb=80, memory_bandwidth_gb_s=2000),
    'H100': HardwareProfile('H100', hourly_cost_usd=8.50, vram_gb=80, memory_bandwidth_gb_s=3350),
}

DEPLOYMENT_MODES: Dict[str, DeploymentMode] = {
    'Cloud (On-demand)': DeploymentMode('Cloud (On-demand)', 1.0),
    'Cloud (Reserved)': DeploymentMode('Cloud (Reserved)', 0.6),
    'Private / Colocation': DeploymentMode('Private / Colocation', 1.0),
}

DEFAULT_GPU = 'A100'
DEFAULT_DEPLOYMENT = 'Cloud (On-demand)'


def gpu_names() -> List[str]:
    return list(GPU_CATALOG.keys())


def deployment_names() -> List[str]:
    return list(DEPLOYMENT_MODES.keys())


def get_gpu(name: str) -> HardwareProfile:
    """Look up a GPU profile by name."""
    try:
        return GPU_CATALOG[name]
    except KeyError:
        raise KeyError(f"Unknown GPU '{name}'. Choose from: {', '.join(gpu_names())}") from None


def get_deployment(name: str) -> DeploymentMode:
    """Look up a deployment mode by name."""
    try:
        return DEPLOYMENT_MODES[name]
    except KeyError:
        raise KeyError(
            f"Unknown deployment mode '{name}'. Choose from: {', '.join(deployment_names())}"
        ) from None
