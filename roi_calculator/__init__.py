"""NeuroLattice inference savings calculator, impact report and contact relay."""

from .catalog import DEPLOYMENT_MODES, GPU_CATALOG, DeploymentMode, HardwareProfile
from .engine import (
    DerivedMetrics, DisplayMode, TrafficUnit, WorkloadInput, compute,
    convert_traffic, project_scale,
)
from .formatting import format_currency, format_number

__version__ = "1.0.0"
