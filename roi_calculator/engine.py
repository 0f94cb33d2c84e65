"""
Savings Engine
==============
Pure cost/capacity model behind the calculator and the PDF report.

Throughput is estimated from the memory-bandwidth to activation-size ratio:
a GPU that has to stream the peak activation footprint for every request can
serve roughly (bandwidth / activation) requests per second, derated by a
bandwidth-efficiency floor. The optimized path serves a fixed 5x that rate.

Both the on-screen calculator and the PDF renderer call compute(); neither
re-derives these formulas on its own.
"""

import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, List, Sequence, Tuple

from .catalog import (
    DEFAULT_DEPLOYMENT, DEFAULT_GPU, DeploymentMode, HardwareProfile,
    get_deployment, get_gpu,
)
from .logging_config import get_logger

logger = get_logger(__name__)

# =============================================================================
# MODEL CONSTANTS
# =============================================================================

TRUTH_REDUCTION = 0.80          # Peak activation memory removed by optimization
BANDWIDTH_EFFICIENCY = 0.65     # η, achievable fraction of theoretical bandwidth
THROUGHPUT_MULTIPLIER = 5.0     # Optimized rate / baseline rate
SECONDS_PER_MONTH = 2_592_000   # 30-day month
SECONDS_PER_HOUR = 3600
MB_PER_GB = 1024

# Reported leverage ratios are product constants, not functions of the input
THROUGHPUT_RATIO = 5.0
COST_LEVERAGE_RATIO = 5.0

SCALE_MULTIPLES = (1, 2, 3, 4)


class TrafficUnit(Enum):
    """Unit the traffic value is entered in."""
    REQUESTS_PER_SECOND = "rps"
    REQUESTS_PER_MONTH = "rpm"


class DisplayMode(Enum):
    """Which headline the calculator leads with."""
    CAPACITY = "capacity"
    DOLLARS = "dollars"


# =============================================================================
# VALUE TYPES
# =============================================================================

@dataclass(frozen=True)
class WorkloadInput:
    """Everything the engine needs to price a workload."""
    gpu_profile: HardwareProfile
    deployment_mode: DeploymentMode
    peak_activation_memory_mb: float = 2048
    traffic_value: float = 100
    traffic_unit: TrafficUnit = TrafficUnit.REQUESTS_PER_SECOND
    display_mode: DisplayMode = DisplayMode.DOLLARS

    @classmethod
    def from_names(cls, gpu: str = DEFAULT_GPU, deployment: str = DEFAULT_DEPLOYMENT,
                   peak_activation_memory_mb: float = 2048, traffic_value: float = 100,
                   traffic_unit: TrafficUnit = TrafficUnit.REQUESTS_PER_SECOND,
                   display_mode: DisplayMode = DisplayMode.DOLLARS) -> 'WorkloadInput':
        return cls(
            gpu_profile=get_gpu(gpu),
            deployment_mode=get_deployment(deployment),
            peak_activation_memory_mb=peak_activation_memory_mb,
            traffic_value=traffic_value,
            traffic_unit=traffic_unit,
            display_mode=display_mode,
        )


@dataclass(frozen=True)
class DerivedMetrics:
    """Result of compute(). The first seven fields are the headline metrics."""
    reduced_activation_mb: float
    monthly_savings_usd: float
    compute_hours_reclaimed: float
    extra_monthly_requests: float
    gpus_saved: int
    throughput_ratio: float
    cost_leverage_ratio: float

    # Breakdown shared with the charts and the PDF report
    requests_per_second: float = 0.0
    requests_per_month: float = 0.0
    cost_per_hour_usd: float = 0.0
    base_rate_rps: float = 0.0
    optimized_rate_rps: float = 0.0
    fleet_base: int = 1
    fleet_optimized: int = 1
    hours_base: float = 0.0
    hours_optimized: float = 0.0
    monthly_cost_base_usd: float = 0.0
    monthly_cost_optimized_usd: float = 0.0

    @property
    def savings_pct(self) -> float:
        """Percent of baseline spend avoided; 0 when there is no spend."""
        if self.monthly_cost_base_usd <= 0:
            return 0.0
        return 100 - (self.monthly_cost_optimized_usd / self.monthly_cost_base_usd * 100)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['savings_pct'] = self.savings_pct
        return data


@dataclass(frozen=True)
class ScalePoint:
    """One point of the scale-out projection (annualized costs)."""
    multiple: int
    monthly_requests: float
    annual_cost_base_usd: float
    annual_cost_optimized_usd: float


# =============================================================================
# TRAFFIC HELPERS
# =============================================================================

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def normalize_traffic(value: float, unit: TrafficUnit) -> Tuple[float, float]:
    """Return (requests per second, requests per month) for a traffic value."""
    value = max(0.0, value)
    if unit == TrafficUnit.REQUESTS_PER_MONTH:
        return value / SECONDS_PER_MONTH, value
    return value, value * SECONDS_PER_MONTH


def convert_traffic(value: float, from_unit: TrafficUnit, to_unit: TrafficUnit) -> float:
    """Convert a traffic value when the unit toggle flips, rounded to a whole number.

    The same unit on both sides returns the value as given.
    """
    if from_unit == to_unit:
        return value
    if to_unit == TrafficUnit.REQUESTS_PER_MONTH:
        return _round_half_up(value * SECONDS_PER_MONTH)
    return _round_half_up(value / SECONDS_PER_MONTH)


def clamp_workload(gpu: str, deployment: str, peak_activation_memory_mb,
                   traffic_value, traffic_unit: TrafficUnit,
                   display_mode: DisplayMode = DisplayMode.DOLLARS) -> WorkloadInput:
    """Build a WorkloadInput from raw UI values, coercing bad numbers to 0."""
    def _non_negative(raw) -> float:
        try:
            number = float(raw)
        except (TypeError, ValueError):
            return 0.0
        if not math.isfinite(number) or number < 0:
            return 0.0
        return number

    return WorkloadInput.from_names(
        gpu=gpu,
        deployment=deployment,
        peak_activation_memory_mb=_non_negative(peak_activation_memory_mb),
        traffic_value=_non_negative(traffic_value),
        traffic_unit=traffic_unit,
        display_mode=display_mode,
    )


# =============================================================================
# ENGINE
# =============================================================================

def _fleet_size(rps: float, rate: float) -> int:
    if rate <= 0:
        return 1
    return max(1, math.ceil(rps / rate))


def compute(workload: WorkloadInput) -> DerivedMetrics:
    """
    Price a workload under baseline and optimized execution.

    Args:
        workload: GPU, deployment, activation size and traffic

    Returns:
        DerivedMetrics with the headline values plus the cost breakdown.
        An activation size that yields no finite positive rate (zero,
        negative, near-zero or infinite) means no throughput is achievable:
        every rate-derived value is 0 rather than NaN/inf.
    """
    gpu = workload.gpu_profile
    activation_mb = workload.peak_activation_memory_mb
    cost_per_hour = gpu.hourly_cost_usd * workload.deployment_mode.multiplier
    rps, rpm = normalize_traffic(workload.traffic_value, workload.traffic_unit)

    if math.isfinite(activation_mb) and activation_mb > 0:
        r_base = (gpu.memory_bandwidth_gb_s * MB_PER_GB) / activation_mb * BANDWIDTH_EFFICIENCY
    else:
        r_base = 0.0

    # Near-zero activation overflows the rate; huge activation underflows it
    if not math.isfinite(r_base) or r_base <= 0 or not math.isfinite(rpm / r_base):
        logger.warning(
            "Activation memory %s MB gives no usable throughput on %s; reporting zero",
            activation_mb, gpu.name,
        )
        reduced_activation = activation_mb * (1 - TRUTH_REDUCTION)
        if not math.isfinite(reduced_activation) or reduced_activation < 0:
            reduced_activation = 0.0
        return DerivedMetrics(
            reduced_activation_mb=reduced_activation,
            monthly_savings_usd=0.0,
            compute_hours_reclaimed=0.0,
            extra_monthly_requests=0.0,
            gpus_saved=0,
            throughput_ratio=THROUGHPUT_RATIO,
            cost_leverage_ratio=COST_LEVERAGE_RATIO,
            requests_per_second=rps,
            requests_per_month=rpm,
            cost_per_hour_usd=cost_per_hour,
        )

    reduced_activation = activation_mb * (1 - TRUTH_REDUCTION)
    r_opt = r_base * THROUGHPUT_MULTIPLIER

    fleet_base = _fleet_size(rps, r_base)
    fleet_opt = _fleet_size(rps, r_opt)

    hours_base = rpm / r_base / SECONDS_PER_HOUR
    hours_opt = rpm / r_opt / SECONDS_PER_HOUR
    hours_reclaimed = hours_base - hours_opt

    cost_base = hours_base * cost_per_hour
    cost_opt = hours_opt * cost_per_hour

    logger.debug(
        "compute gpu=%s deployment=%s r_base=%.2f r_opt=%.2f fleet=%d->%d",
        gpu.name, workload.deployment_mode.name, r_base, r_opt, fleet_base, fleet_opt,
    )

    return DerivedMetrics(
        reduced_activation_mb=reduced_activation,
        monthly_savings_usd=cost_base - cost_opt,
        compute_hours_reclaimed=hours_reclaimed,
        extra_monthly_requests=hours_reclaimed * SECONDS_PER_HOUR * r_opt,
        gpus_saved=fleet_base - fleet_opt,
        throughput_ratio=THROUGHPUT_RATIO,
        cost_leverage_ratio=COST_LEVERAGE_RATIO,
        requests_per_second=rps,
        requests_per_month=rpm,
        cost_per_hour_usd=cost_per_hour,
        base_rate_rps=r_base,
        optimized_rate_rps=r_opt,
        fleet_base=fleet_base,
        fleet_optimized=fleet_opt,
        hours_base=hours_base,
        hours_optimized=hours_opt,
        monthly_cost_base_usd=cost_base,
        monthly_cost_optimized_usd=cost_opt,
    )


def project_scale(metrics: DerivedMetrics,
                  multiples: Sequence[int] = SCALE_MULTIPLES) -> List[ScalePoint]:
    """Annualized baseline vs optimized cost at multiples of current monthly traffic."""
    rpm = metrics.requests_per_month
    if rpm > 0:
        unit_cost_base = metrics.monthly_cost_base_usd / rpm
        unit_cost_opt = metrics.monthly_cost_optimized_usd / rpm
    else:
        unit_cost_base = unit_cost_opt = 0.0

    points = []
    for k in multiples:
        requests = rpm * k
        points.append(ScalePoint(
            multiple=k,
            monthly_requests=requests,
            annual_cost_base_usd=requests * unit_cost_base * 12,
            annual_cost_optimized_usd=requests * unit_cost_opt * 12,
        ))
    return points
