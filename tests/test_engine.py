"""
Savings engine tests
"""

import math

import pytest

from roi_calculator.engine import (
    COST_LEVERAGE_RATIO, SECONDS_PER_MONTH, THROUGHPUT_RATIO, DisplayMode,
    TrafficUnit, clamp_workload, compute, convert_traffic, normalize_traffic,
    project_scale,
)


class TestA100Scenario:
    """A100 / On-demand / 2048 MB activation."""

    def test_rates(self, make_workload):
        metrics = compute(make_workload())

        assert metrics.base_rate_rps == pytest.approx(650)
        assert metrics.optimized_rate_rps == pytest.approx(3250)

    def test_fleet_at_100_rps(self, make_workload):
        metrics = compute(make_workload(traffic=100))

        assert metrics.fleet_base == 1
        assert metrics.fleet_optimized == 1
        assert metrics.gpus_saved == 0

    def test_fleet_at_1000_rps(self, make_workload):
        metrics = compute(make_workload(traffic=1000))

        assert metrics.fleet_base == 2
        assert metrics.fleet_optimized == 1
        assert metrics.gpus_saved == 1

    def test_monthly_costs(self, make_workload):
        metrics = compute(make_workload())

        # 100 rps * 2,592,000 s = 259.2M requests; / 650 rps / 3600 = 110.77 h
        assert metrics.requests_per_month == 259_200_000
        assert metrics.hours_base == pytest.approx(259_200_000 / 650 / 3600)
        assert metrics.monthly_cost_base_usd == pytest.approx(387.6923, rel=1e-6)
        assert metrics.monthly_cost_optimized_usd == pytest.approx(77.53846, rel=1e-6)
        assert metrics.monthly_savings_usd == pytest.approx(310.15385, rel=1e-6)
        assert metrics.savings_pct == pytest.approx(80)

    def test_extra_capacity_is_four_times_current_traffic(self, make_workload):
        metrics = compute(make_workload())

        assert metrics.extra_monthly_requests == pytest.approx(4 * 259_200_000)

    def test_reduced_activation(self, make_workload):
        metrics = compute(make_workload(activation_mb=2048))

        assert metrics.reduced_activation_mb == pytest.approx(409.6)


class TestInvariants:
    """Properties that hold across the catalog."""

    @pytest.mark.parametrize("gpu", ["T4", "L4", "A10", "A100", "H100"])
    @pytest.mark.parametrize("traffic", [0, 1, 100, 5000, 250_000])
    def test_properties(self, make_workload, gpu, traffic):
        metrics = compute(make_workload(gpu=gpu, traffic=traffic))

        assert metrics.optimized_rate_rps == metrics.base_rate_rps * 5.0
        assert metrics.gpus_saved >= 0
        assert metrics.monthly_savings_usd == (
            metrics.monthly_cost_base_usd - metrics.monthly_cost_optimized_usd
        )
        assert metrics.monthly_savings_usd >= 0
        assert metrics.compute_hours_reclaimed >= 0

    def test_leverage_ratios_are_constant(self, make_workload):
        small = compute(make_workload(gpu="T4", deployment="Cloud (Reserved)", traffic=1))
        large = compute(make_workload(gpu="H100", traffic=90_000))

        for metrics in (small, large):
            assert metrics.throughput_ratio == THROUGHPUT_RATIO == 5.0
            assert metrics.cost_leverage_ratio == COST_LEVERAGE_RATIO == 5.0

    def test_idempotent(self, make_workload):
        workload = make_workload(gpu="L4", traffic=1234)

        assert compute(workload) == compute(workload)

    def test_reserved_deployment_discounts_cost(self, make_workload):
        on_demand = compute(make_workload())
        reserved = compute(make_workload(deployment="Cloud (Reserved)"))

        assert reserved.cost_per_hour_usd == pytest.approx(2.1)
        assert reserved.monthly_cost_base_usd == pytest.approx(on_demand.monthly_cost_base_usd * 0.6)
        # Throughput does not depend on the pricing model
        assert reserved.base_rate_rps == on_demand.base_rate_rps

    def test_display_mode_does_not_change_metrics(self, make_workload):
        workload = make_workload()
        dollars = compute(workload)
        capacity = compute(clamp_workload("A100", "Cloud (On-demand)", 2048, 100,
                                          TrafficUnit.REQUESTS_PER_SECOND, DisplayMode.CAPACITY))

        assert dollars == capacity

    def test_monthly_unit_matches_per_second(self, make_workload):
        per_second = compute(make_workload(traffic=10))
        per_month = compute(make_workload(traffic=10 * SECONDS_PER_MONTH,
                                          unit=TrafficUnit.REQUESTS_PER_MONTH))

        assert per_month.requests_per_second == pytest.approx(10)
        assert per_month.monthly_cost_base_usd == pytest.approx(per_second.monthly_cost_base_usd)


class TestDegenerateInput:
    """Zero activation memory and zero traffic."""

    def test_zero_activation_memory(self, make_workload):
        metrics = compute(make_workload(activation_mb=0))

        for value in (
            metrics.monthly_savings_usd, metrics.compute_hours_reclaimed,
            metrics.extra_monthly_requests, metrics.base_rate_rps,
            metrics.optimized_rate_rps, metrics.monthly_cost_base_usd,
            metrics.monthly_cost_optimized_usd,
        ):
            assert value == 0
            assert math.isfinite(value)
        assert metrics.gpus_saved == 0
        assert metrics.savings_pct == 0

    @pytest.mark.parametrize("activation_mb", [5e-324, 1e-310, float('inf'), 1e308, float('nan')])
    def test_extreme_activation_memory(self, make_workload, activation_mb):
        metrics = compute(make_workload(activation_mb=activation_mb))

        for name, value in metrics.to_dict().items():
            if isinstance(value, (int, float)):
                assert math.isfinite(value), name
        assert metrics.monthly_savings_usd == 0
        assert metrics.extra_monthly_requests == 0
        assert metrics.gpus_saved == 0
        assert metrics.fleet_base == 1

    def test_zero_traffic(self, make_workload):
        metrics = compute(make_workload(traffic=0))

        assert metrics.fleet_base == 1
        assert metrics.fleet_optimized == 1
        assert metrics.monthly_savings_usd == 0
        assert metrics.extra_monthly_requests == 0

    def test_negative_traffic_is_treated_as_zero(self, make_workload):
        assert compute(make_workload(traffic=-50)) == compute(make_workload(traffic=0))

    def test_clamp_workload_coerces_bad_values(self):
        workload = clamp_workload("A100", "Cloud (On-demand)", "not a number", -10,
                                  TrafficUnit.REQUESTS_PER_SECOND)

        assert workload.peak_activation_memory_mb == 0
        assert workload.traffic_value == 0
        assert compute(workload).monthly_savings_usd == 0

    def test_clamp_workload_rejects_non_finite(self):
        workload = clamp_workload("A100", "Cloud (On-demand)", float('inf'), float('nan'),
                                  TrafficUnit.REQUESTS_PER_SECOND)

        assert workload.peak_activation_memory_mb == 0
        assert workload.traffic_value == 0


class TestTrafficConversion:
    """Unit toggle conversions."""

    def test_normalize_per_second(self):
        assert normalize_traffic(100, TrafficUnit.REQUESTS_PER_SECOND) == (100, 259_200_000)

    def test_normalize_per_month(self):
        rps, rpm = normalize_traffic(2_592_000, TrafficUnit.REQUESTS_PER_MONTH)

        assert rps == 1
        assert rpm == 2_592_000

    def test_round_trip(self):
        rpm = convert_traffic(100, TrafficUnit.REQUESTS_PER_SECOND, TrafficUnit.REQUESTS_PER_MONTH)

        assert rpm == 259_200_000
        assert convert_traffic(rpm, TrafficUnit.REQUESTS_PER_MONTH,
                               TrafficUnit.REQUESTS_PER_SECOND) == 100

    def test_small_monthly_volume_rounds_to_whole_rps(self):
        assert convert_traffic(1_000_000, TrafficUnit.REQUESTS_PER_MONTH,
                               TrafficUnit.REQUESTS_PER_SECOND) == 0
        assert convert_traffic(1_296_000, TrafficUnit.REQUESTS_PER_MONTH,
                               TrafficUnit.REQUESTS_PER_SECOND) == 1

    def test_same_unit_is_unchanged(self):
        assert convert_traffic(42, TrafficUnit.REQUESTS_PER_SECOND,
                               TrafficUnit.REQUESTS_PER_SECOND) == 42
        assert convert_traffic(42.7, TrafficUnit.REQUESTS_PER_MONTH,
                               TrafficUnit.REQUESTS_PER_MONTH) == 42.7


class TestScaleProjection:
    """Annualized cost at 1x-4x traffic."""

    def test_points_scale_linearly(self, make_workload):
        metrics = compute(make_workload())
        points = project_scale(metrics)

        assert [p.multiple for p in points] == [1, 2, 3, 4]
        for point in points:
            assert point.monthly_requests == metrics.requests_per_month * point.multiple
            assert point.annual_cost_base_usd == pytest.approx(
                metrics.monthly_cost_base_usd * 12 * point.multiple)
            assert point.annual_cost_optimized_usd == pytest.approx(
                metrics.monthly_cost_optimized_usd * 12 * point.multiple)

    def test_zero_traffic_projection(self, make_workload):
        points = project_scale(compute(make_workload(traffic=0)))

        assert all(p.annual_cost_base_usd == 0 for p in points)
        assert all(p.annual_cost_optimized_usd == 0 for p in points)
