"""
Savings Calculator Page
=======================
Streamlit UI for the savings engine. The page owns the input state in
st.session_state; every rerun builds a fresh WorkloadInput and calls compute().
The PDF is only rendered when the user asks for it, and is kept until the
inputs change.
"""

import re
from typing import List, Optional, Tuple

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from .catalog import DEFAULT_DEPLOYMENT, DEFAULT_GPU, deployment_names, gpu_names
from .engine import (
    DerivedMetrics, DisplayMode, TrafficUnit, WorkloadInput, clamp_workload, compute,
    convert_traffic, project_scale,
)
from .formatting import format_currency, format_number, format_ratio
from .report_pdf import REPORT_FILENAME, generate_impact_report_pdf

UNIT_LABELS = {
    TrafficUnit.REQUESTS_PER_SECOND: "Req / Sec",
    TrafficUnit.REQUESTS_PER_MONTH: "Req / Month",
}
MODE_LABELS = {
    DisplayMode.CAPACITY: "Leverage Capacity",
    DisplayMode.DOLLARS: "Leverage Savings",
}

MEMORY_HELP = """Directly visible in:
- NVIDIA DCGM
- nvidia-smi
- Datadog / Prometheus
- Cloud provider GPU metrics"""

BASELINE_COLOR = '#ef4444'
OPTIMIZED_COLOR = '#10b981'


# =============================================================================
# PURE HELPERS
# =============================================================================

def parse_traffic_text(raw: str) -> int:
    """Keep only digits from the traffic box; empty means 0."""
    digits = re.sub(r'\D', '', raw or '')
    return int(digits) if digits else 0


def metric_cards(metrics: DerivedMetrics, mode: DisplayMode) -> List[Tuple[str, str]]:
    """(value, label) pairs for the four result cards in the given mode."""
    if mode == DisplayMode.CAPACITY:
        first = (f"+{format_number(metrics.extra_monthly_requests)}", "Extra Requests / Month")
        second = (str(metrics.gpus_saved), "Fewer GPUs Required")
    else:
        first = (format_currency(metrics.monthly_savings_usd), "Avoided Monthly Spend")
        second = (f"{format_number(metrics.compute_hours_reclaimed)} hrs", "Compute Hours Reclaimed")

    return [
        first,
        second,
        (format_ratio(metrics.throughput_ratio), "Throughput Leverage"),
        (format_ratio(metrics.cost_leverage_ratio), "Budget Efficiency"),
    ]


def scale_table(metrics: DerivedMetrics) -> pd.DataFrame:
    rows = []
    for point in project_scale(metrics):
        rows.append({
            'Traffic': f"{point.multiple}x",
            'Monthly Requests': format_number(point.monthly_requests),
            'Annual Cost (Baseline)': format_currency(point.annual_cost_base_usd),
            'Annual Cost (Optimized)': format_currency(point.annual_cost_optimized_usd),
            'Annual Savings': format_currency(
                point.annual_cost_base_usd - point.annual_cost_optimized_usd),
        })
    return pd.DataFrame(rows)


def cached_report(state, workload: WorkloadInput) -> Optional[bytes]:
    """PDF bytes rendered for exactly this workload, or None when stale or absent."""
    if state.get('report_workload') == workload:
        return state.get('report_pdf')
    return None


# =============================================================================
# STATE CALLBACKS
# =============================================================================

def _init_state():
    defaults = {
        'traffic_value': 100,
        'traffic_text': "100",
        'traffic_unit': UNIT_LABELS[TrafficUnit.REQUESTS_PER_SECOND],
        'previous_unit': UNIT_LABELS[TrafficUnit.REQUESTS_PER_SECOND],
        'activation_mem': 2048,
        'gpu_type': DEFAULT_GPU,
        'deployment': DEFAULT_DEPLOYMENT,
        'display_mode': MODE_LABELS[DisplayMode.DOLLARS],
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def _unit_from_label(label: str) -> TrafficUnit:
    return next(unit for unit, text in UNIT_LABELS.items() if text == label)


def _mode_from_label(label: str) -> DisplayMode:
    return next(mode for mode, text in MODE_LABELS.items() if text == label)


def _on_traffic_text_change():
    value = parse_traffic_text(st.session_state.traffic_text)
    st.session_state.traffic_value = value
    st.session_state.traffic_text = f"{value:,}"


def _on_unit_change():
    old_unit = _unit_from_label(st.session_state.previous_unit)
    new_unit = _unit_from_label(st.session_state.traffic_unit)
    value = convert_traffic(st.session_state.traffic_value, old_unit, new_unit)
    st.session_state.traffic_value = value
    st.session_state.traffic_text = f"{value:,}"
    st.session_state.previous_unit = st.session_state.traffic_unit


def _on_generate_report(workload: WorkloadInput):
    st.session_state.report_pdf = generate_impact_report_pdf(workload)
    st.session_state.report_workload = workload


# =============================================================================
# CHARTS
# =============================================================================

def spend_comparison_chart(metrics: DerivedMetrics) -> go.Figure:
    costs = [metrics.monthly_cost_base_usd, metrics.monthly_cost_optimized_usd]
    fig = go.Figure(go.Bar(
        x=["Baseline", "With NeuroLattice"],
        y=costs,
        marker_color=[BASELINE_COLOR, OPTIMIZED_COLOR],
        text=[format_currency(c) for c in costs],
        textposition='outside',
    ))
    fig.update_layout(title="Projected Monthly Spend", yaxis_title="Monthly Cost ($)",
                      showlegend=False, height=350)
    return fig


def scale_projection_chart(metrics: DerivedMetrics) -> go.Figure:
    points = project_scale(metrics)
    labels = [format_number(p.monthly_requests) for p in points]
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=labels, y=[p.annual_cost_base_usd for p in points],
                             mode='lines+markers', name="Baseline Cost",
                             line=dict(color=BASELINE_COLOR)))
    fig.add_trace(go.Scatter(x=labels, y=[p.annual_cost_optimized_usd for p in points],
                             mode='lines+markers', name="With NeuroLattice",
                             line=dict(color=OPTIMIZED_COLOR)))
    fig.update_layout(title="Cost Scenarios at Scale", xaxis_title="Monthly Request Volume",
                      yaxis_title="Annual Cost ($)", height=350)
    return fig


# =============================================================================
# PAGE
# =============================================================================

def show_calculator():
    """Render the savings calculator."""
    _init_state()

    st.sidebar.subheader("🗄️ Current Workload")
    st.sidebar.text_input("Baseline Traffic", key='traffic_text', on_change=_on_traffic_text_change)
    st.sidebar.radio("Traffic Unit", list(UNIT_LABELS.values()), key='traffic_unit',
                     on_change=_on_unit_change, horizontal=True)

    st.sidebar.subheader("⚡ Model & Fleet")
    st.sidebar.number_input("Peak GPU Memory Utilization (MB)", min_value=0, step=256,
                            key='activation_mem', help=MEMORY_HELP)
    st.sidebar.selectbox("GPU Hardware", gpu_names(), key='gpu_type')
    st.sidebar.selectbox("Deploy Mode", deployment_names(), key='deployment')

    mode = _mode_from_label(st.session_state.display_mode)
    workload = clamp_workload(
        gpu=st.session_state.gpu_type,
        deployment=st.session_state.deployment,
        peak_activation_memory_mb=st.session_state.activation_mem,
        traffic_value=st.session_state.traffic_value,
        traffic_unit=_unit_from_label(st.session_state.traffic_unit),
        display_mode=mode,
    )
    metrics = compute(workload)

    st.sidebar.markdown("---")
    pdf_bytes = cached_report(st.session_state, workload)
    if pdf_bytes is None:
        st.sidebar.button("📄 Generate Report", on_click=_on_generate_report,
                          args=(workload,), use_container_width=True)
    else:
        st.sidebar.download_button(
            label="📄 Download Report",
            data=pdf_bytes,
            file_name=REPORT_FILENAME,
            mime="application/pdf",
            use_container_width=True,
        )

    st.title("Up to 80% Less HBM Footprint.")
    st.markdown(
        "NeuroLattice restructures weights to bypass activation movement bottlenecks, "
        "reducing peak physical HBM load by up to 80%."
    )
    st.caption(
        f"Peak activation {format_number(workload.peak_activation_memory_mb)} MB → "
        f"{format_number(metrics.reduced_activation_mb)} MB"
    )

    st.radio("Display", list(MODE_LABELS.values()), key='display_mode',
             horizontal=True, label_visibility='collapsed')

    cols = st.columns(4)
    for col, (value, label) in zip(cols, metric_cards(metrics, mode)):
        col.metric(label, value)

    st.markdown("---")

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(spend_comparison_chart(metrics), use_container_width=True)
    with col2:
        st.plotly_chart(scale_projection_chart(metrics), use_container_width=True)

    st.subheader("Scale Projection")
    st.dataframe(scale_table(metrics), use_container_width=True, hide_index=True)
