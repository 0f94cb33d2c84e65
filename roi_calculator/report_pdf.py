"""
Inference Efficiency Impact Report
==================================
Two-chart executive PDF generated from the calculator inputs.

build_report_data() prepares every number and chart proportion from the
shared engine output; ImpactReportPDF only lays them out. The charts are drawn
with fpdf primitives on an A4 page (mm units).
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from fpdf import FPDF

from .config import COMPANY_NAME, CONTACT_URL
from .engine import DerivedMetrics, ScalePoint, WorkloadInput, compute, project_scale
from .formatting import format_fixed, format_currency, format_number, sanitize_text
from .logging_config import get_logger

logger = get_logger(__name__)

REPORT_FILENAME = "NeuroLattice_Executive_Report.pdf"

PAGE_WIDTH = 210
LEFT = 14
FOOTER_Y = 285

# Colors
BRAND_DARK = (15, 23, 42)
BRAND_GREEN = (16, 185, 129)
TEXT_GRAY = (71, 85, 105)
TEXT_LIGHT = (148, 163, 184)
BASELINE_BAR = (220, 38, 38)
BASELINE_LINE = (239, 68, 68)
GRID_GRAY = (200, 200, 200)

# Chart geometry
SPEND_CHART_HEIGHT = 28
SPEND_HEADROOM = 1.2
BAR_WIDTH = 18
BAR_GAP = 20
SCALE_CHART_HEIGHT = 32
SCALE_CHART_WIDTH = 90
SCALE_HEADROOM = 1.1
GRID_STEPS = 5

EXEC_SUMMARY = (
    "AI inference is now a recurring operating cost that scales directly with usage. "
    "Without structural efficiency, infrastructure spend grows faster than revenue and "
    "limits deployment flexibility.\n\n"
    "This report evaluates how NeuroLattice reduces inference cost at the execution level, "
    "allowing organizations to lower monthly cloud spend while unlocking additional "
    "throughput on existing hardware. The analysis below details both immediate cost "
    "impact and longer-term scale implications."
)

SCALE_INTERPRETATION = (
    "This chart demonstrates how inference costs scale with request volume under baseline "
    "execution versus NeuroLattice-optimized execution.\n\n"
    "While baseline costs increase linearly with traffic, NeuroLattice maintains a "
    "significantly lower cost curve by improving effective throughput per GPU. As inference "
    "volume grows, the absolute dollar savings increase proportionally."
)

SCALE_TAKEAWAY = (
    "At higher traffic levels, NeuroLattice shifts inference economics from cost-scaling to "
    "capacity-scaling, enabling growth without proportional infrastructure expansion."
)

NEXT_STEP_INTRO = (
    "For organizations operating production AI systems, the largest inefficiencies typically "
    "occur inside the execution graph itself - where redundant structure drives unnecessary "
    "memory traffic, energy use, and hardware over-provisioning."
)

ANALYSIS_POINTS = [
    "Where memory bandwidth is the binding constraint",
    "Which components of the model drive disproportionate inference cost",
    "How much cost and capacity can be recovered through structural execution optimization",
]

CLOSING_TEXT = (
    "Teams can request a confidential deep-dive assessment to receive a model-specific "
    "breakdown of inference bottlenecks, cost drivers, and optimization pathways tailored "
    "to their environment."
)

DISCLAIMER = "Estimates based on provided configuration. Actual results may vary."


# =============================================================================
# REPORT DATA
# =============================================================================

@dataclass
class ReportData:
    """Numbers and chart proportions for one report render."""
    workload: WorkloadInput
    metrics: DerivedMetrics
    bar_height_base: float
    bar_height_optimized: float
    savings_pct_label: str
    scale_points: List[ScalePoint] = field(default_factory=list)
    scale_axis_max: float = 0.0
    scale_y_factor: float = 0.0
    scale_x_labels: List[str] = field(default_factory=list)
    grid_labels: List[str] = field(default_factory=list)

    @property
    def config_label(self) -> str:
        return f"{self.workload.gpu_profile.name} / {self.workload.deployment_mode.name}"

    @property
    def annual_base(self) -> List[float]:
        return [p.annual_cost_base_usd for p in self.scale_points]

    @property
    def annual_optimized(self) -> List[float]:
        return [p.annual_cost_optimized_usd for p in self.scale_points]

    def spend_interpretation(self) -> str:
        m = self.metrics
        return (
            "This comparison illustrates the direct monthly infrastructure cost reduction "
            "achieved by deploying NeuroLattice under the current inference workload.\n\n"
            "By reducing memory bandwidth requirements at execution time, NeuroLattice lowers "
            f"monthly inference spend from {format_currency(m.monthly_cost_base_usd)} to "
            f"{format_currency(m.monthly_cost_optimized_usd)}, representing an "
            f"{self.savings_pct_label}% cost reduction without changes to traffic volume or "
            "model behavior."
        )


def build_report_data(workload: WorkloadInput) -> ReportData:
    """Run the engine once and derive every value the report prints or draws."""
    metrics = compute(workload)

    max_cost = metrics.monthly_cost_base_usd * SPEND_HEADROOM
    bar_scale = SPEND_CHART_HEIGHT / max_cost if max_cost > 0 else 0.0

    points = project_scale(metrics)
    axis_max = max(p.annual_cost_base_usd for p in points) * SCALE_HEADROOM
    y_factor = SCALE_CHART_HEIGHT / axis_max if axis_max > 0 else 0.0

    return ReportData(
        workload=workload,
        metrics=metrics,
        bar_height_base=metrics.monthly_cost_base_usd * bar_scale,
        bar_height_optimized=metrics.monthly_cost_optimized_usd * bar_scale,
        savings_pct_label=format_fixed(metrics.savings_pct, 0),
        scale_points=points,
        scale_axis_max=axis_max,
        scale_y_factor=y_factor,
        scale_x_labels=[format_number(p.monthly_requests) for p in points],
        grid_labels=[format_number(axis_max * i / GRID_STEPS) for i in range(GRID_STEPS + 1)],
    )


# =============================================================================
# PDF LAYOUT
# =============================================================================

class ImpactReportPDF(FPDF):
    """A4 report canvas with the branded footer and chart primitives."""

    def __init__(self):
        super().__init__(orientation='P', unit='mm', format='A4')
        self.set_margins(LEFT, 20, LEFT)
        self.set_auto_page_break(auto=True, margin=15)
        self.alias_nb_pages()

    def footer(self):
        self.set_font('Helvetica', '', 8)
        self.set_text_color(*TEXT_LIGHT)
        self.text(LEFT, FOOTER_Y,
                  f"Confidential - Prepared by {COMPANY_NAME} | Page {self.page_no()} of {{nb}}")
        self.text_aligned(PAGE_WIDTH - LEFT, FOOTER_Y, DISCLAIMER, 'R')

    def text_aligned(self, x: float, y: float, txt: str, align: str = 'L'):
        """Baseline text anchored left, centre or right of x."""
        txt = sanitize_text(txt)
        width = self.get_string_width(txt)
        if align == 'C':
            x -= width / 2
        elif align == 'R':
            x -= width
        self.text(x, y, txt)

    def heading(self, y: float, title: str, size: int = 12) -> float:
        self.set_font('Helvetica', 'B', size)
        self.set_text_color(*BRAND_DARK)
        self.text(LEFT, y, sanitize_text(title))
        return y + 6

    def paragraph(self, y: float, body: str, color: Tuple[int, int, int] = TEXT_GRAY,
                  style: str = '', size: int = 9, x: float = LEFT) -> float:
        """Wrapped paragraph whose first baseline sits at y; returns the y below it."""
        self.set_font('Helvetica', style, size)
        self.set_text_color(*color)
        line_height = 4
        self.set_xy(x, y - 3)
        self.multi_cell(PAGE_WIDTH - LEFT - x, line_height, sanitize_text(body))
        return self.get_y() + 3

    def draw_header_band(self, config_label: str, generated_on: date):
        self.set_fill_color(*BRAND_DARK)
        self.rect(0, 0, PAGE_WIDTH, 35, 'F')
        self.set_font('Helvetica', 'B', 18)
        self.set_text_color(255, 255, 255)
        self.text(LEFT, 15, f"{COMPANY_NAME} Inference Efficiency Impact Report")
        self.set_font('Helvetica', '', 10)
        self.set_text_color(200, 200, 200)
        generated = f"{generated_on.month}/{generated_on.day}/{generated_on.year}"
        self.text(LEFT, 25, sanitize_text(f"Generated: {generated} | Config: {config_label}"))

    def draw_spend_chart(self, y: float, data: ReportData):
        """Two-bar monthly spend comparison; y is the top of the plot area."""
        base_y = y + SPEND_CHART_HEIGHT
        total_width = BAR_WIDTH * 2 + BAR_GAP
        x1 = (PAGE_WIDTH - total_width) / 2
        x2 = x1 + BAR_WIDTH + BAR_GAP
        h1 = data.bar_height_base
        h2 = data.bar_height_optimized

        self.set_draw_color(*GRID_GRAY)
        self.set_line_width(0.2)
        self.line(x1 - 15, base_y, x1 + total_width + 15, base_y)

        self.set_fill_color(*BASELINE_BAR)
        self.rect(x1, base_y - h1, BAR_WIDTH, h1, 'F')
        self.set_fill_color(*BRAND_GREEN)
        self.rect(x2, base_y - h2, BAR_WIDTH, h2, 'F')

        self.set_font('Helvetica', '', 9)
        self.set_text_color(0, 0, 0)
        self.text_aligned(x1 + BAR_WIDTH / 2, base_y + 4, "Baseline", 'C')
        self.text_aligned(x2 + BAR_WIDTH / 2, base_y + 4, f"With {COMPANY_NAME}", 'C')

        self.set_font('Helvetica', 'B', 10)
        self.text_aligned(x1 + BAR_WIDTH / 2, base_y - h1 - 2,
                          format_currency(data.metrics.monthly_cost_base_usd), 'C')
        self.set_text_color(*BRAND_GREEN)
        self.text_aligned(x2 + BAR_WIDTH / 2, base_y - h2 - 2,
                          format_currency(data.metrics.monthly_cost_optimized_usd), 'C')

        self.set_font('Helvetica', '', 9)
        self.set_text_color(*TEXT_GRAY)
        self.text(x2 + BAR_WIDTH + 10, base_y - h1 / 2, f"Savings: {data.savings_pct_label}%")

    def _plot_series(self, origin_x: float, origin_y: float, x_step: float,
                     values: List[float], y_factor: float, color: Tuple[int, int, int]):
        self.set_draw_color(*color)
        self.set_fill_color(*color)
        self.set_text_color(*color)
        self.set_line_width(0.5)
        previous = None
        for i, val in enumerate(values):
            x = origin_x + i * x_step
            y = origin_y - val * y_factor
            if previous is not None:
                self.line(previous[0], previous[1], x, y)
            self.circle(x, y, 1.5, style='F')
            if i == len(values) - 1:
                self.text_aligned(x, y - 4, format_currency(val), 'C')
            previous = (x, y)

    def draw_scale_chart(self, y: float, data: ReportData) -> float:
        """Annual cost at 1x-4x traffic; returns the y below the legend."""
        origin_x = (PAGE_WIDTH - SCALE_CHART_WIDTH) / 2
        origin_y = y + SCALE_CHART_HEIGHT + 5
        x_step = SCALE_CHART_WIDTH / (len(data.scale_points) - 1)

        self.set_draw_color(*GRID_GRAY)
        self.set_line_width(0.2)
        self.set_font('Helvetica', '', 8)
        self.set_text_color(150, 150, 150)
        for i, label in enumerate(data.grid_labels):
            grid_y = origin_y - i * (SCALE_CHART_HEIGHT / GRID_STEPS)
            self.line(origin_x, grid_y, origin_x + SCALE_CHART_WIDTH, grid_y)
            self.text_aligned(origin_x - 2, grid_y + 1, label, 'R')

        self._plot_series(origin_x, origin_y, x_step, data.annual_base,
                          data.scale_y_factor, BASELINE_LINE)
        self._plot_series(origin_x, origin_y, x_step, data.annual_optimized,
                          data.scale_y_factor, BRAND_GREEN)

        self.set_text_color(0, 0, 0)
        self.set_font('Helvetica', '', 8)
        for i, label in enumerate(data.scale_x_labels):
            self.text_aligned(origin_x + i * x_step, origin_y + 5, label, 'C')

        self.set_text_color(100, 100, 100)
        self.set_font('Helvetica', 'B', 8)
        self.text_aligned(origin_x + SCALE_CHART_WIDTH / 2, origin_y + 9,
                          "Monthly Request Volume", 'C')
        axis_x = origin_x - 13
        axis_y = origin_y - SCALE_CHART_HEIGHT / 2
        with self.rotation(90, axis_x, axis_y):
            self.text_aligned(axis_x, axis_y, "Annual Cost ($)", 'C')

        legend_y = origin_y + 15
        self.set_fill_color(*BASELINE_LINE)
        self.circle(origin_x + 10, legend_y - 1, 2, style='F')
        self.text(origin_x + 15, legend_y, "Baseline Cost")
        self.set_fill_color(*BRAND_GREEN)
        self.circle(origin_x + 50, legend_y - 1, 2, style='F')
        self.text(origin_x + 55, legend_y, f"With {COMPANY_NAME}")

        return legend_y + 10

    def interpretation(self, y: float, body: str) -> float:
        self.set_font('Helvetica', 'B', 9)
        self.set_text_color(*BRAND_DARK)
        self.text(LEFT, y, "Interpretation")
        return self.paragraph(y + 4, body)


def render_report(data: ReportData, generated_on: Optional[date] = None) -> bytes:
    """Lay out a prepared ReportData and return the PDF bytes."""
    pdf = ImpactReportPDF()
    pdf.add_page()
    pdf.draw_header_band(data.config_label, generated_on or date.today())

    # --- Executive summary ---
    y = pdf.heading(45, "Executive Summary")
    y = pdf.paragraph(y, EXEC_SUMMARY) + 10

    # --- Chart 1: monthly spend ---
    y = pdf.heading(y, "1. Projected Monthly Spend Reduction")
    pdf.draw_spend_chart(y, data)
    y += SPEND_CHART_HEIGHT + 12
    y = pdf.interpretation(y, data.spend_interpretation()) + 10

    # --- Chart 2: scale scenarios ---
    if y + 70 > 285:
        pdf.add_page()
        y = 20
    y = pdf.heading(y, "2. Cost Scenarios at Scale")
    y = pdf.draw_scale_chart(y, data)
    y = pdf.interpretation(y, SCALE_INTERPRETATION) + 4
    y = pdf.paragraph(y, SCALE_TAKEAWAY, color=BRAND_GREEN, style='B') + 20

    # --- Next step ---
    if y + 60 > 280:
        pdf.add_page()
        y = 20
    y = pdf.heading(y, "Next Step: Architecture-Specific Cost Analysis")
    y = pdf.paragraph(y, NEXT_STEP_INTRO) + 4
    pdf.text(LEFT, y, f"{COMPANY_NAME} offers an architecture-level analysis to identify:")
    y += 5
    for point in ANALYSIS_POINTS:
        pdf.text(LEFT + 4, y, sanitize_text(f"• {point}"))
        y += 5
    y = pdf.paragraph(y + 2, CLOSING_TEXT) + 5

    pdf.set_font('Helvetica', 'B', 9)
    pdf.text(LEFT, y, "To initiate a detailed architecture review, visit:")
    pdf.set_text_color(*BRAND_GREEN)
    pdf.text(85, y, CONTACT_URL)
    pdf.link(85, y - 3, pdf.get_string_width(CONTACT_URL), 4, CONTACT_URL)

    return bytes(pdf.output())


def generate_impact_report_pdf(workload: WorkloadInput,
                               generated_on: Optional[date] = None) -> bytes:
    """Build the executive report for a workload and return PDF bytes."""
    data = build_report_data(workload)
    pdf_bytes = render_report(data, generated_on)
    logger.info("Rendered impact report for %s (%d bytes)", data.config_label, len(pdf_bytes))
    return pdf_bytes
