"""
Prescription Fraud Detector: Gradio dashboard.

Lets a user pick a hospital, year and quarter, fetches the precomputed fraud
report and the top suspicious prescriptions from the fraud backend, and renders
metrics, charts and a cases table. The rendered view can be exported as PDF.

Screens:
  - Filters:   hospital / year / quarter selection and the Run button
  - Dashboard: Overview tab (banner, metric cards, charts) and Cases tab

Navigation uses gr.Group visibility toggling; no screen change refetches data
except Run.
"""
import sys
import logging
from pathlib import Path
from typing import Optional

# Ensure project root is on sys.path when run from dashboard_app/ directly
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import gradio as gr

from fraudcore import config
from fraudcore.api.client import FraudApiClient, default_client
from fraudcore.errors import ExportError
from fraudcore.export.pdf import export_dashboard_pdf, export_snapshot_json
from fraudcore.report.derive import EMPTY_BAR_MSG, EMPTY_LINE_MSG, EMPTY_PIE_MSG
from dashboard_app import state as page_state
from dashboard_app.state import PAGES, TABS
from dashboard_app.ui import charts
from dashboard_app.ui.components import (
    alert_html, backend_status_html, chart_empty_html, metric_cards_html,
    risk_banner_html, top_cases_table_html,
)
from dashboard_app.ui.pages import dashboard as dashboard_page
from dashboard_app.ui.pages import filters as filters_page

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

APP_TITLE = config.APP_TITLE


# ─────────────────────────── CSS Design System ───────────────────────────────

FD_CSS = """
@import url('https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700&display=swap');

.gradio-container {
    font-family: 'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif !important;
    max-width: 100% !important;
    padding: 0 24px !important;
    background: #f0f2f5 !important;
}

.fd-header { padding: 20px 4px 8px 4px; }
.fd-title { font-size: 1.6rem; font-weight: 600; color: #202124; margin: 0; }
.fd-subtitle { color: #5f6368; font-size: 0.9rem; margin: 4px 0 0 0; }
.fd-muted { color: #5f6368; font-size: 0.85rem; }

/* Status Alerts */
.fd-alert {
    padding: 10px 14px;
    border-radius: 8px;
    font-size: 0.875rem;
    font-weight: 500;
    margin: 8px 0;
}
.fd-alert-error { background: #fce8e6; color: #c5221f; border: 1px solid #f5c6cb; }
.fd-alert-info { background: #e8f0fe; color: #1967d2; border: 1px solid #d2e3fc; }

/* Placeholder */
.fd-placeholder {
    text-align: center;
    padding: 80px 24px;
    color: #5f6368;
    border: 1px dashed #dadce0;
    border-radius: 12px;
    background: #ffffff;
}
.fd-placeholder-cta { font-weight: 600; color: #1a73e8; font-size: 1.1rem; }

/* Risk banner */
.fd-risk-banner {
    background: #ffffff;
    border: 1px solid #e0e0e0;
    border-radius: 12px;
    padding: 16px 20px;
    margin-bottom: 12px;
}
.fd-risk-banner-main { display: flex; align-items: center; gap: 12px; }
.fd-risk-label { font-weight: 600; color: #202124; }
.fd-risk-badge {
    color: #ffffff;
    font-weight: 700;
    padding: 4px 14px;
    border-radius: 16px;
    font-size: 0.8rem;
    letter-spacing: 0.04em;
}
.fd-risk-period { margin-left: auto; color: #5f6368; font-size: 0.85rem; }
.fd-risk-summary { color: #3c4043; margin: 10px 0 0 0; line-height: 1.5; }

/* Metrics - 3 per row */
.fd-metrics-grid {
    display: grid;
    grid-template-columns: repeat(3, 1fr);
    gap: 12px;
    margin-bottom: 12px;
}
.fd-metric-card {
    display: flex;
    flex-direction: column;
    gap: 6px;
    background: #ffffff;
    border: 1px solid #e0e0e0;
    border-radius: 12px;
    padding: 14px 16px;
}
.fd-metric-label { color: #5f6368; font-size: 0.8rem; }
.fd-metric-value { font-size: 1.6rem; font-weight: 700; color: #202124; }
.fd-metric-high { color: #FF4D4F; }
.fd-metric-medium { color: #FFA940; }
.fd-metric-low { color: #52C41A; }

/* Charts */
.fd-chart-card { background: #ffffff; border-radius: 12px; padding: 14px 16px; min-height: 260px; }
.fd-chart-title { font-size: 0.95rem; font-weight: 600; margin: 0 0 8px 0; }
.fd-chart-empty { color: #5f6368; font-size: 0.875rem; }

/* Table */
.fd-table { width: 100%; border-collapse: collapse; background: #ffffff; border-radius: 8px; }
.fd-th {
    text-align: left;
    padding: 10px 12px;
    font-size: 0.75rem;
    text-transform: uppercase;
    color: #5f6368;
    border-bottom: 1px solid #e0e0e0;
}
.fd-td { padding: 10px 12px; font-size: 0.85rem; border-bottom: 1px solid #f1f3f4; }
.fd-score { font-variant-numeric: tabular-nums; font-weight: 600; }
.fd-pill { display: inline-block; padding: 2px 10px; border-radius: 12px; font-size: 0.75rem; font-weight: 600; }
.fd-pill-high { background: #fce8e6; color: #c5221f; }
.fd-pill-medium { background: #fef7e0; color: #b06000; }
.fd-pill-low { background: #e6f4ea; color: #137333; }

/* Backend status */
.fd-backend-status { color: #5f6368; font-size: 0.8rem; margin-top: 8px; }
.fd-dot { display: inline-block; width: 8px; height: 8px; border-radius: 50%; margin-right: 6px; }
.fd-dot-green { background: #34a853; }
.fd-dot-red   { background: #ea4335; }
.fd-dot-grey  { background: #9aa0a6; }
"""


# ─────────────────────────── Theme ──────────────────────────────────────

light_theme = gr.themes.Base(
    primary_hue=gr.themes.colors.blue,
    neutral_hue=gr.themes.colors.gray,
    font=["Inter", "-apple-system", "BlinkMacSystemFont", "Segoe UI", "Roboto", "sans-serif"],
)
light_theme.set(
    body_background_fill="#f0f2f5",
    body_text_color="#202124",
    block_background_fill="#ffffff",
    block_border_color="#e0e0e0",
    input_border_color="#dadce0",
    button_primary_background_fill="#1a73e8",
    button_primary_text_color="#ffffff",
    shadow_drop="none",
)


# ─────────────────────────── View helpers ────────────────────────────────

def _set_views(page: str) -> tuple:
    """Return gr.update() for each page view in PAGES order."""
    return tuple(gr.update(visible=(page == p)) for p in PAGES)


def _tab_views(tab: str) -> tuple:
    """Visibility for each tab group in TABS order, plus the toggle button label."""
    label = "Top Cases" if tab == "overview" else "Overview"
    return tuple(gr.update(visible=(tab == t)) for t in TABS) + (gr.update(value=label),)


def _chart_updates(fig, title: str, empty_msg: str) -> tuple:
    if fig is None:
        return gr.update(value=None, visible=False), gr.update(value=chart_empty_html(title, empty_msg), visible=True)
    return gr.update(value=fig, visible=True), gr.update(value="", visible=False)


def _dashboard_values(st: dict) -> tuple:
    """banner, metrics, 3x (plot, empty), cases table, export file."""
    report = st.get("report")
    return (
        risk_banner_html(report),
        metric_cards_html(report),
        *_chart_updates(charts.bar_figure(report), "Top Suspicious Drugs", EMPTY_BAR_MSG),
        *_chart_updates(charts.line_figure(report), "Fraud Trend (Last 3 Months)", EMPTY_LINE_MSG),
        *_chart_updates(charts.pie_figure(report), "Risk Distribution", EMPTY_PIE_MSG),
        top_cases_table_html(st.get("cases") or []),
        gr.update(value=None, visible=False),
    )


def _filter_updates(st: dict) -> tuple:
    """status, hospital, year, quarter, run button after startup."""
    hospitals = st["hospitals"]
    years = st["years"]
    ready = not st["hospitals_loading"]
    status = alert_html(st["hospitals_error"], "error") if st["hospitals_error"] else ""
    return (
        status,
        gr.update(
            choices=[(h.label, h.id) for h in hospitals],
            value=st["hospital_id"] or None,
            interactive=ready and bool(hospitals),
        ),
        gr.update(choices=years, value=st["year"], interactive=ready and bool(years)),
        gr.update(interactive=ready),
        gr.update(interactive=ready),
    )


# ─────────────────────────── Main Blocks app ─────────────────────────────

def main(client: Optional[FraudApiClient] = None) -> gr.Blocks:
    client = client or default_client()

    with gr.Blocks(title=APP_TITLE, theme=light_theme, css=FD_CSS) as demo:
        state = gr.State(page_state.default_state())

        gr.HTML(f'''<div class="fd-header">
            <h1 class="fd-title">{APP_TITLE}</h1>
            <p class="fd-subtitle">Detect unusual prescribing patterns across hospitals using AI-driven scoring.</p>
        </div>''')

        # ═══════════════════════════════════════════════════════════════════
        # FILTERS VIEW
        # ═══════════════════════════════════════════════════════════════════
        filters_view = gr.Group(visible=True)
        with filters_view:
            f = filters_page.build()

        # ═══════════════════════════════════════════════════════════════════
        # DASHBOARD VIEW
        # ═══════════════════════════════════════════════════════════════════
        dashboard_view = gr.Group(visible=False)
        with dashboard_view:
            d = dashboard_page.build()

        # must match PAGES / TABS order
        all_views = [filters_view, dashboard_view]
        tab_outputs = [d["overview"], d["cases"], d["tab_btn"]]
        dashboard_outputs = [
            d["banner"], d["metrics"],
            d["bar_plot"], d["bar_empty"],
            d["line_plot"], d["line_empty"],
            d["pie_plot"], d["pie_empty"],
            d["cases_table"], d["export_file"],
        ]
        filter_outputs = [f["status"], f["hospital"], f["year"], f["quarter"], f["run_btn"]]

        # ═══════════════════════════════════════════════════════════════════
        # EVENT HANDLERS
        # ═══════════════════════════════════════════════════════════════════

        def do_startup(st: dict):
            st = page_state.startup(client, st)
            return (st,) + _filter_updates(st)

        def check_backend():
            return backend_status_html(client.base_url, client.ping())

        def do_run(hospital_id, year, quarter, st: dict):
            try:
                st = page_state.run(client, st, hospital_id, year, quarter)
            except Exception as e:
                logger.exception("Run failed")
                st["report"] = None
                st["cases"] = []
                st["error"] = str(e) or page_state.RUN_ERROR_MSG
            return (
                (st, alert_html(st["error"], "error"))
                + _set_views(st["page"])
                + _tab_views(st["tab"])
                + _dashboard_values(st)
            )

        def do_toggle_tab(st: dict):
            st = page_state.toggle_tab(st)
            return (st,) + _tab_views(st["tab"])

        def do_back(st: dict):
            st = page_state.back_to_filters(st)
            return (st,) + _set_views(st["page"])

        def _selection_parts(st: dict):
            sel = st.get("selection")
            if sel is None:
                return st.get("year"), st.get("quarter")
            return sel.year, sel.quarter

        def do_export_pdf(st: dict):
            year, quarter = _selection_parts(st)
            try:
                path = export_dashboard_pdf(
                    st.get("report"), st.get("cases") or [], year, quarter, tab=st.get("tab", "overview"),
                )
            except ExportError as e:
                logger.error("Export failed: %s", e)
                raise gr.Error(f"Export failed: {e}")
            return gr.update(visible=True, value=str(path))

        def do_export_json(st: dict):
            year, quarter = _selection_parts(st)
            try:
                path = export_snapshot_json(st.get("report"), st.get("cases") or [], year, quarter)
            except ExportError as e:
                logger.error("Export failed: %s", e)
                raise gr.Error(f"Export failed: {e}")
            return gr.update(visible=True, value=str(path))

        # ═══════════════════════════════════════════════════════════════════
        # WIRE UP BUTTONS
        # ═══════════════════════════════════════════════════════════════════

        # Run: disable the button while both requests are in flight
        f["run_btn"].click(
            lambda: gr.update(interactive=False, value=filters_page.RUNNING_LABEL),
            outputs=[f["run_btn"]],
        ).then(
            do_run,
            inputs=[f["hospital"], f["year"], f["quarter"], state],
            outputs=[state, f["error"]] + all_views + tab_outputs + dashboard_outputs,
        ).then(
            lambda: gr.update(interactive=True, value=filters_page.RUN_LABEL),
            outputs=[f["run_btn"]],
        )

        d["tab_btn"].click(do_toggle_tab, inputs=[state], outputs=[state] + tab_outputs)
        d["back_btn"].click(do_back, inputs=[state], outputs=[state] + all_views)
        d["export_pdf_btn"].click(do_export_pdf, inputs=[state], outputs=[d["export_file"]])
        d["export_json_btn"].click(do_export_json, inputs=[state], outputs=[d["export_file"]])

        # Initial load: hospitals + years, then backend status
        demo.load(
            do_startup, inputs=[state], outputs=[state] + filter_outputs,
        ).then(
            check_backend, outputs=[f["backend"]],
        )

    return demo


if __name__ == "__main__":
    app = main()
    app.launch()
