"""Filters page: hospital / year / quarter selection and the Run button."""
import gradio as gr

from fraudcore import config
from dashboard_app.state import QUARTER_CHOICES
from dashboard_app.ui.components import backend_status_html, placeholder_html

RUN_LABEL = "Run Fraud Detector"
RUNNING_LABEL = "Running..."


def build():
    """Build filter page components. Returns dict of key components."""
    with gr.Row(equal_height=False):
        with gr.Column(scale=1, elem_classes=["fd-panel"]):
            gr.Markdown("## Filters")
            status = gr.HTML('<p class="fd-muted">Loading hospitals &amp; years...</p>')

            hospital = gr.Dropdown(label="Hospital", choices=[], interactive=False)
            year = gr.Dropdown(label="Year", choices=[], interactive=False)
            quarter = gr.Dropdown(label="Quarter", choices=QUARTER_CHOICES, value="", interactive=False)

            error = gr.HTML()
            run_btn = gr.Button(RUN_LABEL, variant="primary", size="lg", interactive=False)
            backend = gr.HTML(backend_status_html(config.API_BASE_URL, None))

        with gr.Column(scale=2):
            gr.HTML(placeholder_html())

    return {
        "status": status,
        "hospital": hospital,
        "year": year,
        "quarter": quarter,
        "error": error,
        "run_btn": run_btn,
        "backend": backend,
    }
