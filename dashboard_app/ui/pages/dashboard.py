"""Dashboard page: risk banner, metrics, charts (overview tab) and top cases (cases tab)."""
import gradio as gr


def build():
    with gr.Row(elem_classes=["fd-toolbar"]):
        back_btn = gr.Button("Back to Filters", size="sm")
        tab_btn = gr.Button("Top Cases", size="sm")
        export_pdf_btn = gr.Button("Export PDF", size="sm", variant="primary")
        export_json_btn = gr.Button("Export JSON", size="sm")
    export_file = gr.File(label="Download", visible=False)

    overview = gr.Group(visible=True)
    with overview:
        banner = gr.HTML()
        metrics = gr.HTML()
        with gr.Row(equal_height=True):
            with gr.Column(elem_classes=["fd-chart-col"]):
                bar_plot = gr.Plot(show_label=False)
                bar_empty = gr.HTML(visible=False)
            with gr.Column(elem_classes=["fd-chart-col"]):
                line_plot = gr.Plot(show_label=False)
                line_empty = gr.HTML(visible=False)
            with gr.Column(elem_classes=["fd-chart-col"]):
                pie_plot = gr.Plot(show_label=False)
                pie_empty = gr.HTML(visible=False)

    cases = gr.Group(visible=False)
    with cases:
        gr.Markdown("### Top Suspicious Prescriptions")
        cases_table = gr.HTML()

    return {
        "back_btn": back_btn,
        "tab_btn": tab_btn,
        "export_pdf_btn": export_pdf_btn,
        "export_json_btn": export_json_btn,
        "export_file": export_file,
        "overview": overview,
        "banner": banner,
        "metrics": metrics,
        "bar_plot": bar_plot,
        "bar_empty": bar_empty,
        "line_plot": line_plot,
        "line_empty": line_empty,
        "pie_plot": pie_plot,
        "pie_empty": pie_empty,
        "cases": cases,
        "cases_table": cases_table,
    }
