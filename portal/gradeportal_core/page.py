import asyncio
from html import escape
from typing import Iterable, Optional

from .client import EvaluationClient
from .controller import SubmissionController
from .dragdrop import DragDropAdapter, DragEvent
from .health import HealthProbe
from .models import SelectedFile
from .notifications import NotificationCenter
from .presenter import FileInfoPresenter
from .view import FileInput, ViewContext

STYLES = """
body { font-family: sans-serif; margin: 2rem; color: #333; }
.alert { padding: 10px 15px; border-radius: 6px; margin: 10px 0; }
.alert-success { background: #d4edda; color: #155724; }
.alert-error { background: #f8d7da; color: #721c24; }
.file-info { margin-top: 5px; font-size: 0.85rem; color: #28a745; font-weight: 500; }
.drag-highlight { border-color: #4472C4; background-color: #f0f4f8; }
.stats { display: flex; gap: 1rem; }
.stat-card { border: 1px solid #ddd; border-radius: 6px; padding: 1rem; text-align: center; }
.stat-number { font-size: 1.8rem; font-weight: 700; }
.info { color: #4472C4; } .pass { color: #28a745; } .fail { color: #dc3545; } .warning { color: #ffc107; }
.results { border-collapse: collapse; width: 100%; margin-top: 1rem; }
.results td, .results th { border-bottom: 1px solid #eee; padding: 8px; text-align: left; vertical-align: top; }
.muted { color: #666; }
.feedback { max-width: 300px; word-wrap: break-word; }
.grade-badge { padding: 2px 8px; border-radius: 4px; background: #eee; font-weight: 600; }
.plagiarism-item { border-left: 4px solid #ffc107; padding: 8px 12px; margin: 8px 0; }
.plagiarism-critical { border-left-color: #dc3545; }
.risk { margin-left: 15px; color: #ffc107; } .risk-critical { margin-left: 15px; color: #dc3545; }
.phrases { margin-top: 10px; font-size: 0.9rem; color: #666; }
"""


class EvaluationPage:
    """
    The evaluation form and its report, wired onto one ViewContext.
    """

    def __init__(self, client: Optional[EvaluationClient] = None, view: Optional[ViewContext] = None):
        self.view = view or ViewContext()
        self.client = client or EvaluationClient()
        self.notifications = NotificationCenter(self.view)
        self.presenter = FileInfoPresenter(self.view)
        self.controller = SubmissionController(self.view, self.client, self.notifications)
        self.health_probe = HealthProbe(self.client, self.notifications)
        self.drop_zones = {
            "question": DragDropAdapter(self.view.question_input, self.presenter.refresh),
            "students": DragDropAdapter(self.view.student_input, self.presenter.refresh),
        }

    # ================= EVENTS =================

    def select_question(self, files: Iterable[SelectedFile]):
        self.view.question_input.files = list(files)
        self.presenter.refresh()

    def select_students(self, files: Iterable[SelectedFile]):
        self.view.student_input.files = list(files)
        self.presenter.refresh()

    def drag(self, zone: str, event: DragEvent):
        self.drop_zones[zone].handle(event)

    async def start(self) -> asyncio.Task:
        """Initial selection refresh, then the health probe in the background."""
        self.presenter.refresh()
        return asyncio.ensure_future(self.health_probe.run())

    async def submit(self):
        return await self.controller.submit()

    # ================= HTML =================

    def _input_html(self, label: str, file_input: FileInput) -> str:
        css = "file-input-container drag-highlight" if file_input.highlighted else "file-input-container"
        info = f'<div class="file-info">{escape(file_input.info)}</div>' if file_input.info else ""
        return f'<div class="{css}"><label>{escape(label)}</label>{info}</div>'

    def render_html(self, title: str = "Evaluation Report") -> str:
        view = self.view
        alert = ""
        if view.notification is not None:
            alert = f'<div class="alert {view.notification.css_class}">{escape(view.notification.message)}</div>'
        loading = '<div id="loadingSection">Evaluating submissions...</div>' if view.loading_visible else ""
        results = ""
        if view.results_visible and view.report is not None:
            results = f'<section id="resultsSection">\n{view.report.to_html()}\n</section>'
        disabled = "" if view.submit_enabled else " disabled"

        return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{escape(title)}</title>
<style>{STYLES}</style>
</head>
<body>
<div id="alertContainer">{alert}</div>
<form id="evaluationForm">
{self._input_html("Question File", view.question_input)}
{self._input_html("Student Answer Files", view.student_input)}
<button id="evaluateBtn" type="submit"{disabled}>Evaluate</button>
</form>
{loading}
{results}
</body>
</html>
"""
