"""
Turns an EvaluationResponse into report view models and HTML fragments.

Everything here is a pure function of the payload: no network access and no
mutation of the response, so rendering the same response twice yields equal
reports.
"""

from dataclasses import dataclass, field
from enum import Enum
from html import escape
from typing import List, Optional
from urllib.parse import quote

from .config import config
from .models import EvaluationResponse, EvaluationResult, PlagiarismCase, SummaryStats

NO_FEEDBACK = "No feedback available"
MAX_PHRASES = 3


def _pct(value: float, digits: int) -> str:
    return f"{value * 100:.{digits}f}%"

# ================= VIEW MODELS =================

@dataclass
class StatCard:
    number: int
    label: str
    css_class: str

    def to_html(self) -> str:
        return (
            '<div class="stat-card">'
            f'<div class="stat-number {self.css_class}">{self.number}</div>'
            f'<div class="stat-label">{escape(self.label)}</div>'
            '</div>'
        )


@dataclass
class ResultRow:
    student_id: str
    filename: str
    score_text: str
    metrics_text: Optional[str]
    grade: str
    status: str  # "Pass" | "Fail"
    feedback: str

    @property
    def passed(self) -> bool:
        return self.status == "Pass"

    @property
    def grade_class(self) -> str:
        return f"grade-badge grade-{self.grade}"

    def to_html(self) -> str:
        metrics = f'<br><small class="muted">{escape(self.metrics_text)}</small>' if self.metrics_text else ""
        status_class = "pass" if self.passed else "fail"
        mark = "✓" if self.passed else "✗"
        return (
            "<tr>"
            f'<td><strong>{escape(self.student_id)}</strong><br><small class="muted">{escape(self.filename)}</small></td>'
            f"<td><strong>{self.score_text}</strong>{metrics}</td>"
            f'<td><span class="{escape(self.grade_class)}">{escape(self.grade)}</span></td>'
            f'<td><span class="{status_class}">{mark} {self.status}</span></td>'
            f'<td><div class="feedback">{escape(self.feedback)}</div></td>'
            "</tr>"
        )


class PlagiarismMode(str, Enum):
    NONE = "none"        # nothing compared
    CLEAR = "clear"      # compared, nothing flagged
    FLAGGED = "flagged"  # at least one flagged pair


@dataclass
class PlagiarismBlock:
    student_1: str
    student_2: str
    similarity_text: str
    severity: str
    critical: bool
    common_phrases: List[str] = field(default_factory=list)

    def to_html(self) -> str:
        css = "plagiarism-item plagiarism-critical" if self.critical else "plagiarism-item"
        risk_class = "risk-critical" if self.critical else "risk"
        phrases = ""
        if self.common_phrases:
            joined = ", ".join(escape(p) for p in self.common_phrases)
            phrases = f'<div class="phrases"><strong>Common phrases:</strong> {joined}</div>'
        return (
            f'<div class="{css}">'
            f"<strong>{escape(self.student_1)} vs {escape(self.student_2)}</strong>"
            f'<div><span class="similarity">Similarity: {self.similarity_text}</span>'
            f'<span class="{risk_class}">{escape(self.severity)} Risk</span></div>'
            f"{phrases}"
            "</div>"
        )


@dataclass
class PlagiarismSection:
    mode: PlagiarismMode
    title: str
    banner: str
    banner_kind: str  # "success" | "error"
    blocks: List[PlagiarismBlock] = field(default_factory=list)

    def to_html(self) -> str:
        parts = [
            f"<h3>{escape(self.title)}</h3>",
            f'<div class="alert alert-{self.banner_kind}">{escape(self.banner)}</div>',
        ]
        parts.extend(b.to_html() for b in self.blocks)
        return "\n".join(parts)


@dataclass
class DownloadLink:
    filename: str
    href: str
    label: str = "📊 Download Excel Report"

    def to_html(self) -> str:
        return (
            f'<a href="{escape(self.href)}" class="download-btn" target="_blank">{escape(self.label)}</a>'
            '<br><br><small class="muted">Report includes detailed metrics, analytics, '
            "and personalized feedback for each student.</small>"
        )


@dataclass
class Report:
    summary: List[StatCard]
    rows: List[ResultRow]
    plagiarism: PlagiarismSection
    download: Optional[DownloadLink] = None

    def to_html(self) -> str:
        cards = "\n".join(c.to_html() for c in self.summary)
        rows = "\n".join(r.to_html() for r in self.rows)
        download = self.download.to_html() if self.download else ""
        return f"""<div id="summaryStats" class="stats">
{cards}
</div>
<table class="results">
<thead><tr><th>Student</th><th>Score</th><th>Grade</th><th>Status</th><th>Feedback</th></tr></thead>
<tbody id="resultsTableBody">
{rows}
</tbody>
</table>
<div id="plagiarismSection">
{self.plagiarism.to_html()}
</div>
<div id="downloadSection">{download}</div>"""

# ================= RENDERING =================

def render_summary(summary: SummaryStats) -> List[StatCard]:
    # Server figures are shown as sent, not recomputed from the result list
    return [
        StatCard(summary.total_students, "Total Students", "info"),
        StatCard(summary.passed, "Passed", "pass"),
        StatCard(summary.failed, "Failed", "fail"),
        StatCard(summary.plagiarism_cases, "Plagiarism Cases", "warning" if summary.plagiarism_cases > 0 else "pass"),
    ]


def _metrics_text(result: EvaluationResult) -> Optional[str]:
    m = result.metrics
    if m is None or (m.tfidf_score is None and m.sbert_score is None):
        return None
    tfidf = _pct(m.tfidf_score, 0) if m.tfidf_score is not None else "n/a"
    sbert = _pct(m.sbert_score, 0) if m.sbert_score is not None else "n/a"
    return f"TF-IDF: {tfidf} | SBERT: {sbert}"


def render_row(result: EvaluationResult) -> ResultRow:
    return ResultRow(
        student_id=result.student_id,
        filename=result.filename,
        score_text=_pct(result.score, 1),
        metrics_text=_metrics_text(result),
        grade=result.grade,
        status="Pass" if result.passed else "Fail",
        feedback=result.feedback or NO_FEEDBACK,
    )


def render_results(results: List[EvaluationResult]) -> List[ResultRow]:
    return [render_row(r) for r in results]


def render_plagiarism(cases: List[PlagiarismCase]) -> PlagiarismSection:
    if not cases:
        return PlagiarismSection(
            mode=PlagiarismMode.NONE,
            title="\U0001f6e1️ Plagiarism Detection",
            banner="No plagiarism detected. All submissions appear to be original.",
            banner_kind="success",
        )

    flagged = [c for c in cases if c.is_plagiarism]
    title = "\U0001f6a8 Plagiarism Detection Results"

    if not flagged:
        highest = max(c.combined_similarity for c in cases)
        return PlagiarismSection(
            mode=PlagiarismMode.CLEAR,
            title=title,
            banner=f"No significant plagiarism detected. Maximum similarity: {_pct(highest, 1)}",
            banner_kind="success",
        )

    blocks = [
        PlagiarismBlock(
            student_1=c.student_1,
            student_2=c.student_2,
            similarity_text=_pct(c.combined_similarity, 1),
            severity=c.severity,
            critical=c.is_critical,
            common_phrases=list(c.common_phrases[:MAX_PHRASES]),
        )
        for c in flagged
    ]
    return PlagiarismSection(
        mode=PlagiarismMode.FLAGGED,
        title=title,
        banner=f"⚠️ {len(flagged)} potential plagiarism case(s) detected!",
        banner_kind="error",
        blocks=blocks,
    )


def download_href(filename: str, base_url: Optional[str] = None) -> str:
    base = (base_url if base_url is not None else config.EVALUATION_SERVICE_URL).rstrip("/")
    return f"{base}{config.DOWNLOAD_PATH}/{quote(filename)}"


def render_download(report_filename: Optional[str], base_url: Optional[str] = None) -> Optional[DownloadLink]:
    if not report_filename:
        return None
    return DownloadLink(filename=report_filename, href=download_href(report_filename, base_url))


def render_report(response: EvaluationResponse, base_url: Optional[str] = None) -> Report:
    """Build the full report view for a successful evaluation."""
    if response.summary is None:
        raise ValueError("Cannot render a response without summary statistics")
    return Report(
        summary=render_summary(response.summary),
        rows=render_results(response.results),
        plagiarism=render_plagiarism(response.plagiarism),
        download=render_download(response.report_filename, base_url),
    )
