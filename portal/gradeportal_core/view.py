"""In-memory page state shared by the portal components."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .models import FileSelection, SelectedFile
from .renderer import Report

QUESTION_FIELD = "question_file"
STUDENT_FIELD = "student_files"


@dataclass
class FileInput:
    """A file picker and the info label shown next to it."""
    field_name: str
    multiple: bool = False
    files: List[SelectedFile] = field(default_factory=list)
    info: Optional[str] = None
    highlighted: bool = False

    @property
    def first(self) -> Optional[SelectedFile]:
        return self.files[0] if self.files else None


@dataclass
class Notification:
    message: str
    kind: str  # "success" | "error"

    @property
    def css_class(self) -> str:
        return "alert-error" if self.kind == "error" else "alert-success"


@dataclass
class ViewContext:
    question_input: FileInput = field(default_factory=lambda: FileInput(QUESTION_FIELD))
    student_input: FileInput = field(default_factory=lambda: FileInput(STUDENT_FIELD, multiple=True))

    # Form controls
    use_openai: bool = False
    use_vision: bool = False
    form_fields: Dict[str, str] = field(default_factory=dict)

    # Visual state
    submit_enabled: bool = False
    loading_visible: bool = False
    results_visible: bool = False
    report: Optional[Report] = None
    notification: Optional[Notification] = None

    def selection(self) -> FileSelection:
        return FileSelection(
            question=self.question_input.first,
            students=list(self.student_input.files),
        )
