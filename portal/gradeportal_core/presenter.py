from .formatting import format_file_size
from .view import ViewContext


class FileInfoPresenter:
    """Keeps the file info labels and the submit control in sync with the selection."""

    def __init__(self, view: ViewContext):
        self.view = view

    def can_submit(self) -> bool:
        # Presence only; full validation runs again at submit time
        return bool(self.view.question_input.files) and bool(self.view.student_input.files)

    def refresh(self):
        question = self.view.question_input
        students = self.view.student_input

        if question.files:
            f = question.first
            question.info = f"{f.name} ({format_file_size(f.size)})"
        else:
            question.info = None

        if students.files:
            total = sum(f.size for f in students.files)
            students.info = f"{len(students.files)} files selected ({format_file_size(total)} total)"
        else:
            students.info = None

        # Stay disabled while a submission is in flight
        self.view.submit_enabled = self.can_submit() and not self.view.loading_visible
