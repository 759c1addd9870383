import logging
from pydantic import BaseModel, Field
from typing import List

from .config import config
from .errors import ValidationError
from .formatting import format_file_size
from .models import FileSelection

logger = logging.getLogger(__name__)

MAX_SIZE_TEXT = format_file_size(config.MAX_FILE_SIZE).replace(" ", "")  # "50MB"


class ValidationOutcome(BaseModel):
    ok: bool
    violations: List[str] = Field(default_factory=list)

    @property
    def message(self) -> str:
        return self.violations[0] if self.violations else ""


def _first_violation(selection: FileSelection) -> str:
    question = selection.question
    students = selection.students

    if question is None:
        return "Please select a question file."

    if not students:
        return "Please select at least one student answer file."

    # File types
    if question.media_type not in config.QUESTION_TYPES:
        return "Question file must be PDF or TXT format."

    for f in students:
        if f.media_type != config.STUDENT_TYPE:
            return "All student files must be PDF format."

    # File sizes
    if question.size > config.MAX_FILE_SIZE:
        return f"Question file is too large. Maximum size is {MAX_SIZE_TEXT}."

    for f in students:
        if f.size > config.MAX_FILE_SIZE:
            return f"File {f.name} is too large. Maximum size is {MAX_SIZE_TEXT}."

    return ""


def validate(selection: FileSelection) -> ValidationOutcome:
    """
    Check a selection against presence, type and size rules.
    Stops at the first problem, so at most one violation is reported.
    """
    violation = _first_violation(selection)
    if violation:
        return ValidationOutcome(ok=False, violations=[violation])
    return ValidationOutcome(ok=True)


def ensure_valid(selection: FileSelection) -> None:
    outcome = validate(selection)
    if not outcome.ok:
        logger.warning(f"Selection rejected: {outcome.message}")
        raise ValidationError(outcome.message)
