from .client import EvaluationClient
from .controller import State, SubmissionController
from .errors import ApplicationError, GradePortalError, TransportError, ValidationError
from .models import EvaluationResponse, FileSelection, SelectedFile
from .page import EvaluationPage
from .validator import validate

__all__ = [
    "EvaluationClient",
    "State",
    "SubmissionController",
    "ApplicationError",
    "GradePortalError",
    "TransportError",
    "ValidationError",
    "EvaluationResponse",
    "FileSelection",
    "SelectedFile",
    "EvaluationPage",
    "validate",
]
