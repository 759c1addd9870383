from typing import Optional


class GradePortalError(Exception):
    """Base class for everything that can end a submission attempt."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GradePortalError):
    """The current file selection cannot be submitted. Never reaches the network."""


class TransportError(GradePortalError):
    """The request could not be completed or the response body was unusable."""


class ApplicationError(GradePortalError):
    """The service answered but reported a failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
