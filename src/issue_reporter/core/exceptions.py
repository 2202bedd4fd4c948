"""
Exceptions raised by the issue reporter.
"""

from typing import Optional


class ReportValidationError(ValueError):
    """An inbound report is missing required fields or has the wrong shape."""


class TicketSubmissionError(Exception):
    """The ticket system rejected or failed to create the issue."""

    def __init__(self, message: str, status_code: int = 0, response_text: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text or ""


class TicketNotFoundError(LookupError):
    """No stored projection exists for the requested ticket id."""


class UploadError(Exception):
    """A screenshot could not be stored in object storage."""


class ReportCancelledError(Exception):
    """The caller cancelled the request before all steps ran."""
