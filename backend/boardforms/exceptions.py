from typing import Dict, Optional


class BoardFormsError(Exception):
    """Base class for errors raised by boardforms."""


class SubmissionError(BoardFormsError):
    """The submission could not be delivered (network, server error)."""


class FormInactiveError(SubmissionError):
    """The form no longer accepts submissions."""


class SubmissionRejectedError(SubmissionError):
    """The server re-validated the answers and refused them."""

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.errors = errors or {}


class WorkItemError(BoardFormsError):
    """The external work-item API failed or returned GraphQL errors."""
