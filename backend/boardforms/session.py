"""Respondent-side state for filling in one form.

A :class:`FormSession` owns the Answer Snapshot of a single respondent. The
visible field list is derived from it on every read; per-field errors are only
recomputed when the respondent tries to submit, so a half-typed answer does not
light up as invalid.

Submission is the only asynchronous step. The session hands a
:class:`SubmissionRequest` to an awaitable ``send`` callable (see
:meth:`boardforms.client.FormsApiClient.transport`) and turns its outcome into
session state instead of letting it propagate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Mapping, Optional

from boardforms.exceptions import (
    FormInactiveError,
    SubmissionError,
    SubmissionRejectedError,
)
from boardforms.rules import is_visible, visible_fields
from boardforms.schemas import Form, FormField
from boardforms.validation import validate

logger = logging.getLogger(__name__)

REDIRECT_DELAY_SECONDS = 2.0
GENERIC_FAILURE = "An error occurred. Please try again."


@dataclass
class SubmissionRequest:
    formId: str
    answers: Dict[str, str]
    externalItemId: Optional[str] = None


@dataclass
class SubmissionResult:
    message: str
    redirectUrl: Optional[str] = None


SendFn = Callable[[SubmissionRequest], Awaitable[SubmissionResult]]


class SessionStatus(str, Enum):
    EDITING = "editing"
    SUBMITTED = "submitted"
    CLOSED = "closed"


def seed_answers(form: Form, prefill: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Start every field at "" and copy in prefill values for known field ids."""
    answers = {f.id: "" for f in form.fields}
    for key, value in (prefill or {}).items():
        if key in answers and value is not None:
            answers[key] = str(value)
    return answers


def build_payload(form: Form, snapshot: Mapping[str, str]) -> Dict[str, str]:
    """Answers of the fields visible right now, in form order."""
    return {
        f.id: snapshot.get(f.id) or ""
        for f in form.fields
        if is_visible(f, snapshot)
    }


class FormSession:
    def __init__(
        self,
        form: Form,
        prefill: Optional[Mapping[str, str]] = None,
        external_item_id: Optional[str] = None,
    ):
        self.form = form
        self.external_item_id = external_item_id
        self.answers: Dict[str, str] = seed_answers(form, prefill)
        self.errors: Dict[str, str] = {}
        self.status = SessionStatus.EDITING
        self.submitting = False
        self.banner: Optional[str] = None
        self.message = ""
        self.redirect_url: Optional[str] = None
        self.redirect_delay = REDIRECT_DELAY_SECONDS

    @property
    def visible_fields(self) -> List[FormField]:
        return visible_fields(self.form, self.answers)

    @property
    def can_submit(self) -> bool:
        return self.status == SessionStatus.EDITING and not self.submitting

    def value(self, field_id: str) -> str:
        return self.answers.get(field_id) or ""

    def set_answer(self, field_id: str, value: str) -> None:
        self.answers[field_id] = value
        # Only this field's error goes away; others wait for the next submit
        self.errors.pop(field_id, None)

    def validate(self) -> bool:
        self.errors = validate(self.form, self.answers)
        return not self.errors

    def payload(self) -> Dict[str, str]:
        return build_payload(self.form, self.answers)

    def dismiss_banner(self) -> None:
        self.banner = None

    async def submit(self, send: SendFn) -> bool:
        """
        Validate and send the visible answers.

        Returns True once the form is submitted. Returns False when validation
        fails, when a submit is already in flight, when the session is no
        longer editable, or when sending fails (the failure is kept in
        `banner` and the answers are left untouched for a retry).
        """
        if not self.can_submit:
            return False
        if not self.validate():
            return False

        request = SubmissionRequest(
            formId=self.form.id,
            answers=self.payload(),
            externalItemId=self.external_item_id,
        )

        self.submitting = True
        self.banner = None
        try:
            result = await send(request)
        except FormInactiveError as e:
            self.status = SessionStatus.CLOSED
            self.banner = str(e) or "This form is no longer active"
            return False
        except SubmissionRejectedError as e:
            self.errors.update(e.errors)
            self.banner = str(e) or GENERIC_FAILURE
            return False
        except SubmissionError as e:
            logger.warning(f"Submission of form {self.form.id} failed: {e}")
            self.banner = GENERIC_FAILURE
            return False
        except Exception:
            logger.exception(f"Unexpected error while submitting form {self.form.id}")
            self.banner = GENERIC_FAILURE
            return False
        finally:
            self.submitting = False

        self.status = SessionStatus.SUBMITTED
        self.message = result.message
        self.redirect_url = result.redirectUrl
        return True
