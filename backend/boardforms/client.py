"""HTTP client for the public form endpoints, used by respondent front ends."""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

import requests

from boardforms.exceptions import (
    FormInactiveError,
    SubmissionError,
    SubmissionRejectedError,
)
from boardforms.schemas import Form
from boardforms.session import SendFn, SubmissionRequest, SubmissionResult


def _detail(r: requests.Response):
    try:
        return r.json().get("detail")
    except ValueError:
        return None


class FormsApiClient:
    def __init__(self, base_url: str = "http://localhost:8000/api",
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def get_form(self, form_id: str) -> Form:
        r = self.session.get(f"{self.base_url}/forms/{form_id}")
        r.raise_for_status()
        return Form.model_validate(r.json())

    def prefill(self, form_id: str, params: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        r = self.session.get(f"{self.base_url}/forms/{form_id}/prefill", params=params or {})
        r.raise_for_status()
        return r.json()["answers"]

    def submit(self, request: SubmissionRequest) -> SubmissionResult:
        """
        POST the answers. No retries and no timeout: a failure is reported
        once and the respondent decides whether to try again.
        """
        try:
            r = self.session.post(
                f"{self.base_url}/submissions",
                json={
                    "formId": request.formId,
                    "answers": request.answers,
                    "externalItemId": request.externalItemId,
                },
            )
        except requests.RequestException as e:
            raise SubmissionError(str(e)) from e

        if r.status_code == 403:
            raise FormInactiveError(_detail(r) or "This form is no longer active")
        if r.status_code == 422:
            detail = _detail(r)
            if isinstance(detail, dict):
                raise SubmissionRejectedError(detail.get("message", ""), detail.get("errors"))
            raise SubmissionRejectedError("The submission was rejected")
        if r.status_code >= 400:
            raise SubmissionError(f"Submission failed with HTTP {r.status_code}")

        try:
            body = r.json()
            return SubmissionResult(message=body.get("message", ""), redirectUrl=body.get("redirectUrl"))
        except (ValueError, AttributeError) as e:
            raise SubmissionError(f"Unreadable submission response: {e}") from e

    def transport(self) -> SendFn:
        """`submit` as the awaitable callable FormSession.submit expects."""
        async def send(request: SubmissionRequest) -> SubmissionResult:
            return await asyncio.to_thread(self.submit, request)
        return send
