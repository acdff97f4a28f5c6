from __future__ import annotations

import re
from typing import Callable, Dict, Mapping, Optional

from boardforms.rules import is_visible
from boardforms.schemas import FieldType, Form

EMAIL_RE = re.compile(r"\S+@\S+\.\S+")


def _check_email(value: str) -> Optional[str]:
    if EMAIL_RE.search(value):
        return None
    return "Please enter a valid email address"


# Every field type has an entry; None means no format check.
FORMAT_CHECKS: Dict[FieldType, Optional[Callable[[str], Optional[str]]]] = {
    FieldType.TEXT: None,
    FieldType.LONG_TEXT: None,
    FieldType.EMAIL: _check_email,
    FieldType.PHONE: None,
    FieldType.NUMBER: None,
    FieldType.DATE: None,
    FieldType.DROPDOWN: None,
    FieldType.CHECKBOX: None,
    FieldType.RATING: None,
    FieldType.STATUS: None,
    FieldType.TAGS: None,
    FieldType.PEOPLE: None,
    FieldType.HOUR: None,
    FieldType.WEEK: None,
    FieldType.WORLD_CLOCK: None,
    FieldType.FORMULA: None,
    FieldType.MIRROR: None,
    FieldType.ITEM_ID: None,
    FieldType.DEPENDENCY: None,
}


def validate(form: Form, snapshot: Mapping[str, str]) -> Dict[str, str]:
    """
    Returns {field_id: message} for every visible field that fails.

    Hidden fields are skipped. The required check runs first and a format
    error on the same field replaces it, so each field has at most one message.
    An empty dict means the answers may be submitted.
    """
    errors: Dict[str, str] = {}

    for field in form.fields:
        if not is_visible(field, snapshot):
            continue

        value = snapshot.get(field.id) or ""

        if field.required and value == "":
            errors[field.id] = f"{field.label} is required"

        check = FORMAT_CHECKS[field.type]
        if check is not None and value != "":
            message = check(value)
            if message:
                errors[field.id] = message

    return errors
