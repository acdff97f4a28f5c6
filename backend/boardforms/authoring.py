"""
Form-builder operations.

Each helper takes a Form or FormField and returns an updated copy; nothing is
mutated in place. Forms are edited this way before publication. Respondents
only ever see a finished Form.
"""
from __future__ import annotations

import uuid
from typing import Any, List, Optional, Tuple

from boardforms.schemas import (
    CHOICE_TYPES,
    Condition,
    ConditionOperator,
    FieldLogic,
    FieldType,
    Form,
    FormField,
    FormIn,
    FormSettings,
    FormTheme,
)

DEFAULT_OPTIONS = ["Option 1", "Option 2"]


def default_form(board_id: str, workspace_id: str = "") -> FormIn:
    return FormIn(
        title="Untitled Form",
        description="",
        boardId=board_id,
        workspaceId=workspace_id,
        fields=[],
        settings=FormSettings(
            customTheme=FormTheme(backgroundColor="#f0f4ff"),
        ),
        isActive=True,
    )


def new_field(field_type: FieldType) -> FormField:
    field_type = FieldType(field_type)
    return FormField(
        id=str(uuid.uuid4()),
        type=field_type,
        label=f"New {field_type.value.replace('_', ' ')} field",
        required=False,
        options=list(DEFAULT_OPTIONS) if field_type in CHOICE_TYPES else None,
    )


def _index(form: Form, field_id: str) -> int:
    for i, f in enumerate(form.fields):
        if f.id == field_id:
            return i
    raise KeyError(field_id)


def _with_fields(form: Form, fields: List[FormField]) -> Form:
    return form.model_copy(update={"fields": fields})


def _rebuild(field: FormField, **changes: Any) -> FormField:
    data = field.model_dump()
    data.update(changes)
    return FormField.model_validate(data)


def add_field(form: Form, field_type: FieldType) -> Tuple[Form, FormField]:
    field = new_field(field_type)
    return _with_fields(form, [*form.fields, field]), field


def update_field(form: Form, field_id: str, **changes: Any) -> Form:
    """Replace attributes of one field; the result is re-validated."""
    i = _index(form, field_id)
    data = form.fields[i].model_dump()
    data.update(changes)
    data["id"] = field_id
    if "type" in changes:
        new_type = FieldType(changes["type"])
        if new_type in CHOICE_TYPES and not data.get("options"):
            data["options"] = list(DEFAULT_OPTIONS)
        elif new_type not in CHOICE_TYPES:
            data["options"] = None
    fields = list(form.fields)
    fields[i] = FormField.model_validate(data)
    return _with_fields(form, fields)


def delete_field(form: Form, field_id: str) -> Form:
    # Conditions pointing at the deleted field are left in place; they read ""
    # from now on. See dangling_references().
    _index(form, field_id)
    return _with_fields(form, [f for f in form.fields if f.id != field_id])


def move_field(form: Form, field_id: str, over_id: str) -> Form:
    """Move `field_id` to the position currently held by `over_id`."""
    if field_id == over_id:
        return form
    old_index = _index(form, field_id)
    new_index = _index(form, over_id)
    fields = list(form.fields)
    fields.insert(new_index, fields.pop(old_index))
    return _with_fields(form, fields)


# -- options --

def add_option(field: FormField, label: Optional[str] = None) -> FormField:
    options = list(field.options or [])
    options.append(label or f"Option {len(options) + 1}")
    return _rebuild(field, options=options)


def update_option(field: FormField, index: int, label: str) -> FormField:
    options = list(field.options or [])
    options[index] = label
    return _rebuild(field, options=options)


def remove_option(field: FormField, index: int) -> FormField:
    options = list(field.options or [])
    if field.type in CHOICE_TYPES and len(options) <= 1:
        raise ValueError(f"{field.label} needs at least one option")
    del options[index]
    return _rebuild(field, options=options)


# -- conditional logic --

def set_logic(field: FormField, action: str = "show") -> FormField:
    logic = field.logic or FieldLogic()
    logic = FieldLogic(conditions=list(logic.conditions), action=action)
    return _rebuild(field, logic=logic.model_dump())


def add_condition(
    field: FormField,
    field_id: str = "",
    operator: str = ConditionOperator.EQUALS,
    value: str = "",
) -> FormField:
    logic = field.logic or FieldLogic()
    conditions = [*logic.conditions, Condition(fieldId=field_id, operator=operator, value=value)]
    return _rebuild(field, logic=FieldLogic(conditions=conditions, action=logic.action).model_dump())


def update_condition(field: FormField, index: int, **changes: Any) -> FormField:
    if field.logic is None:
        raise ValueError(f"{field.label} has no conditional logic")
    conditions = list(field.logic.conditions)
    data = conditions[index].model_dump()
    data.update(changes)
    conditions[index] = Condition.model_validate(data)
    return _rebuild(field, logic=FieldLogic(conditions=conditions, action=field.logic.action).model_dump())


def remove_condition(field: FormField, index: int) -> FormField:
    if field.logic is None:
        raise ValueError(f"{field.label} has no conditional logic")
    conditions = list(field.logic.conditions)
    del conditions[index]
    return _rebuild(field, logic=FieldLogic(conditions=conditions, action=field.logic.action).model_dump())


def remove_logic(field: FormField) -> FormField:
    return _rebuild(field, logic=None)


def referenceable_fields(form: Form, field_id: str) -> List[FormField]:
    """Fields a condition on `field_id` can point at (everything but itself)."""
    return [f for f in form.fields if f.id != field_id]


def dangling_references(form: Form) -> List[dict]:
    """
    List conditions whose fieldId names no field in the form.

    Purely informational: at render time such a condition still evaluates
    against an empty answer.
    """
    ids = {f.id for f in form.fields}
    found = []
    for f in form.fields:
        if f.logic is None:
            continue
        for i, c in enumerate(f.logic.conditions):
            if c.fieldId not in ids:
                found.append({"fieldId": f.id, "conditionIndex": i, "missingFieldId": c.fieldId})
    return found
