from __future__ import annotations

from typing import Dict, List, Mapping

from boardforms.schemas import Condition, ConditionOperator, Form, FormField


def _answer(snapshot: Mapping[str, str], field_id: str) -> str:
    # A dangling reference reads as an unanswered field
    val = snapshot.get(field_id)
    return val if val else ""


def evaluate_condition(condition: Condition, snapshot: Mapping[str, str]) -> bool:
    val = _answer(snapshot, condition.fieldId)
    op = condition.operator

    if op == ConditionOperator.EQUALS:
        return val == condition.value
    if op == ConditionOperator.NOT_EQUALS:
        return val != condition.value
    if op == ConditionOperator.CONTAINS:
        return condition.value in val
    if op == ConditionOperator.IS_EMPTY:
        return val == ""
    if op == ConditionOperator.IS_NOT_EMPTY:
        return val != ""
    # unknown operator: fail open
    return True


def is_visible(field: FormField, snapshot: Mapping[str, str]) -> bool:
    """
    Decide whether `field` is shown for the given answers.

    A field without logic, or with an empty condition list, is always shown.
    Otherwise every condition must hold (AND); the rule's action then decides
    whether that means show or hide.

    Conditions read the stored answer of the referenced field even when that
    field is itself hidden; visibility never chains through other rules.
    """
    logic = field.logic
    if logic is None or not logic.conditions:
        return True

    all_met = all(evaluate_condition(c, snapshot) for c in logic.conditions)
    return all_met if logic.action == "show" else not all_met


def visible_fields(form: Form, snapshot: Mapping[str, str]) -> List[FormField]:
    return [f for f in form.fields if is_visible(f, snapshot)]


def explain_visibility(field: FormField, snapshot: Mapping[str, str]) -> Dict[str, object]:
    """Per-condition breakdown of one field's rule, for authoring previews."""
    conditions = []
    for c in field.logic.conditions if field.logic else []:
        conditions.append({
            "fieldId": c.fieldId,
            "operator": c.operator,
            "value": c.value,
            "answer": _answer(snapshot, c.fieldId),
            "met": evaluate_condition(c, snapshot),
        })
    return {
        "fieldId": field.id,
        "action": field.logic.action if field.logic else None,
        "conditions": conditions,
        "visible": is_visible(field, snapshot),
    }
