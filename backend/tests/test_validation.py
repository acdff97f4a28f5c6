from boardforms.schemas import FieldType
from boardforms.validation import FORMAT_CHECKS, validate


def test_every_field_type_has_a_format_entry():
    assert set(FORMAT_CHECKS) == set(FieldType)


def test_required_visible_field(build_form):
    form = build_form([{"id": "name", "type": "text", "label": "Full Name", "required": True}])
    assert validate(form, {}) == {"name": "Full Name is required"}
    assert validate(form, {"name": ""}) == {"name": "Full Name is required"}
    assert validate(form, {"name": "Ada"}) == {}


def test_hidden_required_field_is_not_validated(yes_no_form):
    assert validate(yes_no_form, {"A": "No"}) == {}
    assert validate(yes_no_form, {}) == {}
    assert validate(yes_no_form, {"A": "Yes"}) == {"B": "Guest name is required"}


def test_field_hidden_by_own_hide_rule(build_form):
    form = build_form([
        {"id": "flag", "type": "checkbox", "label": "Skip"},
        {"id": "why", "type": "text", "label": "Reason", "required": True,
         "logic": {"conditions": [{"fieldId": "flag", "operator": "equals", "value": "true"}],
                   "action": "hide"}},
    ])
    assert validate(form, {"flag": "true"}) == {}
    assert validate(form, {"flag": "false"}) == {"why": "Reason is required"}


def test_email_format(build_form):
    form = build_form([{"id": "mail", "type": "email", "label": "Email"}])
    assert validate(form, {}) == {}
    assert validate(form, {"mail": "ada@example.com"}) == {}
    assert validate(form, {"mail": "ada@example"}) == {"mail": "Please enter a valid email address"}
    assert validate(form, {"mail": "not an email"}) == {"mail": "Please enter a valid email address"}


def test_email_format_only_on_email_type(build_form):
    form = build_form([{"id": "t", "type": "text", "label": "Text"}])
    assert validate(form, {"t": "ada@example"}) == {}


def test_one_error_per_field(build_form):
    form = build_form([
        {"id": "mail", "type": "email", "label": "Email", "required": True},
        {"id": "name", "type": "text", "label": "Name", "required": True},
    ])
    errors = validate(form, {"mail": "broken"})
    assert errors == {
        "mail": "Please enter a valid email address",
        "name": "Name is required",
    }
    assert list(errors) == ["mail", "name"]


def test_whitespace_is_an_answer(build_form):
    form = build_form([{"id": "name", "type": "text", "label": "Name", "required": True}])
    assert validate(form, {"name": " "}) == {}
