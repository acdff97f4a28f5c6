import json

import pytest
import requests

from boardforms.exceptions import WorkItemError
from boardforms.schemas import FieldType
from boardforms.workitems import (
    COLUMN_ENCODERS,
    WorkItemClient,
    encode_column_values,
    item_name_for,
    item_prefill,
)


class StubResponse:
    def __init__(self, body, status_code=200):
        self.body = body
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        return self.body


class StubSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.posts = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.posts.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


def test_every_field_type_has_an_encoder_entry():
    assert set(COLUMN_ENCODERS) == set(FieldType)


def test_encode_column_values(build_form):
    form = build_form([
        {"id": "name", "type": "text", "label": "Name", "mondayColumnId": "name_col"},
        {"id": "mail", "type": "email", "label": "Mail", "mondayColumnId": "email_col"},
        {"id": "when", "type": "date", "label": "When", "mondayColumnId": "date_col"},
        {"id": "ok", "type": "checkbox", "label": "OK", "mondayColumnId": "check_col"},
        {"id": "tags", "type": "tags", "label": "Tags", "options": ["a", "b"], "mondayColumnId": "tag_col"},
        {"id": "at", "type": "hour", "label": "At", "mondayColumnId": "hour_col"},
        {"id": "calc", "type": "formula", "label": "Calc", "mondayColumnId": "formula_col"},
        {"id": "unlinked", "type": "text", "label": "Unlinked"},
        {"id": "blank", "type": "text", "label": "Blank", "mondayColumnId": "blank_col"},
    ])
    answers = {
        "name": "Ada",
        "mail": "ada@example.com",
        "when": "2025-03-01",
        "ok": "true",
        "tags": "a,b",
        "at": "09:30",
        "calc": "42",
        "unlinked": "x",
    }
    assert encode_column_values(form, answers) == {
        "name_col": "Ada",
        "email_col": {"email": "ada@example.com", "text": "ada@example.com"},
        "date_col": {"date": "2025-03-01"},
        "check_col": {"checked": "true"},
        "tag_col": {"labels": ["a", "b"]},
        "hour_col": {"hour": 9, "minute": 30},
    }


def test_unparseable_values_are_skipped(build_form):
    form = build_form([
        {"id": "r", "type": "rating", "label": "R", "mondayColumnId": "rating_col"},
        {"id": "c", "type": "checkbox", "label": "C", "mondayColumnId": "check_col"},
    ])
    assert encode_column_values(form, {"r": "five", "c": "false"}) == {}


def test_item_name_falls_back_to_title(build_form):
    form = build_form([{"id": "n", "type": "text", "label": "N"}])
    assert item_name_for(form, {"n": "Ada"}) == "Ada"
    assert item_name_for(form, {}) == "Test Form"


def test_item_prefill(build_form):
    form = build_form([
        {"id": "n", "type": "text", "label": "N", "mondayColumnId": "text0"},
        {"id": "s", "type": "status", "label": "S", "options": ["Done"], "mondayColumnId": "status"},
        {"id": "x", "type": "text", "label": "X"},
    ])
    item = {"id": "1", "column_values": [
        {"id": "text0", "text": "Ada", "value": "\"Ada\""},
        {"id": "status", "text": None, "value": None},
        {"id": "other", "text": "ignored", "value": None},
    ]}
    assert item_prefill(form, item) == {"n": "Ada", "s": ""}


def test_query_sends_token_and_version():
    session = StubSession(StubResponse({"data": {"boards": [{"id": "1", "name": "Board"}]}}))
    client = WorkItemClient("secret", session=session, api_url="https://api.test/v2", timeout=5)

    assert client.list_boards() == [{"id": "1", "name": "Board"}]
    post = session.posts[0]
    assert post["url"] == "https://api.test/v2"
    assert post["headers"]["Authorization"] == "secret"
    assert post["headers"]["API-Version"] == "2024-01"
    assert post["timeout"] == 5


def test_list_items_unwraps_page():
    items = [{"id": "10", "name": "Row", "column_values": [], "subitems": []}]
    session = StubSession(StubResponse({"data": {"boards": [{"items_page": {"items": items}}]}}))
    client = WorkItemClient("t", session=session)
    assert client.list_items("42") == items
    assert session.posts[0]["json"]["variables"] == {"boardId": "42"}


def test_create_item_serializes_column_values():
    session = StubSession(StubResponse({"data": {"create_item": {"id": "5", "name": "Ada"}}}))
    client = WorkItemClient("t", session=session)
    assert client.create_item("42", "Ada", {"text_col": "Ada"}) == {"id": "5", "name": "Ada"}
    variables = session.posts[0]["json"]["variables"]
    assert json.loads(variables["columnValues"]) == {"text_col": "Ada"}


def test_graphql_errors_raise():
    session = StubSession(StubResponse({"errors": [{"message": "Not authenticated"}]}))
    with pytest.raises(WorkItemError, match="Not authenticated"):
        WorkItemClient("t", session=session).list_boards()


def test_http_errors_raise():
    with pytest.raises(WorkItemError):
        WorkItemClient("t", session=StubSession(StubResponse({}, status_code=500))).list_boards()
    with pytest.raises(WorkItemError):
        WorkItemClient("t", session=StubSession(error=requests.ConnectionError("down"))).list_boards()
