"""
Client for the external work-item board (monday.com GraphQL API).

The form core only uses it as a source of prefill values and as a target for
writing submissions back; everything here is plumbing around `requests`.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

import requests

from boardforms.config import settings
from boardforms.exceptions import WorkItemError
from boardforms.schemas import FieldType, Form, decode_checkbox, decode_tags

logger = logging.getLogger(__name__)

BOARDS_QUERY = "query { boards(limit: 50) { id name description columns { id title type } } }"

COLUMNS_QUERY = (
    "query($boardId: ID!) { boards(ids: [$boardId]) { columns { id title type settings_str } } }"
)

ITEMS_QUERY = """
query($boardId: ID!) {
  boards(ids: [$boardId]) {
    items_page(limit: 100) {
      items {
        id
        name
        column_values { id text value }
        subitems { id name column_values { id text value } }
      }
    }
  }
}
"""

ITEM_QUERY = """
query($itemId: ID!) {
  items(ids: [$itemId]) { id name column_values { id text value } }
}
"""

CREATE_ITEM_MUTATION = """
mutation($boardId: ID!, $itemName: String!, $columnValues: JSON, $groupId: String) {
  create_item(board_id: $boardId, item_name: $itemName, column_values: $columnValues, group_id: $groupId) { id name }
}
"""

CREATE_SUBITEM_MUTATION = """
mutation($parentItemId: ID!, $itemName: String!, $columnValues: JSON) {
  create_subitem(parent_item_id: $parentItemId, item_name: $itemName, column_values: $columnValues) { id }
}
"""

UPDATE_ITEM_MUTATION = """
mutation($boardId: ID!, $itemId: ID!, $columnValues: JSON!) {
  change_multiple_column_values(board_id: $boardId, item_id: $itemId, column_values: $columnValues) { id name }
}
"""


class WorkItemClient:
    def __init__(self, token: str, session: Optional[requests.Session] = None,
                 api_url: Optional[str] = None, timeout: Optional[float] = None):
        self.token = token
        self.session = session or requests.Session()
        self.api_url = api_url or settings.MONDAY_API_URL
        self.timeout = timeout if timeout is not None else settings.MONDAY_TIMEOUT

    def query(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            r = self.session.post(
                self.api_url,
                json={"query": query, "variables": variables or {}},
                headers={
                    "Authorization": self.token,
                    "Content-Type": "application/json",
                    "API-Version": settings.MONDAY_API_VERSION,
                },
                timeout=self.timeout,
            )
            r.raise_for_status()
            body = r.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Work-item API request failed: {e}")
            raise WorkItemError(f"Work-item API request failed: {e}") from e

        if body.get("errors"):
            messages = "; ".join(str(err.get("message", err)) for err in body["errors"])
            logger.error(f"Work-item API returned errors: {messages}")
            raise WorkItemError(messages)
        return body.get("data") or {}

    def list_boards(self) -> List[dict]:
        return self.query(BOARDS_QUERY).get("boards") or []

    def list_columns(self, board_id: str) -> List[dict]:
        boards = self.query(COLUMNS_QUERY, {"boardId": board_id}).get("boards") or []
        return boards[0].get("columns", []) if boards else []

    def list_items(self, board_id: str) -> List[dict]:
        boards = self.query(ITEMS_QUERY, {"boardId": board_id}).get("boards") or []
        if not boards:
            return []
        return (boards[0].get("items_page") or {}).get("items") or []

    def get_item(self, item_id: str) -> Optional[dict]:
        items = self.query(ITEM_QUERY, {"itemId": item_id}).get("items") or []
        return items[0] if items else None

    def create_item(self, board_id: str, item_name: str, column_values: Dict[str, Any],
                    group_id: Optional[str] = None) -> dict:
        data = self.query(CREATE_ITEM_MUTATION, {
            "boardId": board_id,
            "itemName": item_name,
            "columnValues": json.dumps(column_values),
            "groupId": group_id,
        })
        return data.get("create_item") or {}

    def create_subitem(self, parent_item_id: str, item_name: str, column_values: Dict[str, Any]) -> dict:
        data = self.query(CREATE_SUBITEM_MUTATION, {
            "parentItemId": parent_item_id,
            "itemName": item_name,
            "columnValues": json.dumps(column_values),
        })
        return data.get("create_subitem") or {}

    def update_item(self, board_id: str, item_id: str, column_values: Dict[str, Any]) -> dict:
        data = self.query(UPDATE_ITEM_MUTATION, {
            "boardId": board_id,
            "itemId": item_id,
            "columnValues": json.dumps(column_values),
        })
        return data.get("change_multiple_column_values") or {}


# -- column value encoding --

def _hour(value: str) -> Optional[dict]:
    hour, _, minute = value.partition(":")
    try:
        return {"hour": int(hour), "minute": int(minute or 0)}
    except ValueError:
        return None


def _rating(value: str) -> Optional[dict]:
    try:
        return {"rating": int(value)}
    except ValueError:
        return None


# Every field type has an entry; None marks columns that cannot be written
# (computed or linked columns on the board side).
COLUMN_ENCODERS: Dict[FieldType, Optional[Callable[[str], Any]]] = {
    FieldType.TEXT: lambda v: v,
    FieldType.LONG_TEXT: lambda v: {"text": v},
    FieldType.EMAIL: lambda v: {"email": v, "text": v},
    FieldType.PHONE: lambda v: {"phone": v},
    FieldType.NUMBER: lambda v: v,
    FieldType.DATE: lambda v: {"date": v},
    FieldType.DROPDOWN: lambda v: {"labels": [v]},
    FieldType.CHECKBOX: lambda v: {"checked": "true"} if decode_checkbox(v) else None,
    FieldType.RATING: _rating,
    FieldType.STATUS: lambda v: {"label": v},
    FieldType.TAGS: lambda v: {"labels": decode_tags(v)},
    FieldType.PEOPLE: None,
    FieldType.HOUR: _hour,
    FieldType.WEEK: None,
    FieldType.WORLD_CLOCK: lambda v: {"timezone": v},
    FieldType.FORMULA: None,
    FieldType.MIRROR: None,
    FieldType.ITEM_ID: None,
    FieldType.DEPENDENCY: None,
}


def encode_column_values(form: Form, answers: Mapping[str, str]) -> Dict[str, Any]:
    """Map answered, linked fields onto the board's column value format."""
    values: Dict[str, Any] = {}
    for field in form.fields:
        if not field.mondayColumnId:
            continue
        value = answers.get(field.id) or ""
        encoder = COLUMN_ENCODERS[field.type]
        if encoder is None or value == "":
            continue
        encoded = encoder(value)
        if encoded is not None:
            values[field.mondayColumnId] = encoded
    return values


def item_name_for(form: Form, answers: Mapping[str, str]) -> str:
    """First non-empty short-text answer, else the form title."""
    for field in form.fields:
        if field.type == FieldType.TEXT and answers.get(field.id):
            return answers[field.id]
    return form.title


def item_prefill(form: Form, item: Mapping[str, Any]) -> Dict[str, str]:
    """Answer values taken from an existing item's columns, keyed by field id."""
    texts = {cv.get("id"): cv.get("text") or "" for cv in item.get("column_values") or []}
    prefill = {}
    for field in form.fields:
        if field.mondayColumnId and field.mondayColumnId in texts:
            prefill[field.id] = texts[field.mondayColumnId]
    return prefill
