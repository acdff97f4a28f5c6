import pytest
from fastapi.testclient import TestClient

from boardforms.main import app
from boardforms.routers.workitems import get_work_item_client
from boardforms.schemas import Form
from boardforms.storage import MemoryRepository, get_repository


def make_form(fields, **extra) -> Form:
    data = {
        "id": "form-1",
        "title": "Test Form",
        "boardId": "board-1",
        "fields": fields,
    }
    data.update(extra)
    return Form.model_validate(data)


@pytest.fixture
def build_form():
    return make_form


@pytest.fixture
def yes_no_form() -> Form:
    """A: dropdown Yes/No. B: required text shown when A equals Yes."""
    return make_form([
        {"id": "A", "type": "dropdown", "label": "Attending", "options": ["Yes", "No"]},
        {"id": "B", "type": "text", "label": "Guest name", "required": True,
         "logic": {"conditions": [{"fieldId": "A", "operator": "equals", "value": "Yes"}],
                   "action": "show"}},
    ])


class FakeWorkItemClient:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []
        self.items = {}

    def _maybe_fail(self):
        if self.fail:
            from boardforms.exceptions import WorkItemError
            raise WorkItemError("board unavailable")

    def create_item(self, board_id, item_name, column_values, group_id=None):
        self.calls.append(("create_item", board_id, item_name, column_values))
        self._maybe_fail()
        return {"id": "item-99", "name": item_name}

    def update_item(self, board_id, item_id, column_values):
        self.calls.append(("update_item", board_id, item_id, column_values))
        self._maybe_fail()
        return {"id": item_id}

    def get_item(self, item_id):
        self.calls.append(("get_item", item_id))
        return self.items.get(item_id)


@pytest.fixture
def repo():
    return MemoryRepository()


@pytest.fixture
def work_items():
    return FakeWorkItemClient()


@pytest.fixture
def client(repo, work_items):
    app.dependency_overrides[get_repository] = lambda: repo
    app.dependency_overrides[get_work_item_client] = lambda: work_items
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
