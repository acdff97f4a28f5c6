import pytest

from boardforms.config import settings
from boardforms.routers.workitems import get_work_item_client
from boardforms.main import app

FORM = {
    "title": "Event RSVP",
    "boardId": "board-1",
    "fields": [
        {"id": "A", "type": "dropdown", "label": "Attending", "options": ["Yes", "No"],
         "mondayColumnId": "status_col"},
        {"id": "B", "type": "text", "label": "Guest name", "required": True,
         "logic": {"conditions": [{"fieldId": "A", "operator": "equals", "value": "Yes"}], "action": "show"},
         "mondayColumnId": "text_col"},
        {"id": "C", "type": "email", "label": "Email"},
    ],
    "settings": {"successMessage": "See you there!", "redirectUrl": "https://example.com/done"},
}


@pytest.fixture
def form(client):
    r = client.post("/api/forms", json=FORM)
    assert r.status_code == 201
    return r.json()


def submit(client, form, answers, **extra):
    return client.post("/api/submissions", json={"formId": form["id"], "answers": answers, **extra})


def test_submit_success(client, form, repo):
    r = submit(client, form, {"A": "Yes", "B": "hello"})
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "See you there!"
    assert body["redirectUrl"] == "https://example.com/done"
    assert body["submission"]["data"] == {"A": "Yes", "B": "hello", "C": ""}
    assert body["submission"]["isUpdate"] is False

    assert client.get(f"/api/forms/{form['id']}").json()["submissionCount"] == 1


def test_hidden_required_field_is_not_enforced(client, form):
    r = submit(client, form, {"A": "No"})
    assert r.status_code == 201


def test_server_revalidates(client, form):
    r = submit(client, form, {"A": "Yes"})
    assert r.status_code == 422
    assert r.json()["detail"]["errors"] == {"B": "Guest name is required"}

    r = submit(client, form, {"A": "No", "C": "bad-address"})
    assert r.status_code == 422
    assert r.json()["detail"]["errors"] == {"C": "Please enter a valid email address"}


def test_hidden_and_unknown_keys_are_dropped(client, form):
    r = submit(client, form, {"A": "No", "B": "left over", "injected": "x"})
    assert r.status_code == 201
    assert r.json()["submission"]["data"] == {"A": "No", "C": ""}


def test_enforcement_can_be_disabled(client, form, monkeypatch):
    monkeypatch.setattr(settings, "ENFORCE_SUBMISSION_RULES", False)
    r = submit(client, form, {"A": "Yes", "extra": "kept"})
    assert r.status_code == 201
    assert r.json()["submission"]["data"] == {"A": "Yes", "extra": "kept"}


def test_inactive_form_is_rejected(client, form):
    client.put(f"/api/forms/{form['id']}", json={"isActive": False})
    r = submit(client, form, {"A": "No"})
    assert r.status_code == 403
    assert r.json()["detail"] == "This form is no longer active"


def test_unknown_form(client):
    r = client.post("/api/submissions", json={"formId": "missing", "answers": {}})
    assert r.status_code == 404


def test_legacy_payload_keys(client, form):
    r = client.post("/api/submissions", json={"formId": form["id"], "data": {"A": "No"}, "mondayItemId": "77"})
    assert r.status_code == 201
    sub = r.json()["submission"]
    assert sub["mondayItemId"] == "77"
    assert sub["isUpdate"] is True


def test_write_back_creates_item(client, form, work_items):
    r = submit(client, form, {"A": "Yes", "B": "Grace"})
    sub = r.json()["submission"]
    assert sub["writeBack"] == {"status": "ok", "itemId": "item-99"}
    assert sub["mondayItemId"] == "item-99"
    assert work_items.calls == [
        ("create_item", "board-1", "Grace", {"status_col": {"labels": ["Yes"]}, "text_col": "Grace"}),
    ]


def test_write_back_updates_existing_item(client, form, work_items):
    r = submit(client, form, {"A": "No"}, externalItemId="item-3")
    sub = r.json()["submission"]
    assert sub["writeBack"] == {"status": "ok", "itemId": "item-3"}
    assert work_items.calls == [("update_item", "board-1", "item-3", {"status_col": {"labels": ["No"]}})]


def test_write_back_failure_keeps_submission(client, form, work_items):
    work_items.fail = True

    r = submit(client, form, {"A": "Yes", "B": "Grace"})
    assert r.status_code == 201
    sub = r.json()["submission"]
    assert sub["writeBack"] == {"status": "failed", "error": "board unavailable"}
    assert client.get(f"/api/submissions/{sub['id']}").status_code == 200

    work_items.fail = False
    r = client.post(f"/api/submissions/{sub['id']}/writeback")
    assert r.status_code == 200
    assert r.json()["writeBack"] == {"status": "ok", "itemId": "item-99"}


def test_write_back_without_item_id_is_failed(client, form, work_items, monkeypatch):
    monkeypatch.setattr(work_items, "create_item", lambda *args, **kwargs: {})

    r = submit(client, form, {"A": "Yes", "B": "Grace"})
    assert r.status_code == 201
    sub = r.json()["submission"]
    assert sub["writeBack"]["status"] == "failed"
    assert sub["mondayItemId"] is None


def test_write_back_skipped_without_client(client, form):
    app.dependency_overrides[get_work_item_client] = lambda: None
    r = submit(client, form, {"A": "Yes", "B": "Grace"})
    assert r.json()["submission"]["writeBack"] == {"status": "skipped"}

    r = client.post(f"/api/submissions/{r.json()['submission']['id']}/writeback")
    assert r.status_code == 401


def test_get_submission(client, form):
    sub = submit(client, form, {"A": "No"}).json()["submission"]
    r = client.get(f"/api/submissions/{sub['id']}")
    assert r.status_code == 200
    assert r.json()["formId"] == form["id"]
    assert client.get("/api/submissions/nope").status_code == 404
