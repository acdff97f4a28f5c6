import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from boardforms.exceptions import WorkItemError
from boardforms.routers.workitems import get_work_item_client
from boardforms.rules import explain_visibility, visible_fields
from boardforms.schemas import EvaluateIn, Form, FormIn, FormUpdate
from boardforms.session import build_payload, seed_answers
from boardforms.storage import FormRepository, get_repository
from boardforms.validation import validate
from boardforms.workitems import WorkItemClient, item_prefill

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/forms", tags=["forms"])


async def load_form(repo: FormRepository, form_id: str) -> Form:
    doc = await repo.get_form(form_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Form not found")
    return Form.model_validate(doc)


@router.get("/board/{board_id}")
async def list_forms(board_id: str, repo: FormRepository = Depends(get_repository)):
    """All forms attached to a board."""
    return await repo.list_forms(board_id)


@router.get("/{form_id}")
async def get_form(form_id: str, repo: FormRepository = Depends(get_repository)):
    form = await repo.get_form(form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return form


@router.post("", status_code=201)
async def create_form(form: FormIn, repo: FormRepository = Depends(get_repository)):
    doc = await repo.create_form(form.model_dump(mode="json"))
    logger.info(f"Created form {doc['id']} on board {doc['boardId']}")
    return doc


@router.put("/{form_id}")
async def update_form(form_id: str, changes: FormUpdate, repo: FormRepository = Depends(get_repository)):
    doc = await repo.update_form(form_id, changes.model_dump(mode="json", exclude_unset=True))
    if not doc:
        raise HTTPException(status_code=404, detail="Form not found")
    logger.info(f"Updated form {form_id}")
    return doc


@router.delete("/{form_id}")
async def delete_form(form_id: str, repo: FormRepository = Depends(get_repository)):
    """Delete a form and all of its submissions."""
    if not await repo.delete_form(form_id):
        raise HTTPException(status_code=404, detail="Form not found")
    removed = await repo.delete_submissions(form_id)
    logger.info(f"Deleted form {form_id} and {removed} submissions")
    return {"status": "ok", "formId": form_id}


@router.get("/{form_id}/submissions")
async def list_submissions(form_id: str, repo: FormRepository = Depends(get_repository)):
    """Submissions for a form, most recent first."""
    await load_form(repo, form_id)
    return await repo.list_submissions(form_id)


@router.post("/{form_id}/evaluate")
async def evaluate_form(form_id: str, body: EvaluateIn, repo: FormRepository = Depends(get_repository)):
    """
    Run the visibility rules and validation for a set of answers without
    storing anything. Useful for previews in the builder and for clients that
    do not evaluate rules themselves.
    """
    form = await load_form(repo, form_id)
    snapshot = seed_answers(form, body.answers)
    return {
        "visibleFieldIds": [f.id for f in visible_fields(form, snapshot)],
        "errors": validate(form, snapshot),
        "payload": build_payload(form, snapshot),
        "rules": [explain_visibility(f, snapshot) for f in form.fields if f.logic],
    }


@router.get("/{form_id}/prefill")
async def prefill_form(
    form_id: str,
    request: Request,
    repo: FormRepository = Depends(get_repository),
    client: Optional[WorkItemClient] = Depends(get_work_item_client),
):
    """
    Initial answers for a respondent.

    Query string keys naming a field are copied in. With `itemId`, the linked
    columns of that item are read first and the query string overrides them.
    """
    form = await load_form(repo, form_id)
    params = dict(request.query_params)
    item_id = params.pop("itemId", None)

    prefill = {}
    if item_id and client is not None:
        try:
            item = await run_in_threadpool(client.get_item, item_id)
        except WorkItemError as e:
            raise HTTPException(status_code=502, detail=f"Failed to fetch item: {e}")
        if item:
            prefill.update(item_prefill(form, item))
    prefill.update(params)

    answers = seed_answers(form, prefill)
    return {
        "formId": form.id,
        "externalItemId": item_id,
        "answers": answers,
        "visibleFieldIds": [f.id for f in visible_fields(form, answers)],
    }
