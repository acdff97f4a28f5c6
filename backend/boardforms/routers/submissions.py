import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from boardforms.config import settings
from boardforms.exceptions import WorkItemError
from boardforms.routers.forms import load_form
from boardforms.routers.workitems import get_work_item_client
from boardforms.schemas import Form, SubmissionIn
from boardforms.session import build_payload
from boardforms.storage import FormRepository, get_repository
from boardforms.validation import validate
from boardforms.workitems import WorkItemClient, encode_column_values, item_name_for

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/submissions", tags=["submissions"])


async def write_back(
    repo: FormRepository,
    client: Optional[WorkItemClient],
    form: Form,
    submission: dict,
) -> dict:
    """
    Push a stored submission to the linked board item.

    Runs after the submission is persisted. A failure does not undo the
    submission; it is recorded on it as writeBack.status == "failed" so it can
    be retried through POST /api/submissions/{id}/writeback.
    """
    answers = submission.get("data") or {}
    column_values = encode_column_values(form, answers)

    if client is None or not form.boardId or not column_values:
        result = {"status": "skipped"}
    else:
        item_id = submission.get("mondayItemId")
        try:
            if item_id:
                item = await run_in_threadpool(client.update_item, form.boardId, item_id, column_values)
            else:
                item = await run_in_threadpool(
                    client.create_item, form.boardId, item_name_for(form, answers), column_values
                )
            written_id = (item or {}).get("id") or item_id
            if written_id:
                result = {"status": "ok", "itemId": written_id}
                logger.info(f"Wrote submission {submission['id']} back to item {written_id}")
            else:
                result = {"status": "failed", "error": "Work-item API returned no item id"}
                logger.warning(f"Write-back of submission {submission['id']} returned no item id")
        except WorkItemError as e:
            result = {"status": "failed", "error": str(e)}
            logger.warning(f"Write-back of submission {submission['id']} failed: {e}")

    changes = {"writeBack": result}
    if result.get("itemId") and not submission.get("mondayItemId"):
        changes["mondayItemId"] = result["itemId"]
    return await repo.update_submission(submission["id"], changes)


@router.post("", status_code=201)
async def submit_form(
    body: SubmissionIn,
    request: Request,
    repo: FormRepository = Depends(get_repository),
    client: Optional[WorkItemClient] = Depends(get_work_item_client),
):
    form = await load_form(repo, body.formId)
    if not form.isActive:
        raise HTTPException(status_code=403, detail="This form is no longer active")

    data = dict(body.answers)
    if settings.ENFORCE_SUBMISSION_RULES:
        errors = validate(form, data)
        if errors:
            logger.info(f"Rejected submission to form {form.id}: {sorted(errors)}")
            raise HTTPException(
                status_code=422,
                detail={"message": "Please fix the highlighted fields", "errors": errors},
            )
        # hidden and unknown keys never reach storage
        data = build_payload(form, data)

    submission = await repo.create_submission({
        "formId": form.id,
        "boardId": form.boardId,
        "data": data,
        "mondayItemId": body.externalItemId,
        "isUpdate": bool(body.externalItemId),
        "ipAddress": request.client.host if request.client else None,
    })
    await repo.increment_submission_count(form.id)
    logger.info(f"Stored submission {submission['id']} for form {form.id}")

    submission = await write_back(repo, client, form, submission)

    return {
        "status": "ok",
        "message": form.settings.successMessage,
        "redirectUrl": form.settings.redirectUrl,
        "submission": submission,
    }


@router.get("/{submission_id}")
async def get_submission(submission_id: str, repo: FormRepository = Depends(get_repository)):
    submission = await repo.get_submission(submission_id)
    if not submission:
        raise HTTPException(status_code=404, detail="Submission not found")
    return submission


@router.post("/{submission_id}/writeback")
async def retry_write_back(
    submission_id: str,
    repo: FormRepository = Depends(get_repository),
    client: Optional[WorkItemClient] = Depends(get_work_item_client),
):
    """Re-run the board write-back for a stored submission."""
    submission = await repo.get_submission(submission_id)
    if not submission:
        raise HTTPException(status_code=404, detail="Submission not found")
    if client is None:
        raise HTTPException(status_code=401, detail="Missing work-item API token")
    form = await load_form(repo, submission["formId"])
    return await write_back(repo, client, form, submission)
