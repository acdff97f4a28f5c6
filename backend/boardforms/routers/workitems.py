from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.concurrency import run_in_threadpool

from boardforms.config import settings
from boardforms.exceptions import WorkItemError
from boardforms.schemas import ItemCreateIn, ItemUpdateIn
from boardforms.workitems import WorkItemClient

router = APIRouter(prefix="/api/monday", tags=["monday"])


def get_work_item_client(authorization: Optional[str] = Header(None)) -> Optional[WorkItemClient]:
    """Client for the caller's token, or the configured one; None when neither is set."""
    token = authorization or settings.MONDAY_API_TOKEN
    if not token:
        return None
    return WorkItemClient(token)


def require_client(client: Optional[WorkItemClient] = Depends(get_work_item_client)) -> WorkItemClient:
    if client is None:
        raise HTTPException(status_code=401, detail="Missing work-item API token")
    return client


@router.get("/boards")
async def list_boards(client: WorkItemClient = Depends(require_client)):
    try:
        return await run_in_threadpool(client.list_boards)
    except WorkItemError as e:
        raise HTTPException(status_code=502, detail=f"Failed to fetch boards: {e}")


@router.get("/boards/{board_id}/columns")
async def list_columns(board_id: str, client: WorkItemClient = Depends(require_client)):
    try:
        return await run_in_threadpool(client.list_columns, board_id)
    except WorkItemError as e:
        raise HTTPException(status_code=502, detail=f"Failed to fetch columns: {e}")


@router.get("/boards/{board_id}/items")
async def list_items(board_id: str, client: WorkItemClient = Depends(require_client)):
    """Items with their sub-items, used for prefill and updating existing items."""
    try:
        return await run_in_threadpool(client.list_items, board_id)
    except WorkItemError as e:
        raise HTTPException(status_code=502, detail=f"Failed to fetch items: {e}")


@router.post("/boards/{board_id}/items")
async def create_item(board_id: str, body: ItemCreateIn, client: WorkItemClient = Depends(require_client)):
    try:
        if body.createSubItem and body.parentItemId:
            return await run_in_threadpool(
                client.create_subitem, body.parentItemId, body.itemName, body.columnValues
            )
        return await run_in_threadpool(
            client.create_item, board_id, body.itemName, body.columnValues, body.groupId
        )
    except WorkItemError as e:
        raise HTTPException(status_code=502, detail=f"Failed to create item: {e}")


@router.put("/boards/{board_id}/items/{item_id}")
async def update_item(board_id: str, item_id: str, body: ItemUpdateIn,
                      client: WorkItemClient = Depends(require_client)):
    try:
        return await run_in_threadpool(client.update_item, board_id, item_id, body.columnValues)
    except WorkItemError as e:
        raise HTTPException(status_code=502, detail=f"Failed to update item: {e}")
