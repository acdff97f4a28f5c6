"""
Form and submission persistence.

Routers receive a FormRepository through FastAPI dependency injection; the
rule evaluator and validator never see it. Documents are plain dicts keyed
by `id`.
"""
from __future__ import annotations

import copy
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from functools import lru_cache
from typing import Dict, List, Optional

from pymongo import ReturnDocument

from boardforms.config import settings
from boardforms.database import from_mongo, get_database, to_mongo


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class FormRepository(ABC):
    # forms

    @abstractmethod
    async def list_forms(self, board_id: str) -> List[dict]: ...

    @abstractmethod
    async def get_form(self, form_id: str) -> Optional[dict]: ...

    @abstractmethod
    async def create_form(self, doc: dict) -> dict: ...

    @abstractmethod
    async def update_form(self, form_id: str, changes: dict) -> Optional[dict]: ...

    @abstractmethod
    async def delete_form(self, form_id: str) -> bool: ...

    @abstractmethod
    async def increment_submission_count(self, form_id: str) -> None: ...

    # submissions

    @abstractmethod
    async def list_submissions(self, form_id: str) -> List[dict]: ...

    @abstractmethod
    async def get_submission(self, submission_id: str) -> Optional[dict]: ...

    @abstractmethod
    async def create_submission(self, doc: dict) -> dict: ...

    @abstractmethod
    async def update_submission(self, submission_id: str, changes: dict) -> Optional[dict]: ...

    @abstractmethod
    async def delete_submissions(self, form_id: str) -> int: ...


class MongoRepository(FormRepository):
    def __init__(self, db=None):
        db = db if db is not None else get_database()
        self.forms = db.forms
        self.submissions = db.submissions

    async def list_forms(self, board_id: str) -> List[dict]:
        items = []
        async for doc in self.forms.find({"boardId": board_id}):
            items.append(from_mongo(doc))
        return items

    async def get_form(self, form_id: str) -> Optional[dict]:
        return from_mongo(await self.forms.find_one({"_id": form_id}))

    async def create_form(self, doc: dict) -> dict:
        now = _now()
        doc = {**doc, "id": doc.get("id") or _new_id(), "submissionCount": 0,
               "createdAt": now, "updatedAt": now}
        await self.forms.insert_one(to_mongo(doc))
        return doc

    async def update_form(self, form_id: str, changes: dict) -> Optional[dict]:
        changes = {k: v for k, v in changes.items() if k not in ("id", "_id", "createdAt")}
        changes["updatedAt"] = _now()
        doc = await self.forms.find_one_and_update(
            {"_id": form_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return from_mongo(doc)

    async def delete_form(self, form_id: str) -> bool:
        result = await self.forms.delete_one({"_id": form_id})
        return result.deleted_count > 0

    async def increment_submission_count(self, form_id: str) -> None:
        await self.forms.update_one({"_id": form_id}, {"$inc": {"submissionCount": 1}})

    async def list_submissions(self, form_id: str) -> List[dict]:
        cursor = self.submissions.find({"formId": form_id}, sort=[("submittedAt", -1)])
        return [from_mongo(doc) async for doc in cursor]

    async def get_submission(self, submission_id: str) -> Optional[dict]:
        return from_mongo(await self.submissions.find_one({"_id": submission_id}))

    async def create_submission(self, doc: dict) -> dict:
        now = _now()
        doc = {**doc, "id": _new_id(), "submittedAt": now, "createdAt": now, "updatedAt": now}
        await self.submissions.insert_one(to_mongo(doc))
        return doc

    async def update_submission(self, submission_id: str, changes: dict) -> Optional[dict]:
        doc = await self.submissions.find_one_and_update(
            {"_id": submission_id},
            {"$set": {**changes, "updatedAt": _now()}},
            return_document=ReturnDocument.AFTER,
        )
        return from_mongo(doc)

    async def delete_submissions(self, form_id: str) -> int:
        result = await self.submissions.delete_many({"formId": form_id})
        return result.deleted_count


class MemoryRepository(FormRepository):
    """Process-local store for development and tests."""

    def __init__(self, forms: Optional[List[dict]] = None, submissions: Optional[List[dict]] = None):
        self._forms: Dict[str, dict] = {}
        self._submissions: Dict[str, dict] = {}
        for doc in forms or []:
            self._forms[doc["id"]] = copy.deepcopy(doc)
        for doc in submissions or []:
            self._submissions[doc["id"]] = copy.deepcopy(doc)

    async def list_forms(self, board_id: str) -> List[dict]:
        return [copy.deepcopy(f) for f in self._forms.values() if f.get("boardId") == board_id]

    async def get_form(self, form_id: str) -> Optional[dict]:
        doc = self._forms.get(form_id)
        return copy.deepcopy(doc) if doc else None

    async def create_form(self, doc: dict) -> dict:
        now = _now()
        doc = {**copy.deepcopy(doc), "id": doc.get("id") or _new_id(), "submissionCount": 0,
               "createdAt": now, "updatedAt": now}
        self._forms[doc["id"]] = doc
        return copy.deepcopy(doc)

    async def update_form(self, form_id: str, changes: dict) -> Optional[dict]:
        doc = self._forms.get(form_id)
        if doc is None:
            return None
        changes = {k: v for k, v in changes.items() if k not in ("id", "createdAt")}
        doc.update(copy.deepcopy(changes))
        doc["updatedAt"] = _now()
        return copy.deepcopy(doc)

    async def delete_form(self, form_id: str) -> bool:
        return self._forms.pop(form_id, None) is not None

    async def increment_submission_count(self, form_id: str) -> None:
        doc = self._forms.get(form_id)
        if doc is not None:
            doc["submissionCount"] = doc.get("submissionCount", 0) + 1

    async def list_submissions(self, form_id: str) -> List[dict]:
        subs = [copy.deepcopy(s) for s in self._submissions.values() if s.get("formId") == form_id]
        # newest insert first among equal timestamps
        subs.reverse()
        subs.sort(key=lambda s: s["submittedAt"], reverse=True)
        return subs

    async def get_submission(self, submission_id: str) -> Optional[dict]:
        doc = self._submissions.get(submission_id)
        return copy.deepcopy(doc) if doc else None

    async def create_submission(self, doc: dict) -> dict:
        now = _now()
        doc = {**copy.deepcopy(doc), "id": _new_id(), "submittedAt": now, "createdAt": now, "updatedAt": now}
        self._submissions[doc["id"]] = doc
        return copy.deepcopy(doc)

    async def update_submission(self, submission_id: str, changes: dict) -> Optional[dict]:
        doc = self._submissions.get(submission_id)
        if doc is None:
            return None
        doc.update(copy.deepcopy(changes))
        doc["updatedAt"] = _now()
        return copy.deepcopy(doc)

    async def delete_submissions(self, form_id: str) -> int:
        ids = [k for k, s in self._submissions.items() if s.get("formId") == form_id]
        for k in ids:
            del self._submissions[k]
        return len(ids)


@lru_cache
def get_repository() -> FormRepository:
    if settings.STORAGE_BACKEND == "memory":
        if settings.SEED_DEMO_DATA:
            from boardforms.seed import SEED_FORMS, SEED_SUBMISSIONS
            return MemoryRepository(SEED_FORMS, SEED_SUBMISSIONS)
        return MemoryRepository()
    return MongoRepository()
