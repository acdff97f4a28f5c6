import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from boardforms.config import settings
from boardforms.routers.forms import router as forms_router
from boardforms.routers.submissions import router as submissions_router
from boardforms.routers.workitems import router as workitems_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Board Forms Backend (FastAPI + Mongo)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CLIENT_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(forms_router)
app.include_router(submissions_router)
app.include_router(workitems_router)

logger.info(f"Using {settings.STORAGE_BACKEND} storage")


@app.get("/health")
async def health():
    return {"status": "ok"}
