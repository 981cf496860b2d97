# ielts_portal/main.py
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from ielts_portal.api.endpoints import (
    auth,
    exam_courses,
    exam_items,
    exam_sets,
    exams,
    health,
    mentors,
    ratings,
    submissions,
    tips,
    uploads,
    users,
)
from ielts_portal.core.config import settings
from ielts_portal.core.logging_config import setup_logging
from ielts_portal.db.base import Base
from ielts_portal.db.session import engine
from ielts_portal import models  # noqa

setup_logging()

app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # clients of this API expect 400 for bad input, not 422
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)
    Path(settings.UPLOAD_ROOT, "uploads").mkdir(parents=True, exist_ok=True)


app.mount(
    "/uploads",
    StaticFiles(directory=Path(settings.UPLOAD_ROOT, "uploads"), check_dir=False),
    name="uploads",
)

for router in (
    auth.router,
    users.router,
    mentors.router,
    exam_sets.router,
    exam_items.reading_router,
    exam_items.listening_router,
    exam_items.speaking_router,
    exam_items.writing_router,
    exams.router,
    exam_courses.router,
    submissions.router,
    uploads.router,
    tips.router,
    ratings.router,
    health.router,
):
    app.include_router(router, prefix="/api")
