"""FastAPI service exposing restricted-word management and text sanitizing.

Usage:
    python -m filter_service.main
    uvicorn filter_service.main:app --port 8000
"""
import logging
from datetime import datetime
from http import HTTPStatus
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config import get_settings
from src.db import WORD_MAX_LENGTH, init_db, make_engine, make_session_factory
from src.log import setup_logging
from src.sanitizer import FilterError, WordSanitizer
from src.word_store import RestrictedWordStore, StoreError

settings = get_settings()
setup_logging(settings)
logger = logging.getLogger(__name__)

engine = make_engine(settings.database_url, echo=settings.sql_echo)
init_db(engine)
store = RestrictedWordStore(make_session_factory(engine))

app = FastAPI(title="Restricted Word Filter", version="0.1.0")


class WordRequest(BaseModel):
    word: str = Field(..., max_length=WORD_MAX_LENGTH)

    @field_validator("word")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Word must not be blank")
        return v


class WordOut(BaseModel):
    """Public form of a restricted word; the internal id is not exposed."""
    model_config = ConfigDict(from_attributes=True)

    word: str


def get_store() -> RestrictedWordStore:
    return store


def get_sanitizer(word_store: RestrictedWordStore = Depends(get_store)) -> WordSanitizer:
    return WordSanitizer(word_store)


def error_response(request: Request, code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=code,
        content={
            "timestamp": datetime.now().isoformat(),
            "status": code,
            "error": HTTPStatus(code).phrase,
            "message": message,
            "path": request.url.path,
        },
    )


@app.exception_handler(StoreError)
def handle_store_error(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("StoreError: %s", exc, exc_info=exc)
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


@app.exception_handler(FilterError)
def handle_filter_error(request: Request, exc: FilterError) -> JSONResponse:
    logger.error("FilterError: %s", exc, exc_info=exc)
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


@app.exception_handler(RequestValidationError)
def handle_invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.error("Invalid request payload: %s", exc.errors())
    return error_response(request, status.HTTP_400_BAD_REQUEST, "Invalid request payload")


@app.exception_handler(StarletteHTTPException)
def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(request, exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred."
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/sanitize")
def sanitize(word: str, sanitizer: WordSanitizer = Depends(get_sanitizer)) -> str:
    return sanitizer.sanitize(word)


@app.get("/api/restricted-words")
def list_words(word_store: RestrictedWordStore = Depends(get_store)) -> list[str]:
    return sorted(word_store.list())


@app.post(
    "/api/restricted-words",
    response_model=Optional[WordOut],
    status_code=status.HTTP_201_CREATED,
)
def add_word(req: WordRequest, word_store: RestrictedWordStore = Depends(get_store)):
    # None (word already present) is rendered as a 201 with a null body
    return word_store.add(req.word)


@app.put("/api/restricted-words/{word}", response_model=WordOut)
def update_word(
    word: str,
    req: WordRequest,
    word_store: RestrictedWordStore = Depends(get_store),
):
    updated = word_store.update(word, req.word)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Word not found")
    return updated


@app.delete("/api/restricted-words/{word}")
def delete_word(word: str, word_store: RestrictedWordStore = Depends(get_store)) -> None:
    if not word_store.delete(word):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Word not found")


def run() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
