"""FastAPI application factory and configuration."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from . import models  # noqa: F401 - ensure models are registered with SQLModel
from .api import register_routes
from .core import (
    ALLOWED_CORS_ORIGINS,
    DB_RESET,
    LEXICON_PATH,
    LOG_LEVEL,
    StoreUnavailable,
    build_engine,
    configure_logging,
    create_tables,
)
from .services import Lexicon, Services, SQLModelStore, WordList, build_services

logger = logging.getLogger(__name__)


def load_lexicon() -> Optional[Lexicon]:
    """Word list for dictionary checks, when one is configured."""

    if LEXICON_PATH is None:
        return None
    words = WordList.from_file(LEXICON_PATH)
    logger.info("Loaded %d words from %s", len(words), LEXICON_PATH)
    return words


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables(app.state.engine, reset=app.state.db_reset)
    await app.state.services.store.purge_expired()
    yield


async def store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Storage temporarily unavailable"})


def create_app(
    engine: Optional[Engine] = None,
    *,
    services: Optional[Services] = None,
    db_reset: bool = DB_RESET,
) -> FastAPI:
    configure_logging(LOG_LEVEL)

    engine = engine or build_engine()
    if services is None:
        services = build_services(SQLModelStore(engine), lexicon=load_lexicon())

    app = FastAPI(title="Word Fragments API", version="1.0.0", lifespan=lifespan)
    app.state.engine = engine
    app.state.services = services
    app.state.db_reset = db_reset

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StoreUnavailable, store_unavailable_handler)

    register_routes(app)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("wordfragments.app:app", host="127.0.0.1", port=3000, reload=True)
