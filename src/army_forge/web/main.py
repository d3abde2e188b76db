from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from army_forge.rules.catalog import load_army_book
from army_forge.web.api.router import router as api_router
from army_forge.web.session import get_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # a broken default book fails startup
    config = get_config()
    book = load_army_book(config.army_book_path())
    logger.info("Army book %s loaded with %d units", book.uid, len(book.units))
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Army Forge", lifespan=lifespan)
    app.include_router(api_router)
    return app


app = create_app()
