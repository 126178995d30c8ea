from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from loguru import logger

from flashnews.api.routers import api_router
from flashnews.core import config
from flashnews.core.errors import setup_exception_handlers
from flashnews.core.logging import setup_logging
from flashnews.core.middleware import setup_middleware
from flashnews.database import create_tables


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Таблицы users, news, comments создаются при старте, если их ещё нет
    await create_tables()
    logger.info("Users, News and Comments tables ensured.")
    yield


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(
        title="FlashNews API",
        version="1.0.0",
        lifespan=lifespan,
    )

    setup_middleware(app)
    setup_exception_handlers(app)
    app.include_router(api_router, prefix="/api")

    # Локально загруженные картинки: /uploads/<uuid>.<ext>
    config.MEDIA_ROOT.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=config.MEDIA_ROOT), name="uploads")

    # Собранный фронтенд, если указан
    if config.STATIC_DIR:
        app.mount("/", StaticFiles(directory=config.STATIC_DIR, html=True), name="static")

    return app


app = create_app()
