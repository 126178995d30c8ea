from fastapi import APIRouter
from flashnews.api.routers import (
    auth,
    news,
    comments,
    media,
    health,
)

# Основной роутер для /api
api_router = APIRouter()

# Регистрация всех роутеров
api_router.include_router(auth.router)
api_router.include_router(news.router)
api_router.include_router(comments.router)
api_router.include_router(media.router)
api_router.include_router(health.router)

__all__ = ["api_router"]
