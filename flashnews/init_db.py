"""
Подготовка базы: создаёт таблицы и импортирует новости из data.json.

    python -m flashnews.init_db                 # встроенный набор статей
    python -m flashnews.init_db uploads/data.json

data.json: формат первых версий сервера: JSON-массив новостей
со вложенным списком comments.
"""
import asyncio
import json
import secrets
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from dateutil import parser as date_parser
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flashnews.core.auth import hash_password
from flashnews.core.config import (
    DEFAULT_AUTHOR_IMAGE, DEFAULT_COMMENT_AVATAR, DEFAULT_NEWS_IMAGE, DEFAULT_USER_AVATAR
)
from flashnews.core.logging import setup_logging
from flashnews.database import async_session_maker, create_tables
from flashnews.models.news import News, Comment
from flashnews.models.users import User

ADMIN_ID = "admin"

SAMPLE_NEWS: list[dict[str, Any]] = [
    {
        "id": "feature1", "category": "Technology", "title": "Breakthrough in Quantum Computing Announced",
        "fullContent": "Scientists have achieved a major milestone in quantum computing that could revolutionize how we process information and solve complex problems, opening up new frontiers in cryptography, drug discovery, and artificial intelligence.\n\nThis breakthrough could accelerate the development of next-generation technologies.",
        "imageUrl": "https://images.unsplash.com/photo-1588681664899-f142ff2dc9b1?ixlib=rb-4.0.3&auto=format&fit=crop&w=1200&q=80",
        "author": "Robert Chen", "authorImage": "https://randomuser.me/api/portraits/men/32.jpg",
        "publishDate": "July 5, 2025 at 10:00 AM", "isFeatured": True, "authorId": ADMIN_ID,
    },
    {
        "id": "sidefeature1", "category": "Business", "title": "Global Markets React to New Economic Policies",
        "fullContent": "Global markets are showing significant volatility as new economic policies are introduced. Analysts are closely watching how these changes will impact various sectors and international trade agreements.\n\nEconomic forecasts suggest potential shifts in investment strategies.",
        "imageUrl": "https://images.unsplash.com/photo-1563986768494-4dee2763ff3f?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&q=80",
        "author": "Emily White", "authorImage": "https://randomuser.me/api/portraits/women/67.jpg",
        "publishDate": "July 5, 2025 at 1:00 PM", "isFeatured": True, "isSideFeature": True, "authorId": ADMIN_ID,
    },
    {
        "id": "sidefeature2", "category": "Sports", "title": "National Team Qualifies for Finals",
        "fullContent": "In an exhilarating display of skill and determination, the national team has successfully secured its spot in the championship finals after a series of intense matches against top-ranked opponents.\n\nFans are eagerly anticipating the final showdown.",
        "imageUrl": "https://images.unsplash.com/photo-1517245386807-bb43f82c33c4?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&q=80",
        "author": "David Lee", "authorImage": "https://randomuser.me/api/portraits/men/22.jpg",
        "publishDate": "July 5, 2025 at 11:30 AM", "isFeatured": True, "isSideFeature": True, "authorId": ADMIN_ID,
    },
    {
        "id": "sidefeature3", "category": "Automotive", "title": "Electric Vehicle Sales Surpass Traditional Models",
        "fullContent": "For the first time in history, sales of electric vehicles have officially surpassed traditional gasoline-powered models, signaling a significant shift in consumer preferences and the automotive industry's future.\n\nThis trend is expected to continue as infrastructure improves.",
        "imageUrl": "https://images.unsplash.com/photo-1503376780353-7e6692767b70?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&q=80",
        "author": "Olivia Clark", "authorImage": "https://randomuser.me/api/portraits/women/55.jpg",
        "publishDate": "July 5, 2025 at 9:15 AM", "isFeatured": True, "isSideFeature": True, "authorId": ADMIN_ID,
    },
    {
        "id": "news1", "category": "Environment", "title": "New Climate Agreement Signed by 40 Nations",
        "fullContent": "Global leaders from 40 nations have signed a landmark climate agreement, committing to ambitious targets aimed at significantly reducing carbon emissions by the year 2030, marking a crucial step towards combating climate change.\n\nThe agreement emphasizes renewable energy investments and sustainable practices.",
        "imageUrl": "https://images.unsplash.com/photo-1551288049-bebda4e38f71?ixlib=rb-4.0.3&auto=format&fit=crop&w=600&q=80",
        "author": "Sarah Johnson", "authorImage": "https://randomuser.me/api/portraits/women/44.jpg",
        "publishDate": "July 4, 2025 at 3:00 PM", "isFeatured": False, "authorId": ADMIN_ID,
    },
    {
        "id": "news2", "category": "Sports", "title": "Underdog Team Advances to Championship Finals",
        "fullContent": "In a stunning upset, the underdog team defeats the reigning champions in a nail-biting finish, securing their spot in the championship finals and thrilling fans worldwide.\n\nTheir journey has captured the hearts of many.",
        "imageUrl": "https://images.unsplash.com/photo-1517245386807-bb43f82c33c4?ixlib=rb-4.0.3&auto=format&fit=crop&w=600&q=80",
        "author": "Michael Torres", "authorImage": "https://randomuser.me/api/portraits/men/22.jpg",
        "publishDate": "July 4, 2025 at 6:45 PM", "isFeatured": False, "authorId": ADMIN_ID,
    },
    {
        "id": "news3", "category": "Finance", "title": "Central Bank Announces Interest Rate Changes",
        "fullContent": "In response to recent economic indicators and inflation concerns, the central bank has announced a series of interest rate adjustments, a move that is expected to have a significant impact on borrowing costs and investment across the country.\n\nAnalysts predict a period of market adjustment.",
        "imageUrl": "https://images.unsplash.com/photo-1460925895917-afdab827c52f?ixlib=rb-4.0.3&auto=format&fit=crop&w=600&q=80",
        "author": "David Kim", "authorImage": "https://randomuser.me/api/portraits/men/65.jpg",
        "publishDate": "July 4, 2025 at 1:00 PM", "isFeatured": False, "authorId": ADMIN_ID,
    },
]


def parse_legacy_date(value: Any) -> datetime:
    """'July 5, 2025 at 10:00 AM', ISO-8601 или пусто -> aware datetime (UTC по умолчанию)."""
    if not value:
        return datetime.now(timezone.utc)
    parsed = date_parser.parse(str(value), fuzzy=True)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def load_items(path: Path) -> list[dict[str, Any]]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of news items")
    return data


async def _ensure_user(session: AsyncSession, user_id: str, name: str | None, avatar: str | None) -> None:
    """Для каждого legacy authorId нужен пользователь, иначе не пройдёт внешний ключ."""
    if await session.get(User, user_id):
        return
    result = await session.execute(select(User.id).where(User.username == user_id))
    if result.scalar_one_or_none():
        raise ValueError(f"username {user_id!r} is taken by another user id")
    # Войти под такой учёткой нельзя: пароль случайный
    session.add(User(
        id=user_id,
        username=user_id,
        password_hash=hash_password(secrets.token_urlsafe(16)),
        name=name or user_id,
        avatar=avatar or DEFAULT_USER_AVATAR,
    ))
    await session.flush()
    logger.info(f"Created placeholder user {user_id}")


async def import_news(session: AsyncSession, items: list[dict[str, Any]]) -> int:
    """Импортирует новости с комментариями. Уже существующие id пропускаются."""
    await _ensure_user(session, ADMIN_ID, "Admin", None)

    imported = 0
    for item in items:
        news_id = item.get("id")
        if not news_id or not item.get("title") or not item.get("fullContent"):
            logger.warning(f"Skipping malformed news item: {news_id!r}")
            continue
        if await session.get(News, news_id):
            logger.info(f"News {news_id} already exists, skipped")
            continue

        author_id = item.get("authorId") or ADMIN_ID
        try:
            await _ensure_user(session, author_id, item.get("author"), item.get("authorImage"))
        except ValueError as e:
            logger.warning(f"Skipping news item {news_id!r}: {e}")
            continue

        news = News(
            id=news_id,
            category=item.get("category") or "General",
            title=item["title"],
            full_content=item["fullContent"].strip(),
            image_url=item.get("imageUrl") or DEFAULT_NEWS_IMAGE,
            author=item.get("author") or author_id,
            author_image=item.get("authorImage") or DEFAULT_AUTHOR_IMAGE,
            publish_date=parse_legacy_date(item.get("publishDate")),
            is_featured=bool(item.get("isFeatured", False)),
            is_side_feature=bool(item.get("isSideFeature", False)),
            author_id=author_id,
        )
        session.add(news)

        for raw in item.get("comments") or []:
            if not raw.get("text"):
                continue
            comment_author_id = raw.get("authorId") or ADMIN_ID
            try:
                await _ensure_user(session, comment_author_id, raw.get("author"), raw.get("avatar"))
            except ValueError as e:
                logger.warning(f"Skipping comment {raw.get('id')!r} on {news_id!r}: {e}")
                continue
            comment = Comment(
                news_id=news_id,
                author=raw.get("author") or comment_author_id,
                author_id=comment_author_id,
                avatar=raw.get("avatar") or DEFAULT_COMMENT_AVATAR,
                text=raw["text"].strip(),
                timestamp=parse_legacy_date(raw.get("timestamp")),
            )
            if raw.get("id"):
                comment.id = raw["id"]
            session.add(comment)

        await session.flush()
        imported += 1

    await session.commit()
    return imported


async def main(path: str | None = None):
    setup_logging()
    items = load_items(Path(path)) if path else SAMPLE_NEWS

    max_retries = 5
    retry_delay = 5

    for attempt in range(1, max_retries + 1):
        try:
            await create_tables()
            async with async_session_maker() as session:
                imported = await import_news(session, items)
            logger.info(f"Imported {imported} of {len(items)} news items")
            return
        except (OSError, ConnectionError) as e:
            # База может ещё подниматься (docker-compose)
            if attempt < max_retries:
                logger.warning(f"Database not ready (attempt {attempt}/{max_retries}): {e}. Retrying in {retry_delay}s...")
                await asyncio.sleep(retry_delay)
            else:
                logger.critical(f"Failed to initialize database: {e}")
                raise


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None))
