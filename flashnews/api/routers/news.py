import io

from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File, Form, Query
from loguru import logger
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from flashnews.api.dependencies import get_async_db
from flashnews.core.auth import get_current_user
from flashnews.core.config import DEFAULT_AUTHOR_IMAGE, DEFAULT_NEWS_IMAGE
from flashnews.models.news import News as NewsModel
from flashnews.models.users import User as UserModel
from flashnews.schemas.news import News as NewsSchema, Message
from flashnews.utils import storage

router = APIRouter(prefix="/news", tags=["news"])

# Значения фильтра категории, которые фронтенд присылает как "без фильтра"
IGNORED_CATEGORIES = {"all", "my-posts"}


async def _save_uploaded_image(image: UploadFile) -> str:
    content = await image.read()
    storage.validate_image(image.filename, image.content_type, content)
    return storage.save_file(image.filename or "image.jpg", io.BytesIO(content))


async def _release_image(db: AsyncSession, url: str | None, uploaded: bool) -> None:
    """
    Удаляет файл из хранилища, только если он был загружен для этой записи
    и больше ни одна новость на него не ссылается.
    """
    if not uploaded or not url:
        return
    result = await db.execute(select(NewsModel.id).where(NewsModel.image_url == url).limit(1))
    if result.scalar_one_or_none():
        logger.info(f"Image {url} is still referenced, kept")
        return
    storage.delete_quietly(url)


async def _get_news_or_404(db: AsyncSession, news_id: str) -> NewsModel:
    result = await db.execute(
        select(NewsModel).options(selectinload(NewsModel.comments)).where(NewsModel.id == news_id)
    )
    news = result.scalar_one_or_none()
    if not news:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News item not found")
    return news


@router.get("", response_model=list[NewsSchema])
@router.get("/", response_model=list[NewsSchema], include_in_schema=False)
async def get_news(
    category: str | None = None,
    search: str | None = None,
    author_id: str | None = Query(None, alias="authorId"),
    db: AsyncSession = Depends(get_async_db),
):
    """Список новостей (новые первыми) с комментариями, фильтрами и поиском."""
    query = select(NewsModel).options(selectinload(NewsModel.comments))

    if category and category not in IGNORED_CATEGORIES:
        query = query.where(NewsModel.category == category)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            NewsModel.title.ilike(pattern),
            NewsModel.full_content.ilike(pattern),
            NewsModel.category.ilike(pattern),
            NewsModel.author.ilike(pattern),
        ))
    if author_id:
        query = query.where(NewsModel.author_id == author_id)

    result = await db.execute(query.order_by(NewsModel.publish_date.desc()))
    return result.scalars().all()


@router.get("/{news_id}", response_model=NewsSchema)
async def get_news_detail(news_id: str, db: AsyncSession = Depends(get_async_db)):
    return await _get_news_or_404(db, news_id)


@router.post("", response_model=NewsSchema, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=NewsSchema, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_news(
    title: str | None = Form(None),
    category: str | None = Form(None),
    full_content: str | None = Form(None, alias="fullContent"),
    image_url: str | None = Form(None, alias="imageUrl"),
    image: UploadFile | None = File(None),
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Создает новость от имени текущего пользователя."""
    if not title or not category or not full_content or not full_content.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required news fields or full content is empty.",
        )

    uploaded_url = None
    if image is not None and image.filename:
        uploaded_url = await _save_uploaded_image(image)
    final_image_url = uploaded_url or image_url or DEFAULT_NEWS_IMAGE

    db_news = NewsModel(
        category=category,
        title=title,
        full_content=full_content.strip(),
        image_url=final_image_url,
        image_uploaded=uploaded_url is not None,
        author=current_user.name or current_user.username,
        author_image=current_user.avatar or DEFAULT_AUTHOR_IMAGE,
        author_id=current_user.id,
        is_featured=False,
        is_side_feature=False,
    )
    db.add(db_news)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        # Файл уже сохранён, а записи нет
        storage.delete_quietly(uploaded_url)
        raise
    logger.info(f"News {db_news.id} created by {current_user.username}")

    # Загружаем со связями для ответа
    return await _get_news_or_404(db, db_news.id)


@router.put("/{news_id}", response_model=NewsSchema)
async def update_news(
    news_id: str,
    title: str | None = Form(None),
    category: str | None = Form(None),
    full_content: str | None = Form(None, alias="fullContent"),
    image_url: str | None = Form(None, alias="imageUrl"),
    clear_image: bool = Form(False, alias="clearImage"),
    image: UploadFile | None = File(None),
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Частичное обновление новости. Редактировать может только автор.
    Картинка: новый файл заменяет старую, clearImage=true сбрасывает на заглушку,
    imageUrl подменяет ссылку, иначе картинка не меняется.
    """
    db_news = await _get_news_or_404(db, news_id)

    if db_news.author_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You are not authorized to edit this news item.")

    if full_content is not None:
        if not full_content.strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Full content cannot be empty.")
        db_news.full_content = full_content.strip()
    if title:
        db_news.title = title
    if category:
        db_news.category = category

    old_image_url = db_news.image_url
    old_image_uploaded = db_news.image_uploaded
    uploaded_url = None
    if image is not None and image.filename:
        uploaded_url = await _save_uploaded_image(image)
        db_news.image_url = uploaded_url
        db_news.image_uploaded = True
    elif clear_image:
        db_news.image_url = DEFAULT_NEWS_IMAGE
        db_news.image_uploaded = False
    elif image_url and image_url != old_image_url:
        db_news.image_url = image_url
        db_news.image_uploaded = False

    new_image_url = db_news.image_url
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        storage.delete_quietly(uploaded_url)
        raise
    if old_image_url != new_image_url:
        await _release_image(db, old_image_url, old_image_uploaded)
    logger.info(f"News {news_id} updated by {current_user.username}")
    return db_news


@router.delete("/{news_id}", response_model=Message)
async def delete_news(
    news_id: str,
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Удаляет новость вместе с комментариями и картинкой в хранилище."""
    db_news = await _get_news_or_404(db, news_id)

    if db_news.author_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You are not authorized to delete this news item.")

    image_url = db_news.image_url
    image_uploaded = db_news.image_uploaded
    await db.delete(db_news)
    await db.commit()

    await _release_image(db, image_url, image_uploaded)
    logger.info(f"News {news_id} deleted by {current_user.username}")
    return {"message": "News item deleted successfully"}
