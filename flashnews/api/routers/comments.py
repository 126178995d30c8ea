from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flashnews.api.dependencies import get_async_db
from flashnews.core.auth import get_current_user
from flashnews.core.config import DEFAULT_COMMENT_AVATAR
from flashnews.models.news import News as NewsModel, Comment as CommentModel
from flashnews.models.users import User as UserModel
from flashnews.schemas.news import Comment as CommentSchema, CommentCreate, CommentUpdate, Message

router = APIRouter(prefix="/news/{news_id}/comments", tags=["comments"])


async def _ensure_news_exists(db: AsyncSession, news_id: str) -> None:
    news_res = await db.execute(select(NewsModel.id).where(NewsModel.id == news_id))
    if not news_res.scalar_one_or_none():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News item not found.")


async def _get_own_comment(db: AsyncSession, news_id: str, comment_id: str, user: UserModel, action: str) -> CommentModel:
    result = await db.execute(
        select(CommentModel).where(CommentModel.id == comment_id, CommentModel.news_id == news_id)
    )
    comment = result.scalar_one_or_none()
    if not comment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found for this news item.")
    if comment.author_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"You are not authorized to {action} this comment.")
    return comment


@router.get("", response_model=list[CommentSchema])
async def get_comments(news_id: str, db: AsyncSession = Depends(get_async_db)):
    """Комментарии к новости, новые первыми."""
    await _ensure_news_exists(db, news_id)
    result = await db.execute(
        select(CommentModel).where(CommentModel.news_id == news_id).order_by(CommentModel.timestamp.desc())
    )
    return result.scalars().all()


@router.post("", response_model=CommentSchema, status_code=status.HTTP_201_CREATED)
async def create_comment(
    news_id: str,
    comment_in: CommentCreate,
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    if not comment_in.text or not comment_in.text.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comment text cannot be empty.")

    await _ensure_news_exists(db, news_id)

    db_comment = CommentModel(
        news_id=news_id,
        author=current_user.name or current_user.username,
        author_id=current_user.id,
        avatar=current_user.avatar or DEFAULT_COMMENT_AVATAR,
        text=comment_in.text.strip(),
    )
    db.add(db_comment)
    await db.commit()
    await db.refresh(db_comment)
    logger.info(f"Comment {db_comment.id} added to news {news_id} by {current_user.username}")
    return db_comment


@router.put("/{comment_id}", response_model=CommentSchema)
async def update_comment(
    news_id: str,
    comment_id: str,
    comment_in: CommentUpdate,
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    if not comment_in.text or not comment_in.text.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comment text cannot be empty for update.")

    db_comment = await _get_own_comment(db, news_id, comment_id, current_user, "edit")
    db_comment.text = comment_in.text.strip()
    await db.commit()
    await db.refresh(db_comment)
    return db_comment


@router.delete("/{comment_id}", response_model=Message)
async def delete_comment(
    news_id: str,
    comment_id: str,
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    db_comment = await _get_own_comment(db, news_id, comment_id, current_user, "delete")
    await db.delete(db_comment)
    await db.commit()
    logger.info(f"Comment {comment_id} deleted from news {news_id} by {current_user.username}")
    return {"message": "Comment deleted successfully"}
