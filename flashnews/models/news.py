import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Text, ForeignKey, DateTime, Boolean, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from typing import TYPE_CHECKING
from flashnews.database import Base

if TYPE_CHECKING:
    from flashnews.models.users import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class News(Base):
    __tablename__ = "news"

    id: Mapped[str] = mapped_column(String(255), primary_key=True, default=lambda: str(uuid.uuid4()))
    category: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    full_content: Mapped[str] = mapped_column("fullcontent", Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column("imageurl", Text, nullable=True)
    # Картинка загружена через этот сервер и принадлежит записи
    image_uploaded: Mapped[bool] = mapped_column("imageuploaded", Boolean, default=False, server_default=false(), nullable=False)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    author_image: Mapped[str | None] = mapped_column("authorimage", Text, nullable=True)
    publish_date: Mapped[datetime] = mapped_column("publishdate", DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
    is_featured: Mapped[bool] = mapped_column("isfeatured", Boolean, default=False, nullable=False)
    is_side_feature: Mapped[bool] = mapped_column("issidefeature", Boolean, default=False, nullable=False)
    author_id: Mapped[str] = mapped_column("authorid", ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    owner: Mapped["User"] = relationship("User", back_populates="news")
    comments: Mapped[list["Comment"]] = relationship(
        "Comment",
        back_populates="news",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Comment.timestamp.desc()",
    )


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(255), primary_key=True, default=lambda: str(uuid.uuid4()))
    news_id: Mapped[str] = mapped_column(ForeignKey("news.id", ondelete="CASCADE"), nullable=False, index=True)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column("authorid", ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)

    news: Mapped["News"] = relationship("News", back_populates="comments")
    owner: Mapped["User"] = relationship("User", back_populates="comments")
