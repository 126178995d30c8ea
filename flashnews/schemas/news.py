from datetime import datetime, timezone
from pydantic import Field, BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Базовая схема: наружу поля отдаются в camelCase, как их ждёт фронтенд."""
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


def _as_utc(value: datetime) -> datetime:
    # SQLite отдаёт naive datetime; наружу всегда aware (UTC)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CommentCreate(CamelModel):
    # author/authorId из тела запроса игнорируются, автор берётся из токена
    text: str | None = None


class CommentUpdate(CommentCreate):
    pass


class Comment(CamelModel):
    id: str
    news_id: str
    author: str
    author_id: str
    avatar: str | None = None
    text: str
    timestamp: datetime

    normalize_timestamp = field_validator("timestamp")(_as_utc)


class News(CamelModel):
    id: str
    category: str
    title: str
    full_content: str
    image_url: str | None = None
    author: str
    author_image: str | None = None
    author_id: str
    publish_date: datetime
    is_featured: bool = False
    is_side_feature: bool = False
    comments: list[Comment] = Field(default=[])

    normalize_publish_date = field_validator("publish_date")(_as_utc)


class Message(BaseModel):
    message: str


class CloudinarySignature(CamelModel):
    signature: str
    timestamp: int
    api_key: str
    cloud_name: str
    folder: str
