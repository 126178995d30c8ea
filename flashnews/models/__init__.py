from .news import News, Comment
from .users import User


__all__ = ["News", "Comment", "User"]
