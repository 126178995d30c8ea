import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent.parent

JWT_SECRET = os.getenv("JWT_SECRET", "change-me-flashnews-secret")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# Production runs on PostgreSQL (postgresql+asyncpg://...), local runs on SQLite
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite+aiosqlite:///{BASE_DIR / 'flashnews.db'}")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "https://flashnews1.netlify.app,http://localhost:3000,http://127.0.0.1:3000",
    ).split(",")
    if origin.strip()
]

# "local" keeps uploads under MEDIA_ROOT and serves them at /uploads,
# "cloudinary" pushes them to the configured Cloudinary account
MEDIA_STORAGE = os.getenv("MEDIA_STORAGE", "local").lower()
MEDIA_ROOT = Path(os.getenv("MEDIA_ROOT", str(BASE_DIR / "uploads")))
MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", str(5 * 1024 * 1024)))

CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")
CLOUDINARY_UPLOAD_FOLDER = os.getenv("CLOUDINARY_UPLOAD_FOLDER", "flashnews")

# Optional directory with the built frontend, mounted at "/"
STATIC_DIR = os.getenv("STATIC_DIR")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FILE = os.getenv("LOG_FILE")

DEFAULT_USER_AVATAR = "https://placehold.co/100x100?text=User"
DEFAULT_AUTHOR_IMAGE = "https://placehold.co/28x28?text=A"
DEFAULT_COMMENT_AVATAR = "https://placehold.co/45x45?text=U"
DEFAULT_NEWS_IMAGE = "https://placehold.co/600x400?text=No+Image"
