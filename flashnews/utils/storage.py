import io
import os
import re
import uuid
from typing import IO, Optional

from loguru import logger
from PIL import Image, UnidentifiedImageError

from flashnews.core import config
from flashnews.core.errors import UploadError
from . import storage_cloudinary

ALLOWED_TYPES = re.compile(r"jpeg|jpg|png|gif")
UPLOADS_URL_PREFIX = "/uploads/"


def validate_image(filename: Optional[str], content_type: Optional[str], content: bytes) -> None:
    """
    Accepts only jpeg/jpg/png/gif by both extension and MIME type,
    no larger than MAX_UPLOAD_SIZE, and decodable by Pillow.
    """
    extension = os.path.splitext(filename or "")[1].lower()
    if not (ALLOWED_TYPES.search(extension) and ALLOWED_TYPES.search(content_type or "")):
        raise UploadError("Only images (jpeg, jpg, png, gif) are allowed!")
    if len(content) > config.MAX_UPLOAD_SIZE:
        max_mb = config.MAX_UPLOAD_SIZE // (1024 * 1024)
        raise UploadError(f"File size too large. Max {max_mb}MB allowed.")
    try:
        with Image.open(io.BytesIO(content)) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise UploadError(f"Uploaded file is not a valid image: {e}")


def save_file(filename_hint: str, fileobj: IO[bytes]) -> str:
    """
    Saves file and returns the URL to store in imageUrl.
    - If MEDIA_STORAGE == 'cloudinary', uploads and returns the https URL
    - Else saves under MEDIA_ROOT and returns "/uploads/<name>"
    """
    extension = os.path.splitext(filename_hint)[1].lower()
    base_name = str(uuid.uuid4())

    if config.MEDIA_STORAGE == "cloudinary":
        return storage_cloudinary.upload_fileobj(fileobj, base_name)

    # local
    media_root = config.MEDIA_ROOT
    media_root.mkdir(parents=True, exist_ok=True)
    name = f"{base_name}{extension}"
    with open(media_root / name, "wb") as out:
        out.write(fileobj.read())
    return f"{UPLOADS_URL_PREFIX}{name}"


def delete(url: Optional[str]) -> None:
    """Removes a previously stored image. External URLs and placeholders are left alone."""
    if not url:
        return
    if url.startswith(UPLOADS_URL_PREFIX):
        fs_path = config.MEDIA_ROOT / os.path.basename(url)
        if fs_path.exists():
            fs_path.unlink()
            logger.info(f"Deleted local image {fs_path}")
        return
    public_id = storage_cloudinary.public_id_from_url(url)
    if public_id:
        result = storage_cloudinary.destroy(public_id)
        if result != "ok":
            logger.warning(f"Cloudinary delete for {public_id} was not 'ok': {result}")
        else:
            logger.info(f"Deleted Cloudinary asset {public_id}")


def delete_quietly(url: Optional[str]) -> None:
    """delete(), но ошибки хранилища только логируются: запись в БД уже удалена."""
    try:
        delete(url)
    except Exception as e:
        logger.error(f"storage.delete: failed to delete {url}: {e}")
