import re
import time
from typing import IO, Optional

import cloudinary
import cloudinary.uploader
import cloudinary.utils

from flashnews.core import config
from flashnews.core.errors import StorageError

CLOUDINARY_HOST = "res.cloudinary.com"
# Всё после "upload/" (и необязательной версии v123/) до расширения
PUBLIC_ID_RE = re.compile(r"/upload/(?:v\d+/)?(?P<public_id>[^?#]+?)(?:\.[^./?#]+)?(?:[?#].*)?$")


def is_configured() -> bool:
    return bool(config.CLOUDINARY_CLOUD_NAME and config.CLOUDINARY_API_KEY and config.CLOUDINARY_API_SECRET)


def _configure() -> None:
    if not is_configured():
        raise StorageError("Cloudinary is not configured.")
    cloudinary.config(
        cloud_name=config.CLOUDINARY_CLOUD_NAME,
        api_key=config.CLOUDINARY_API_KEY,
        api_secret=config.CLOUDINARY_API_SECRET,
        secure=True,
    )


def public_id_from_url(url: str) -> Optional[str]:
    """
    Extracts the public id (folders included) from a delivery URL such as
    https://res.cloudinary.com/<cloud>/image/upload/v123/flashnews/abc.jpg
    """
    if CLOUDINARY_HOST not in url:
        return None
    match = PUBLIC_ID_RE.search(url)
    if not match:
        return None
    return match.group("public_id")


def upload_fileobj(fileobj: IO[bytes], public_id: str) -> str:
    """Uploads bytes stream to Cloudinary and returns its https URL."""
    _configure()
    result = cloudinary.uploader.upload(
        fileobj,
        folder=config.CLOUDINARY_UPLOAD_FOLDER,
        public_id=public_id,
        resource_type="image",
    )
    return result["secure_url"]


def destroy(public_id: str) -> str:
    _configure()
    result = cloudinary.uploader.destroy(public_id)
    return result.get("result", "")


def sign_upload(timestamp: Optional[int] = None) -> dict:
    """Signature for a direct browser upload into the configured folder."""
    _configure()
    timestamp = timestamp or int(time.time())
    params = {"timestamp": timestamp, "folder": config.CLOUDINARY_UPLOAD_FOLDER}
    signature = cloudinary.utils.api_sign_request(params, config.CLOUDINARY_API_SECRET)
    return {
        "signature": signature,
        "timestamp": timestamp,
        "api_key": config.CLOUDINARY_API_KEY,
        "cloud_name": config.CLOUDINARY_CLOUD_NAME,
        "folder": config.CLOUDINARY_UPLOAD_FOLDER,
    }
