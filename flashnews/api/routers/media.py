from fastapi import APIRouter, Depends

from flashnews.core.auth import get_current_user
from flashnews.models.users import User as UserModel
from flashnews.schemas.news import CloudinarySignature
from flashnews.utils import storage_cloudinary

router = APIRouter(tags=["media"])


@router.get("/cloudinary-signature", response_model=CloudinarySignature)
async def get_cloudinary_signature(current_user: UserModel = Depends(get_current_user)):
    """Подпись для загрузки картинки из браузера напрямую в Cloudinary."""
    return storage_cloudinary.sign_upload()
