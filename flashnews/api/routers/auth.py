from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from flashnews.api.dependencies import get_async_db
from flashnews.core.auth import hash_password, verify_password, create_access_token, get_current_user
from flashnews.core.config import DEFAULT_USER_AVATAR
from flashnews.models.users import User as UserModel
from flashnews.schemas.users import (
    UserCreate, UserLogin, ProfileUpdate, User as UserSchema, UserResponse, LoginResponse
)

router = APIRouter(tags=["users"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate, db: AsyncSession = Depends(get_async_db)):
    """
    Регистрирует нового пользователя. Имя по умолчанию совпадает с username.
    """
    result = await db.execute(select(UserModel.id).where(UserModel.username == user.username))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists.")

    db_user = UserModel(
        username=user.username,
        password_hash=hash_password(user.password),
        name=user.name or user.username,
        avatar=user.avatar or DEFAULT_USER_AVATAR,
    )
    db.add(db_user)
    try:
        await db.commit()
    except IntegrityError:
        # Параллельная регистрация с тем же username
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists.")
    await db.refresh(db_user)
    logger.info(f"Registered user {db_user.username} ({db_user.id})")
    return {"message": "User registered successfully!", "user": db_user}


@router.post("/login", response_model=LoginResponse)
async def login(credentials: UserLogin, db: AsyncSession = Depends(get_async_db)):
    """
    Аутентифицирует пользователя и возвращает JWT (действует ACCESS_TOKEN_EXPIRE_MINUTES).
    """
    result = await db.execute(select(UserModel).where(UserModel.username == credentials.username))
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid username or password.")

    token = create_access_token(user)
    logger.info(f"User {user.username} logged in")
    return {"message": "Login successful!", "token": token, "user": user}


@router.get("/profile", response_model=UserSchema)
async def get_profile(current_user: UserModel = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    profile: ProfileUpdate,
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Обновляет имя и (необязательно) аватар текущего пользователя."""
    if not profile.name or not profile.name.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name cannot be empty.")

    current_user.name = profile.name.strip()
    if profile.avatar:
        current_user.avatar = profile.avatar
    await db.commit()
    await db.refresh(current_user)
    return {"message": "Profile updated successfully!", "user": current_user}
