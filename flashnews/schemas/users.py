from pydantic import BaseModel, Field, ConfigDict


class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=255, description="Имя пользователя для входа")
    password: str = Field(min_length=1, description="Пароль")
    name: str | None = Field(default=None, description="Отображаемое имя")
    avatar: str | None = Field(default=None, description="URL аватара")


class UserLogin(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ProfileUpdate(BaseModel):
    name: str | None = None
    avatar: str | None = None


class User(BaseModel):
    id: str
    username: str
    name: str | None = None
    avatar: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    message: str
    user: User


class LoginResponse(UserResponse):
    token: str
