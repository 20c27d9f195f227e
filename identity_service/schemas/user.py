# identity_service/schemas/user.py
# Pydantic-схемы запросов и ответов. Хеш пароля есть только во внутренней схеме.
import uuid
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field, StringConstraints

from identity_service.core.security import password_fits_bcrypt
from identity_service.models.user import RoleEnum

# Пробелы по краям срезаются, пустая после этого строка — ошибка валидации
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


def _check_password(value: str) -> str:
    # Пароль не обрезаем: пробелы внутри и по краям — часть секрета
    if not value.strip():
        raise ValueError("password must not be blank")
    if not password_fits_bcrypt(value):
        raise ValueError("password must be at most 72 bytes in UTF-8")
    return value


Password = Annotated[str, AfterValidator(_check_password)]


# Схема для РЕГИСТРАЦИИ: номер без кода страны + регион (ISO 3166-1, "BR").
# Роль здесь не принимается: публичная регистрация всегда создаёт USER
class UserCreate(BaseModel):
    national_number: NonBlankStr
    country_code: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=2)]
    first_name: Name
    last_name: Name
    password: Password


# Создание пользователя администратором: роль задаётся явно
class AdminUserCreate(UserCreate):
    role: RoleEnum = RoleEnum.user


# Публичный ответ: без хеша и роли
class UserResponse(BaseModel):
    id: uuid.UUID
    phone: str
    first_name: str
    last_name: str

    model_config = {"from_attributes": True}


# Частичное обновление: пустые/пробельные значения игнорируются сервисом
class UserUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)


class UserChangePassword(BaseModel):
    old_password: Password
    new_password: Password


class UserAdminView(BaseModel):
    """Полная карточка для администратора (хеш пароля всё равно не отдаём)."""

    id: uuid.UUID
    phone: str
    first_name: str
    last_name: str
    role: RoleEnum
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class InternalUserAuth(BaseModel):
    """Только для доверенных сервисов (Auth-Service проверяет логин)."""

    id: uuid.UUID
    phone: str
    hashed_password: str
    role: str
