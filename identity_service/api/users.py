# identity_service/api/users.py
# Роуты пользователей: публичная регистрация, профиль "me", админские операции.
import uuid
from typing import List

from fastapi import APIRouter, Depends, Request, Response, status

from identity_service.core.security import Principal, get_current_principal, require_role
from identity_service.models.user import RoleEnum
from identity_service.schemas.user import (
    AdminUserCreate,
    UserAdminView,
    UserChangePassword,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from identity_service.services.user_service import UserService, get_user_service

router = APIRouter()

require_admin = require_role(RoleEnum.admin)


# --- Публичные эндпоинты ---

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    payload: UserCreate,
    request: Request,
    response: Response,
    service: UserService = Depends(get_user_service),
):
    """Регистрация: номер канонизируется в E.164, пароль хешируется. Роль всегда USER."""
    user = service.register(
        national_number=payload.national_number,
        country_code=payload.country_code,
        first_name=payload.first_name,
        last_name=payload.last_name,
        password=payload.password,
        role=RoleEnum.user,
    )
    response.headers["Location"] = str(request.url_for("get_user_by_id", user_id=user.id))
    return user


# --- Эндпоинты текущего пользователя (цель = id из JWT) ---

@router.get("/me", response_model=UserResponse)
def get_me(
    principal: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
):
    return service.find_by_id(principal.user_id)


@router.put("/me", response_model=UserResponse)
def update_me(
    payload: UserUpdate,
    principal: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
):
    return service.update_profile(principal.user_id, payload.first_name, payload.last_name)


@router.post("/me/change-password", status_code=status.HTTP_204_NO_CONTENT)
def change_my_password(
    payload: UserChangePassword,
    principal: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
):
    service.change_password(principal.user_id, payload.old_password, payload.new_password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Админские эндпоинты ---

@router.post("/admin/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user_as_admin(
    payload: AdminUserCreate,
    request: Request,
    response: Response,
    _: Principal = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """Только администратор может создать пользователя с ролью ADMIN."""
    user = service.register(
        national_number=payload.national_number,
        country_code=payload.country_code,
        first_name=payload.first_name,
        last_name=payload.last_name,
        password=payload.password,
        role=payload.role,
    )
    response.headers["Location"] = str(request.url_for("get_user_by_id", user_id=user.id))
    return user


@router.get("/admin/all", response_model=List[UserAdminView])
def get_all_users(
    _: Principal = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    return service.get_all_users()


@router.get("/admin/{user_id}", response_model=UserAdminView)
def get_user_admin_view(
    user_id: uuid.UUID,
    _: Principal = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    return service.find_user_by_id(user_id)


@router.delete("/admin/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: uuid.UUID,
    _: Principal = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Объявлен последним, чтобы /me не попадал в {user_id}
@router.get("/{user_id}", response_model=UserResponse, name="get_user_by_id")
def get_user_by_id(user_id: uuid.UUID, service: UserService = Depends(get_user_service)):
    return service.find_by_id(user_id)
