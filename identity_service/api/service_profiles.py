# identity_service/api/service_profiles.py
# Роуты профилей исполнителей: создание своего профиля, просмотр, админский список.
import uuid
from typing import List

from fastapi import APIRouter, Depends, Request, Response, status

from identity_service.core.security import (
    Principal,
    ensure_self_or_admin,
    get_current_principal,
    require_role,
)
from identity_service.models.user import RoleEnum
from identity_service.schemas.service_profile import ServiceProfileCreate, ServiceProfileResponse
from identity_service.services.service_profile_service import (
    ServiceProfileService,
    get_service_profile_service,
)

router = APIRouter()


@router.post("", response_model=ServiceProfileResponse, status_code=status.HTTP_201_CREATED)
def create_service_profile(
    payload: ServiceProfileCreate,
    request: Request,
    response: Response,
    principal: Principal = Depends(get_current_principal),
    service: ServiceProfileService = Depends(get_service_profile_service),
):
    """Профиль создаётся для текущего пользователя; второй профиль — 409."""
    profile = service.create_service_profile(principal.user_id, payload.description, payload.specialty_ids)
    response.headers["Location"] = str(
        request.url_for("get_service_profile_by_user_id", user_id=profile.user_id)
    )
    return profile


@router.get("/admin/all", response_model=List[ServiceProfileResponse])
def get_all_service_profiles(
    _: Principal = Depends(require_role(RoleEnum.admin)),
    service: ServiceProfileService = Depends(get_service_profile_service),
):
    return service.get_all_service_profiles()


@router.get("/user/{user_id}", response_model=ServiceProfileResponse, name="get_service_profile_by_user_id")
def get_service_profile_by_user_id(
    user_id: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    service: ServiceProfileService = Depends(get_service_profile_service),
):
    ensure_self_or_admin(principal, user_id)
    return service.get_service_profile_by_user_id(user_id)


# Публичный: по id профиля узнать владельца
@router.get("/{profile_id}/user", response_model=uuid.UUID)
def get_user_id_by_service_profile_id(
    profile_id: uuid.UUID,
    service: ServiceProfileService = Depends(get_service_profile_service),
):
    return service.find_user_id_by_service_profile_id(profile_id)
