# identity_service/api/internal.py
# Внутренние роуты для сервис-сервис вызовов (Auth-Service). НЕ для публичного API.
# Доступ только по X-Internal-Key; пользовательские JWT не принимаются.
from fastapi import APIRouter, Depends

from identity_service.core.security import require_internal_key
from identity_service.schemas.user import InternalUserAuth
from identity_service.services.user_service import UserService, get_user_service

router = APIRouter(dependencies=[Depends(require_internal_key)])


@router.get("/{phone}", response_model=InternalUserAuth)
def get_user_auth_details(phone: str, service: UserService = Depends(get_user_service)):
    """id, phone, hashed_password, role по номеру телефона (приводится к E.164)."""
    return service.find_auth_details_by_phone(phone)
