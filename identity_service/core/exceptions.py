# identity_service/core/exceptions.py
# Бизнес-ошибки identity-сервиса и их отображение в HTTP-ответы.
# Каждая ошибка несёт код (тег вида ошибки) и HTTP-статус; повторов нет.
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from identity_service.core.config import settings

logger = logging.getLogger(__name__)


class IdentityError(Exception):
    """Базовая бизнес-ошибка: определённый исход, а не сбой."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "IDENTITY_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidPhoneNumber(IdentityError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_PHONE_NUMBER"


class DuplicateUser(IdentityError):
    status_code = status.HTTP_409_CONFLICT
    code = "DUPLICATE_USER"


class UserNotFound(IdentityError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "USER_NOT_FOUND"


class InvalidCredentials(IdentityError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_CREDENTIALS"


class InvalidPassword(IdentityError):
    """Новый пароль не может быть захеширован (пустой или длиннее 72 байт)."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_PASSWORD"


class ServiceProfileNotFound(IdentityError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "SERVICE_PROFILE_NOT_FOUND"


class ServiceProfileAlreadyExists(IdentityError):
    status_code = status.HTTP_409_CONFLICT
    code = "SERVICE_PROFILE_ALREADY_EXISTS"


class SpecialtyNotFound(IdentityError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "SPECIALTY_NOT_FOUND"


async def identity_error_handler(request: Request, exc: IdentityError) -> JSONResponse:
    logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.code, "detail": exc.message},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Глобальный обработчик непредвиденных ошибок."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "detail": str(exc) if settings.ENVIRONMENT == "development" else "An error occurred",
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(IdentityError, identity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
