# identity_service/core/security.py
# Хеширование паролей и проверки доступа.
# Три домена доверия: пользователь сам себе (JWT sub), администратор (JWT role)
# и внутренние вызовы сервис-сервис (X-Internal-Key, без JWT).
import hmac
import logging
import uuid
from dataclasses import dataclass
from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from identity_service.core.config import settings
from identity_service.models.user import RoleEnum

logger = logging.getLogger(__name__)

# Токены выдаёт внешний Auth-Service; здесь они только проверяются
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

MAX_PASSWORD_BYTES = 72


def password_fits_bcrypt(plaintext: str) -> bool:
    return len(plaintext.encode("utf-8")) <= MAX_PASSWORD_BYTES


class PasswordHasher:
    """
    Односторонний хеш с солью (bcrypt) и проверка за постоянное время.
    bcrypt видит только первые 72 байта: длинные пароли не обрезаются молча,
    hash() их отвергает, а verify() считает несовпадением.
    """

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
            bcrypt__truncate_error=True,
        )

    def hash(self, plaintext: str) -> str:
        if not password_fits_bcrypt(plaintext):
            raise ValueError(f"Password is longer than {MAX_PASSWORD_BYTES} bytes")
        return self._context.hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        if not password_fits_bcrypt(plaintext):
            return False
        try:
            return self._context.verify(plaintext, hashed)
        except (ValueError, TypeError):
            # Битый хеш в БД — это несовпадение, а не 500
            logger.warning("Stored password hash could not be parsed")
            return False


@lru_cache(maxsize=1)
def get_password_hasher() -> PasswordHasher:
    """Зависимость: единственный PasswordHasher на процесс."""
    return PasswordHasher(rounds=settings.BCRYPT_ROUNDS)


@dataclass(frozen=True)
class Principal:
    """Аутентифицированный пользователь по данным JWT."""

    user_id: uuid.UUID
    role: RoleEnum


def decode_access_token(token: str) -> Principal:
    """Проверяет подпись JWT и достаёт sub (id пользователя) и role."""
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    sub = payload.get("sub")
    role = payload.get("role")
    if sub is None or role is None:
        raise JWTError("Token is missing sub or role claim")
    try:
        return Principal(user_id=uuid.UUID(str(sub)), role=RoleEnum(role))
    except ValueError as e:
        raise JWTError(f"Malformed claim: {e}") from e


def get_current_principal(token: str = Depends(oauth2_scheme)) -> Principal:
    """Возвращает текущего пользователя по JWT или бросает 401."""
    try:
        return decode_access_token(token)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_role(*roles: RoleEnum):
    """Фабрика зависимости: пропускает только перечисленные роли."""
    allowed = set(roles)

    def _checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient privileges")
        return principal

    return _checker


def require_internal_key(x_internal_key: str | None = Header(None, alias="X-Internal-Key")) -> None:
    """
    Внутренний домен доверия: общий ключ в заголовке X-Internal-Key.
    JWT здесь не принимаются вовсе; без настроенного ключа доступ закрыт.
    """
    expected = settings.INTERNAL_API_KEY
    if not x_internal_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Internal key required")
    if not expected or not hmac.compare_digest(x_internal_key.encode(), expected.encode()):
        logger.warning("Rejected internal call with invalid key")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid internal key")


def ensure_self_or_admin(principal: Principal, target_user_id: uuid.UUID) -> None:
    """Обычный пользователь видит только своё, администратор — всё."""
    if principal.user_id != target_user_id and principal.role != RoleEnum.admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient privileges")
