# identity_service/services/user_service.py
# Бизнес-логика пользователей: канонизация телефона, регистрация,
# смена пароля, частичное обновление профиля, удаление.
#
# Каждая пишущая операция — одна транзакция: commit при успехе, rollback при любой ошибке.
# Проверка exists_by_phone перед INSERT не защищает от гонки двух регистраций;
# окончательное слово за UNIQUE(phone) в БД, его IntegrityError -> DuplicateUser.
import logging
import uuid
from contextlib import contextmanager
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from identity_service.core.exceptions import (
    DuplicateUser,
    InvalidCredentials,
    InvalidPassword,
    InvalidPhoneNumber,
    UserNotFound,
)
from identity_service.core.phone import PhoneValidator, get_phone_validator
from identity_service.core.security import (
    MAX_PASSWORD_BYTES,
    PasswordHasher,
    get_password_hasher,
    password_fits_bcrypt,
)
from identity_service.db.session import get_db
from identity_service.models.user import RoleEnum, User
from identity_service.repositories.user_repository import UserRepository
from identity_service.schemas.user import InternalUserAuth, UserAdminView, UserResponse

logger = logging.getLogger(__name__)


def _is_present(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def _check_new_password(password: str) -> None:
    if not _is_present(password):
        raise InvalidPassword("Password must not be blank.")
    if not password_fits_bcrypt(password):
        raise InvalidPassword(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long.")


class UserService:
    def __init__(self, db: Session, phone_validator: PhoneValidator, password_hasher: PasswordHasher):
        self.db = db
        self.users = UserRepository(db)
        self.phones = phone_validator
        self.hasher = password_hasher

    @contextmanager
    def _transaction(self):
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def _get_or_raise(self, user_id: uuid.UUID) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise UserNotFound(f"User not found with ID: {user_id}")
        return user

    def register(
        self,
        national_number: str,
        country_code: str,
        first_name: str,
        last_name: str,
        password: str,
        role: RoleEnum = RoleEnum.user,
    ) -> UserResponse:
        _check_new_password(password)
        phone = self.phones.canonicalize(national_number, country_code)

        if self.users.exists_by_phone(phone):
            raise DuplicateUser("A user with this phone number already exists.")

        user = User(
            id=uuid.uuid4(),
            phone=phone,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            hashed_password=self.hasher.hash(password),
            role=role,
        )
        try:
            with self._transaction():
                self.users.save(user)
        except IntegrityError as e:
            # Параллельная регистрация успела закоммитить тот же номер
            raise DuplicateUser("A user with this phone number already exists.") from e

        logger.info(f"Registered user {user.id} with role {role.value}")
        return UserResponse.model_validate(user)

    def find_by_id(self, user_id: uuid.UUID) -> UserResponse:
        return UserResponse.model_validate(self._get_or_raise(user_id))

    def update_profile(
        self,
        user_id: uuid.UUID,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> UserResponse:
        """Пустое или пробельное значение оставляет поле как есть (это не очистка)."""
        with self._transaction():
            user = self._get_or_raise(user_id)
            if _is_present(first_name):
                user.first_name = first_name.strip()
            if _is_present(last_name):
                user.last_name = last_name.strip()
            self.users.save(user)
        return UserResponse.model_validate(user)

    def change_password(self, user_id: uuid.UUID, old_password: str, new_password: str) -> None:
        with self._transaction():
            user = self._get_or_raise(user_id)
            if not self.hasher.verify(old_password, user.hashed_password):
                raise InvalidCredentials("Old password does not match.")
            _check_new_password(new_password)
            user.hashed_password = self.hasher.hash(new_password)
            self.users.save(user)
        logger.info(f"Password changed for user {user_id}")

    def delete_user(self, user_id: uuid.UUID) -> None:
        with self._transaction():
            if not self.users.exists_by_id(user_id):
                raise UserNotFound(f"User not found with ID: {user_id}")
            self.users.delete_by_id(user_id)
        logger.info(f"Deleted user {user_id}")

    def find_auth_details_by_phone(self, phone: str) -> InternalUserAuth:
        """
        Данные для проверки логина: id, phone, hashed_password, role.
        Вход приводится к E.164, поэтому "+55 11 96123-4567" найдёт "+5511961234567".
        """
        try:
            canonical = self.phones.normalize_e164(phone)
        except InvalidPhoneNumber as e:
            raise UserNotFound(f"User not found with phone: {phone}") from e

        user = self.users.find_by_phone(canonical)
        if user is None:
            raise UserNotFound(f"User not found with phone: {phone}")

        return InternalUserAuth(
            id=user.id,
            phone=user.phone,
            hashed_password=user.hashed_password,
            role=user.role.value,
        )

    def get_all_users(self) -> List[UserAdminView]:
        return [UserAdminView.model_validate(u) for u in self.users.find_all()]

    def find_user_by_id(self, user_id: uuid.UUID) -> UserAdminView:
        return UserAdminView.model_validate(self._get_or_raise(user_id))


def get_user_service(
    db: Session = Depends(get_db),
    phone_validator: PhoneValidator = Depends(get_phone_validator),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserService:
    """Зависимость FastAPI: сервис на сессию запроса."""
    return UserService(db, phone_validator, password_hasher)
