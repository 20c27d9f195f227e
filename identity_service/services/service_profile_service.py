# identity_service/services/service_profile_service.py
# Профили исполнителей: один профиль на пользователя, набор специальностей.
# Как и в UserService, окончательная защита от дубля — UNIQUE(user_id) в БД.
import logging
import uuid
from contextlib import contextmanager
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from identity_service.core.exceptions import (
    ServiceProfileAlreadyExists,
    ServiceProfileNotFound,
    SpecialtyNotFound,
    UserNotFound,
)
from identity_service.db.session import get_db
from identity_service.models.service_profile import ServiceProfile
from identity_service.repositories.service_profile_repository import ServiceProfileRepository
from identity_service.repositories.specialty_repository import SpecialtyRepository
from identity_service.repositories.user_repository import UserRepository
from identity_service.schemas.service_profile import ServiceProfileResponse, SpecialtyResponse

logger = logging.getLogger(__name__)


def _to_response(profile: ServiceProfile) -> ServiceProfileResponse:
    return ServiceProfileResponse(
        service_profile_id=profile.id,
        user_id=profile.user_id,
        first_name=profile.user.first_name,
        last_name=profile.user.last_name,
        description=profile.description,
        specialties=[SpecialtyResponse.model_validate(s) for s in profile.specialties],
        created_at=profile.created_at,
    )


class ServiceProfileService:
    def __init__(self, db: Session):
        self.db = db
        self.profiles = ServiceProfileRepository(db)
        self.specialties = SpecialtyRepository(db)
        self.users = UserRepository(db)

    @contextmanager
    def _transaction(self):
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def create_service_profile(
        self,
        user_id: uuid.UUID,
        description: Optional[str] = None,
        specialty_ids: Optional[List[int]] = None,
    ) -> ServiceProfileResponse:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise UserNotFound(f"User not found with ID: {user_id}")
        if self.profiles.exists_by_user_id(user_id):
            raise ServiceProfileAlreadyExists("This user already has a service profile.")

        wanted = set(specialty_ids or [])
        specialties = self.specialties.find_by_ids(wanted)
        missing = wanted - {s.id for s in specialties}
        if missing:
            raise SpecialtyNotFound(f"Specialties not found: {sorted(missing)}")

        description = description.strip() if description else None
        profile = ServiceProfile(
            id=uuid.uuid4(),
            user_id=user.id,
            description=description or None,
            specialties=specialties,
        )
        try:
            with self._transaction():
                self.profiles.save(profile)
        except IntegrityError as e:
            raise ServiceProfileAlreadyExists("This user already has a service profile.") from e

        logger.info(f"Created service profile {profile.id} for user {user_id}")
        return _to_response(profile)

    def get_service_profile_by_user_id(self, user_id: uuid.UUID) -> ServiceProfileResponse:
        profile = self.profiles.find_by_user_id(user_id)
        if profile is None:
            raise ServiceProfileNotFound(f"Service profile not found for user: {user_id}")
        return _to_response(profile)

    def find_user_id_by_service_profile_id(self, profile_id: uuid.UUID) -> uuid.UUID:
        profile = self.profiles.find_by_id(profile_id)
        if profile is None:
            raise ServiceProfileNotFound(f"Service profile not found with ID: {profile_id}")
        return profile.user_id

    def get_all_service_profiles(self) -> List[ServiceProfileResponse]:
        return [_to_response(p) for p in self.profiles.find_all()]


def get_service_profile_service(db: Session = Depends(get_db)) -> ServiceProfileService:
    return ServiceProfileService(db)
