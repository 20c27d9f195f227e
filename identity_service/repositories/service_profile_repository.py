# identity_service/repositories/service_profile_repository.py
# Доступ к профилям исполнителей. Транзакциями управляет ServiceProfileService.
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from identity_service.models.service_profile import ServiceProfile


class ServiceProfileRepository:
    def __init__(self, db: Session):
        self.db = db

    def exists_by_user_id(self, user_id: uuid.UUID) -> bool:
        return self.db.query(ServiceProfile.id).filter(ServiceProfile.user_id == user_id).first() is not None

    def find_by_user_id(self, user_id: uuid.UUID) -> Optional[ServiceProfile]:
        return self.db.query(ServiceProfile).filter(ServiceProfile.user_id == user_id).first()

    def find_by_id(self, profile_id: uuid.UUID) -> Optional[ServiceProfile]:
        return self.db.get(ServiceProfile, profile_id)

    def find_all(self) -> List[ServiceProfile]:
        return self.db.query(ServiceProfile).order_by(ServiceProfile.created_at).all()

    def save(self, profile: ServiceProfile) -> ServiceProfile:
        # flush: нарушение UNIQUE(user_id) всплывает здесь как IntegrityError
        self.db.add(profile)
        self.db.flush()
        return profile
