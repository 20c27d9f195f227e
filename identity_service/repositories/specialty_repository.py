# identity_service/repositories/specialty_repository.py
# Справочник специальностей (только чтение; наполняется миграцией).
from typing import Iterable, List

from sqlalchemy.orm import Session

from identity_service.models.service_profile import Specialty


class SpecialtyRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_all(self) -> List[Specialty]:
        return self.db.query(Specialty).order_by(Specialty.name).all()

    def find_by_ids(self, ids: Iterable[int]) -> List[Specialty]:
        ids = set(ids)
        if not ids:
            return []
        return self.db.query(Specialty).filter(Specialty.id.in_(ids)).all()

    def save(self, specialty: Specialty) -> Specialty:
        self.db.add(specialty)
        self.db.flush()
        return specialty
