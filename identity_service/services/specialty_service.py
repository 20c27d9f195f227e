# identity_service/services/specialty_service.py
# Публичный справочник специальностей.
from typing import List

from fastapi import Depends
from sqlalchemy.orm import Session

from identity_service.db.session import get_db
from identity_service.repositories.specialty_repository import SpecialtyRepository
from identity_service.schemas.service_profile import SpecialtyResponse


class SpecialtyService:
    def __init__(self, db: Session):
        self.specialties = SpecialtyRepository(db)

    def find_all(self) -> List[SpecialtyResponse]:
        return [SpecialtyResponse.model_validate(s) for s in self.specialties.find_all()]


def get_specialty_service(db: Session = Depends(get_db)) -> SpecialtyService:
    return SpecialtyService(db)
