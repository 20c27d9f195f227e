# identity_service/api/specialties.py
# Публичный список специальностей.
from typing import List

from fastapi import APIRouter, Depends

from identity_service.schemas.service_profile import SpecialtyResponse
from identity_service.services.specialty_service import SpecialtyService, get_specialty_service

router = APIRouter()


@router.get("", response_model=List[SpecialtyResponse])
def get_all_specialties(service: SpecialtyService = Depends(get_specialty_service)):
    return service.find_all()
