# identity_service/schemas/service_profile.py
# Схемы профилей исполнителей и специальностей.
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class SpecialtyResponse(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class ServiceProfileCreate(BaseModel):
    description: Optional[str] = Field(default=None, max_length=2000)
    specialty_ids: List[int] = Field(default_factory=list)


class ServiceProfileResponse(BaseModel):
    service_profile_id: uuid.UUID
    user_id: uuid.UUID
    first_name: str
    last_name: str
    description: Optional[str] = None
    specialties: List[SpecialtyResponse] = []
    created_at: Optional[datetime] = None
