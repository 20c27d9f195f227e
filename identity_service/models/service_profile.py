# identity_service/models/service_profile.py
# Профиль исполнителя (один на пользователя) и справочник специальностей.
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text, Uuid
from sqlalchemy.orm import backref, relationship

from identity_service.db.base import Base

service_profile_specialties = Table(
    "service_profile_specialties",
    Base.metadata,
    Column("service_profile_id", Uuid, ForeignKey("service_profiles.id", ondelete="CASCADE"), primary_key=True),
    Column("specialty_id", Integer, ForeignKey("specialties.id", ondelete="CASCADE"), primary_key=True),
)


class Specialty(Base):
    __tablename__ = "specialties"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)


class ServiceProfile(Base):
    __tablename__ = "service_profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # UNIQUE(user_id): второй профиль того же пользователя отвергает БД
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Профиль удаляется вместе с пользователем
    user = relationship("User", backref=backref("service_profile", uselist=False, cascade="all, delete"))
    specialties = relationship("Specialty", secondary=service_profile_specialties, order_by="Specialty.name")
