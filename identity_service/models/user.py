# identity_service/models/user.py
# Модель пользователя: phone (E.164, уникальный), имя, hashed_password, role.
import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, String, Uuid

from identity_service.db.base import Base


class RoleEnum(str, enum.Enum):
    user = "USER"
    admin = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # Только каноничный E.164; уникальность держит сама БД
    phone = Column(String(20), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(Enum(RoleEnum, name="user_role"), nullable=False, default=RoleEnum.user)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<User id={self.id} phone={self.phone} role={self.role}>"
