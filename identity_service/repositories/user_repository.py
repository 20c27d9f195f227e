# identity_service/repositories/user_repository.py
# Доступ к таблице users. Транзакциями управляет вызывающий (UserService).
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from identity_service.models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def exists_by_phone(self, phone: str) -> bool:
        return self.db.query(User.id).filter(User.phone == phone).first() is not None

    def find_by_phone(self, phone: str) -> Optional[User]:
        return self.db.query(User).filter(User.phone == phone).first()

    def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return self.db.get(User, user_id)

    def find_all(self) -> List[User]:
        return self.db.query(User).order_by(User.created_at).all()

    def exists_by_id(self, user_id: uuid.UUID) -> bool:
        return self.db.query(User.id).filter(User.id == user_id).first() is not None

    def save(self, user: User) -> User:
        """
        Добавляет или обновляет запись. flush отправляет INSERT/UPDATE сразу,
        поэтому нарушение UNIQUE(phone) всплывает здесь как IntegrityError.
        """
        self.db.add(user)
        self.db.flush()
        return user

    def delete_by_id(self, user_id: uuid.UUID) -> None:
        user = self.db.get(User, user_id)
        if user is not None:
            self.db.delete(user)
            self.db.flush()
