# identity_service/db/session.py
# Инициализация SQLAlchemy engine, фабрики сессий и зависимости get_db.
# Поддерживает как Postgres, так и SQLite (для тестов/локального использования).

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from identity_service.core.config import settings

DATABASE_URL = settings.DATABASE_URL


def build_engine(url: str):
    """Создаёт engine с параметрами под конкретный диалект."""
    if url.startswith("sqlite"):
        # In-memory SQLite живёт внутри одного соединения — делим его между потоками
        pool_kwargs = {"poolclass": StaticPool} if url in ("sqlite://", "sqlite:///:memory:") else {}
        return create_engine(url, connect_args={"check_same_thread": False}, **pool_kwargs)
    # pool_pre_ping полезен для долгоживущих соединений с Postgres
    return create_engine(url, pool_pre_ping=True)


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Зависимость для получения сессии БД в эндпоинтах."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
