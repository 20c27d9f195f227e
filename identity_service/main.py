# identity_service/main.py
# Точка входа FastAPI. Создание таблиц выполняется в событии startup с обработкой ошибок.

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from identity_service.api import internal as internal_router
from identity_service.api import service_profiles as service_profiles_router
from identity_service.api import specialties as specialties_router
from identity_service.api import users as users_router
from identity_service.core.config import settings
from identity_service.core.exceptions import register_exception_handlers
from identity_service.db.base import Base
from identity_service.db.session import engine

# Импорт моделей, чтобы SQLAlchemy видел их определения
import identity_service.models.user  # noqa: F401
import identity_service.models.service_profile  # noqa: F401

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

SERVICE_NAME = "Identity Service"
VERSION = "1.0.0"


def try_create_tables(retries: int = 5, delay: int = 2) -> bool:
    """
    Пытаемся создать таблицы с повторными попытками.
    Если БД недоступна, логируем ошибку и пробуем снова.

    Returns:
        True если таблицы созданы/существуют, False если все попытки исчерпаны
    """
    for attempt in range(1, retries + 1):
        try:
            logger.info(f"Попытка создания таблиц ({attempt}/{retries})...")
            Base.metadata.create_all(bind=engine)
            logger.info("✅ Database tables created (or already exist).")
            return True
        except Exception as e:
            logger.warning(f"❌ Attempt {attempt}/{retries} failed to create tables: {e}")
            if attempt < retries:
                logger.info(f"⏳ Waiting {delay}s before retry...")
                time.sleep(delay)
    logger.error(f"❌ Could not create tables after {retries} retries.")
    return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Старт: таблицы; остановка: закрытие пула соединений."""
    logger.info("🚀 Identity service starting up...")
    if not try_create_tables(retries=5, delay=2):
        if settings.is_production:
            raise RuntimeError("Cannot start application: database tables creation failed")
        logger.error("⚠️ Failed to create database tables. Application may not work correctly.")

    yield

    logger.info("🛑 Identity service shutting down...")
    engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title=f"{SERVICE_NAME} API",
        description="Пользователи, телефоны в E.164, пароли, роли и профили исполнителей",
        version=VERSION,
        lifespan=lifespan,
    )

    # CORS: в разработке всё открыто, в продакшене только GET/POST/PUT/DELETE
    if settings.ENVIRONMENT == "development":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["https://yourdomain.com"],
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)
    app.include_router(users_router.router, prefix="/api/v1/users", tags=["users"])
    app.include_router(service_profiles_router.router, prefix="/api/v1/service-profiles", tags=["service-profiles"])
    app.include_router(specialties_router.router, prefix="/api/v1/specialties", tags=["specialties"])
    app.include_router(internal_router.router, prefix="/api/v1/internal/users", tags=["internal"])

    @app.get("/", tags=["health"])
    async def root():
        """Базовый health check."""
        return {"status": "ok", "service": SERVICE_NAME, "environment": settings.ENVIRONMENT}

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy", "version": VERSION}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "identity_service.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
