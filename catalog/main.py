from fastapi import FastAPI, Depends, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session, sessionmaker
from datetime import datetime
from typing import Optional
import logging

from catalog import config
from catalog.database import Base, get_db, make_engine, make_session_factory
from catalog.errors import ConflictError, StorageError
from catalog.handlers import (
    authors_router, genres_router, books_router, users_router, reviews_router
)

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


async def conflict_error_handler(request: Request, exc: ConflictError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Record with this identifier or name already exists"}
    )


async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"Storage error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Storage unavailable"}
    )


def create_app(
    database_url: Optional[str] = None,
    session_factory: Optional[sessionmaker] = None
) -> FastAPI:
    """
    Сборка приложения.

    Фабрика сессий передаётся явно (например, из тестов) или строится по
    DATABASE_URL; в этом случае таблицы создаются при старте.
    """
    if session_factory is None:
        url = database_url or config.DATABASE_URL
        engine = make_engine(url)
        Base.metadata.create_all(bind=engine)
        logger.info(f"Database tables ready at {engine.url.render_as_string(hide_password=True)}")
        session_factory = make_session_factory(engine)

    app = FastAPI(
        title="Library Catalog API",
        description="REST API каталога библиотеки: авторы, жанры, книги, пользователи, отзывы и отчёты",
        version="1.0.0"
    )
    app.state.session_factory = session_factory
    app.state.started_at = datetime.utcnow()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"]
    )
    app.add_exception_handler(ConflictError, conflict_error_handler)
    app.add_exception_handler(StorageError, storage_error_handler)

    for router in (authors_router, genres_router, books_router, users_router, reviews_router):
        app.include_router(router)

    @app.get("/", tags=["Root"])
    def root():
        """Корневой эндпоинт с информацией о сервисе."""
        return {
            "message": "Library Catalog API v1.0.0",
            "documentation": "/docs",
            "resources": ["/authors", "/genres", "/books", "/users", "/reviews"],
            "reports": [
                "/books/average-rating",
                "/books/count-by-genre",
                "/genres/book-count"
            ]
        }

    @app.get("/health", tags=["Health"])
    def health_check(db: Session = Depends(get_db)):
        """Проверка доступности БД."""
        try:
            db.execute(text("SELECT 1"))
            db_status = "connected"
        except Exception as e:
            db_status = f"error: {str(e)}"

        uptime = datetime.utcnow() - app.state.started_at
        return {
            "status": "healthy",
            "timestamp": datetime.utcnow().isoformat(),
            "database": db_status,
            "uptime": str(uptime).split('.')[0]
        }

    logger.info("Library Catalog API initialised")
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
