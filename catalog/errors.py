import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Базовая ошибка каталога"""


class ConflictError(CatalogError):
    """Нарушение уникального индекса (имя жанра, имя пользователя)"""


class StorageError(CatalogError):
    """Хранилище недоступно или запрос завершился ошибкой"""


@contextmanager
def storage_guard(db, action: str):
    """
    Перевод ошибок SQLAlchemy в ошибки каталога.

    Сессия откатывается, ошибка логируется и пробрасывается дальше:
    IntegrityError -> ConflictError, остальные -> StorageError.
    """
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Integrity violation during {action}: {e.orig}")
        raise ConflictError(f"{action}: duplicate value") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Storage failure during {action}: {e}")
        raise StorageError(f"{action} failed") from e
