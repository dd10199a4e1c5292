"""
Хранилище записей каталога.

Каждое хранилище получает сессию SQLAlchemy извне и работает с одной
таблицей: создание, чтение, частичное обновление, удаление и простые
выборки по полям. Уникальность имён жанров и пользователей обеспечивают
уникальные индексы, нарушение приводит к ConflictError.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, literal, or_, Text
from sqlalchemy.orm import Session

from catalog import config
from catalog.errors import storage_guard
from catalog.models import Author, Genre, Book, User, Review
from catalog.utils.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


class RecordStore:
    model = None

    def __init__(self, db: Session):
        self.db = db

    @property
    def name(self) -> str:
        return self.model.__tablename__

    def _find(self, *criteria) -> list:
        with storage_guard(self.db, f"query {self.name}"):
            return self.db.query(self.model).filter(*criteria).all()

    def create(self, data: dict):
        with storage_guard(self.db, f"create {self.name}"):
            record = self.model(**data)
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        return record

    def get_all(self) -> list:
        return self._find()

    def find_by(self, **fields) -> list:
        """Точное совпадение по всем переданным полям"""
        return self._find(*[getattr(self.model, key) == value for key, value in fields.items()])

    def get_by_id(self, record_id: str):
        with storage_guard(self.db, f"get {self.name}"):
            return self.db.query(self.model).filter(self.model.id == record_id).first()

    def update(self, record_id: str, fields: dict) -> bool:
        """
        Частичное обновление записи.

        Возвращает True, только если хотя бы одно поле действительно
        изменилось. Отсутствующая запись и обновление без изменений
        неразличимы: в обоих случаях False.
        """
        with storage_guard(self.db, f"update {self.name}"):
            record = self.db.query(self.model).filter(self.model.id == record_id).first()
            if record is None:
                return False

            changed = False
            for key, value in fields.items():
                if getattr(record, key) != value:
                    setattr(record, key, value)
                    changed = True

            if changed:
                self.db.commit()
            return changed

    def delete(self, record_id: str) -> bool:
        with storage_guard(self.db, f"delete {self.name}"):
            deleted = self.db.query(self.model).filter(self.model.id == record_id).delete()
            self.db.commit()
        return deleted > 0


class AuthorStore(RecordStore):
    model = Author

    def get_by_name(self, name: str) -> List[Author]:
        return self.find_by(name=name)

    def get_by_surname(self, surname: str) -> List[Author]:
        return self.find_by(surname=surname)


class GenreStore(RecordStore):
    model = Genre

    def get_by_name(self, name: str) -> Optional[Genre]:
        found = self.find_by(name=name)
        return found[0] if found else None


class BookStore(RecordStore):
    model = Book

    def get_by_title(self, title: str) -> List[Book]:
        """Поиск по подстроке названия без учёта регистра"""
        return self._find(Book.title.icontains(title, autoescape=True))

    def get_by_author(self, author_id: str) -> List[Book]:
        return self.find_by(author_id=author_id)

    def get_by_genre(self, genre_id: str) -> List[Book]:
        return self.find_by(genre_id=genre_id)

    def get_by_publish_year(self, publish_year: int) -> List[Book]:
        return self.find_by(publish_year=publish_year)

    def find(self, title: Optional[str] = None, **fields) -> List[Book]:
        """Подстрока названия плюс точное совпадение остальных полей"""
        criteria = [getattr(Book, key) == value for key, value in fields.items()]
        if title:
            criteria.append(Book.title.icontains(title, autoescape=True))
        return self._find(*criteria)

    def search_and(self, title: str, publish_year: int) -> List[Book]:
        return self._find(
            Book.title.icontains(title, autoescape=True),
            Book.publish_year == publish_year
        )

    def search_or(self, title: str, publish_year: int) -> List[Book]:
        return self._find(
            or_(
                Book.title.icontains(title, autoescape=True),
                Book.publish_year == publish_year
            )
        )


class UserStore(RecordStore):
    model = User

    def create(self, data: dict):
        data = dict(data)
        data["hashed_password"] = hash_password(data.pop("password"))
        return super().create(data)

    def update(self, record_id: str, fields: dict) -> bool:
        """Тот же пароль изменением не считается: хеш с новой солью не пишется."""
        fields = dict(fields)
        if "password" in fields:
            password = fields.pop("password")
            user = self.get_by_id(record_id)
            if user is not None and not verify_password(password, user.hashed_password):
                fields["hashed_password"] = hash_password(password)
        return super().update(record_id, fields)

    def get_by_user_name(self, user_name: str) -> Optional[User]:
        found = self.find_by(user_name=user_name)
        return found[0] if found else None


class ReviewStore(RecordStore):
    model = Review

    def get_by_book(self, book_id: str) -> List[Review]:
        return self.find_by(book_id=book_id)

    def get_by_user(self, user_id: str) -> List[Review]:
        return self.find_by(user_id=user_id)

    def _update_all(self, action: str, values: dict) -> bool:
        with storage_guard(self.db, action):
            changed = self.db.query(Review).update(values, synchronize_session=False)
            self.db.commit()
        # объекты в сессии устарели после массового UPDATE
        self.db.expire_all()
        logger.info(f"{action}: {changed} reviews updated")
        return changed > 0

    def append_text_to_all(self, suffix: str) -> bool:
        """
        Дописывает suffix к тексту каждого отзыва и ставит updated_at.

        Операция не идемпотентна: повторный вызов допишет суффикс ещё раз.
        Отзывы без текста остаются без текста.
        """
        return self._update_all("append review text", {
            Review.text: Review.text + suffix,
            Review.updated_at: datetime.utcnow()
        })

    def format_texts(
        self,
        label: str = config.REVIEW_LABEL,
        placeholder: str = config.REVIEW_PLACEHOLDER
    ) -> bool:
        """Префикс label к тексту каждого отзыва, placeholder вместо пустого текста."""
        return self._update_all("format review text", {
            Review.text: func.coalesce(literal(label, type_=Text) + Review.text, placeholder)
        })
