"""
Агрегированные отчёты по каталогу.

Отчёты только читают данные и ничего не сохраняют. Связи между таблицами
слабые, поэтому соединения задаются явно по полям-идентификаторам:
книга -> автор, книга -> жанр, отзыв -> книга.
"""
import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from catalog.errors import storage_guard
from catalog.models import Author, Genre, Book, Review

logger = logging.getLogger(__name__)


class CatalogReports:

    def __init__(self, db: Session):
        self.db = db

    def count_books_by_genre(self) -> List[dict]:
        """
        Количество книг по жанрам, начиная с книг.

        Жанры без книг в результат не попадают, книги со ссылкой на
        несуществующий жанр не считаются.
        """
        with storage_guard(self.db, "count books by genre"):
            rows = self.db.query(
                Genre.id,
                Genre.name,
                func.count(Book.id).label("count")
            ).select_from(Book).join(
                Genre, Book.genre_id == Genre.id
            ).group_by(Genre.id, Genre.name).all()

        return [
            {"genre_id": genre_id, "genre_name": name, "count": count}
            for genre_id, name, count in rows
        ]

    def books_count_by_genre(self) -> List[dict]:
        """Количество книг для каждого жанра, включая жанры без книг (0)."""
        with storage_guard(self.db, "books count by genre"):
            rows = self.db.query(
                Genre.id,
                Genre.name,
                func.count(Book.id).label("book_count")
            ).outerjoin(
                Book, Book.genre_id == Genre.id
            ).group_by(Genre.id, Genre.name).all()

        return [
            {"id": genre_id, "name": name, "book_count": book_count}
            for genre_id, name, book_count in rows
        ]

    def books_with_average_rating(self) -> List[dict]:
        """
        Средний рейтинг каждой книги.

        Книга соединяется ровно с одним автором (книги без существующего
        автора пропускаются) и со всеми своими отзывами. Для книги без
        отзывов average_rating равен None, а не 0.
        """
        with storage_guard(self.db, "books with average rating"):
            rows = self.db.query(
                Book.id,
                Book.title,
                Author.name,
                Author.surname,
                Book.publish_year,
                func.avg(Review.rating).label("average_rating"),
                func.count(Review.id).label("review_count")
            ).select_from(Book).join(
                Author, Book.author_id == Author.id
            ).outerjoin(
                Review, Review.book_id == Book.id
            ).group_by(
                Book.id, Book.title, Author.name, Author.surname, Book.publish_year
            ).all()

        report = []
        for book_id, title, name, surname, publish_year, average, review_count in rows:
            report.append({
                "book_id": book_id,
                "title": title,
                "author_name": f"{name} {surname}",
                "publish_year": publish_year,
                "average_rating": float(average) if review_count > 0 else None,
                "review_count": review_count
            })

        logger.info(f"Average rating report built for {len(report)} books")
        return report
