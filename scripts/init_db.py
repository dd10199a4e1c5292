import sys
import os
from datetime import date
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catalog import config
from catalog.database import Base, make_engine, make_session_factory
from catalog.errors import ConflictError
from catalog.store import AuthorStore, GenreStore, BookStore, UserStore, ReviewStore
from catalog.reports import CatalogReports

def create_tables(engine):
    """Создание всех таблиц"""
    print("Создание таблиц...")
    Base.metadata.create_all(bind=engine)
    print("✓ Таблицы созданы")

def seed_authors(db):
    """Наполнение таблицы авторов"""
    print("Добавление авторов...")

    authors_data = [
        {"id": "a1", "name": "Лев", "surname": "Толстой", "birth_date": date(1828, 9, 9)},
        {"id": "a2", "name": "Федор", "surname": "Достоевский", "birth_date": date(1821, 11, 11)},
        {"id": "a3", "name": "Михаил", "surname": "Булгаков", "birth_date": date(1891, 5, 15)},
        {"id": "a4", "name": "George", "surname": "Orwell", "birth_date": date(1903, 6, 25)},
    ]

    store = AuthorStore(db)
    added = 0
    for author_data in authors_data:
        if not store.get_by_id(author_data["id"]):
            store.create(author_data)
            added += 1

    print(f"✓ Добавлено {added} новых авторов (всего: {len(authors_data)})")

def seed_genres(db):
    """Наполнение таблицы жанров"""
    print("Добавление жанров...")

    genres_data = [
        {"id": "g1", "name": "Роман"},
        {"id": "g2", "name": "Фантастика"},
        {"id": "g3", "name": "Антиутопия"},
        {"id": "g4", "name": "Поэзия"},
    ]

    store = GenreStore(db)
    added = 0
    for genre_data in genres_data:
        try:
            store.create(genre_data)
            added += 1
        except ConflictError:
            pass

    print(f"✓ Добавлено {added} новых жанров (всего: {len(genres_data)})")

def seed_books(db):
    """Наполнение таблицы книг"""
    print("Добавление книг...")

    books_data = [
        {"id": "b1", "title": "Война и мир", "author_id": "a1", "genre_id": "g1", "publish_year": 1869},
        {"id": "b2", "title": "Анна Каренина", "author_id": "a1", "genre_id": "g1", "publish_year": 1877},
        {"id": "b3", "title": "Преступление и наказание", "author_id": "a2", "genre_id": "g1", "publish_year": 1866},
        {"id": "b4", "title": "Мастер и Маргарита", "author_id": "a3", "genre_id": "g2", "publish_year": 1967},
        {"id": "b5", "title": "1984", "author_id": "a4", "genre_id": "g3", "publish_year": 1949},
    ]

    store = BookStore(db)
    added = 0
    for book_data in books_data:
        if not store.get_by_id(book_data["id"]):
            store.create(book_data)
            added += 1

    print(f"✓ Добавлено {added} новых книг (всего: {len(books_data)})")

def seed_users(db):
    """Наполнение таблицы пользователей"""
    print("Добавление пользователей...")

    users_data = [
        {"id": "u1", "user_name": "reader", "password": "reader123",
         "location": {"type": "Point", "coordinates": [36.2314, 49.9915]}},
        {"id": "u2", "user_name": "critic", "password": "critic123",
         "location": {"type": "Point", "coordinates": [30.5234, 50.4501]}},
    ]

    store = UserStore(db)
    added = 0
    for user_data in users_data:
        if not store.get_by_user_name(user_data["user_name"]):
            store.create(user_data)
            added += 1

    print(f"✓ Добавлено {added} новых пользователей (всего: {len(users_data)})")

def seed_reviews(db):
    """Наполнение таблицы отзывов"""
    print("Добавление отзывов...")

    reviews_data = [
        {"id": "r1", "user_id": "u1", "book_id": "b1", "rating": 5, "text": "Великая книга"},
        {"id": "r2", "user_id": "u2", "book_id": "b1", "rating": 4.5, "text": "Длинно, но стоит того"},
        {"id": "r3", "user_id": "u1", "book_id": "b4", "rating": 5, "text": "Перечитываю каждый год"},
        {"id": "r4", "user_id": "u2", "book_id": "b5", "rating": 4, "text": None},
    ]

    store = ReviewStore(db)
    added = 0
    for review_data in reviews_data:
        if not store.get_by_id(review_data["id"]):
            store.create(review_data)
            added += 1

    print(f"✓ Добавлено {added} новых отзывов (всего: {len(reviews_data)})")

def print_reports(db):
    """Вывод отчётов по заполненной базе"""
    reports = CatalogReports(db)
    print("\nКниги по жанрам:")
    for row in reports.count_books_by_genre():
        print(f"  {row['genre_name']}: {row['count']}")
    print("\nРейтинг книг:")
    for row in reports.books_with_average_rating():
        rating = row["average_rating"]
        shown = f"{rating:.2f}" if rating is not None else "нет оценок"
        print(f"  {row['title']} ({row['author_name']}): {shown}, отзывов: {row['review_count']}")

def main():
    """Основная функция"""
    print("\n" + "="*50)
    print("Инициализация базы данных Library Catalog API")
    print("="*50 + "\n")

    try:
        engine = make_engine(config.DATABASE_URL)
        create_tables(engine)

        db = make_session_factory(engine)()

        try:
            seed_authors(db)
            seed_genres(db)
            seed_books(db)
            seed_users(db)
            seed_reviews(db)
            print_reports(db)

            print("\n" + "="*50)
            print("✓ Инициализация завершена успешно!")
            print("="*50)
            print("\nAPI доступен по адресу: http://localhost:8000")
            print("Документация: http://localhost:8000/docs")
            print()

        except Exception as e:
            print(f"\n✗ Ошибка: {e}")
            db.rollback()
            raise
        finally:
            db.close()

    except Exception as e:
        print(f"\n✗ Критическая ошибка: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)

if __name__ == "__main__":
    main()
