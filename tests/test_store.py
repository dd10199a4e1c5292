"""
Тесты хранилищ записей.
"""

import threading

import pytest
from datetime import date

from catalog.database import Base, make_engine, make_session_factory
from catalog.errors import ConflictError, StorageError
from catalog.store import AuthorStore, GenreStore, BookStore, UserStore, ReviewStore
from catalog.utils.passwords import verify_password


def test_create_assigns_id_when_absent(db):
    author = AuthorStore(db).create({"name": "Ursula", "surname": "Le Guin"})

    assert author.id
    assert AuthorStore(db).get_by_id(author.id).surname == "Le Guin"


def test_create_keeps_given_id(db):
    genre = GenreStore(db).create({"id": "g-fixed", "name": "Horror"})

    assert genre.id == "g-fixed"


def test_get_by_id_missing_returns_none(db):
    assert BookStore(db).get_by_id("nope") is None


def test_get_all_returns_every_record(db):
    store = GenreStore(db)
    for name in ("A", "B", "C"):
        store.create({"name": name})

    assert sorted(g.name for g in store.get_all()) == ["A", "B", "C"]


def test_update_reports_change(db):
    store = AuthorStore(db)
    author = store.create({"name": "Ім'я 1", "surname": "Прізвище", "birth_date": date(1969, 6, 25)})

    assert store.update(author.id, {"name": "Ім'я 3"}) is True
    assert store.get_by_id(author.id).name == "Ім'я 3"
    assert store.get_by_id(author.id).birth_date == date(1969, 6, 25)


def test_update_missing_and_noop_are_indistinguishable(db):
    store = AuthorStore(db)
    author = store.create({"name": "Same", "surname": "Value"})

    assert store.update(author.id, {"name": "Same"}) is False
    assert store.update("missing", {"name": "Other"}) is False
    assert store.update(author.id, {}) is False


def test_delete(db):
    store = BookStore(db)
    book = store.create({"title": "T", "author_id": "a", "genre_id": "g", "publish_year": 2000})

    assert store.delete(book.id) is True
    assert store.delete(book.id) is False
    assert store.get_by_id(book.id) is None


def test_delete_does_not_cascade(db):
    AuthorStore(db).create({"id": "a1", "name": "N", "surname": "S"})
    books = BookStore(db)
    books.create({"id": "b1", "title": "T", "author_id": "a1", "genre_id": "g", "publish_year": 2000})

    assert AuthorStore(db).delete("a1") is True
    assert books.get_by_id("b1").author_id == "a1"


def test_genre_name_is_unique(db):
    store = GenreStore(db)
    store.create({"name": "Fantasy"})

    with pytest.raises(ConflictError):
        store.create({"name": "Fantasy"})

    # сессия остаётся рабочей после отката
    assert len(store.get_all()) == 1


def test_genre_rename_to_existing_name_conflicts(db):
    store = GenreStore(db)
    store.create({"name": "Fantasy"})
    other = store.create({"name": "Drama"})

    with pytest.raises(ConflictError):
        store.update(other.id, {"name": "Fantasy"})
    assert store.get_by_id(other.id).name == "Drama"


def test_duplicate_user_name_creates_single_record(db):
    store = UserStore(db)
    store.create({"user_name": "dup", "password": "one"})

    with pytest.raises(ConflictError):
        store.create({"user_name": "dup", "password": "two"})
    assert len(store.find_by(user_name="dup")) == 1


def test_user_password_is_hashed(db):
    store = UserStore(db)
    user = store.create({"user_name": "reader", "password": "secret"})

    assert user.hashed_password != "secret"
    assert verify_password("secret", user.hashed_password)

    assert store.update(user.id, {"password": "changed"}) is True
    assert verify_password("changed", store.get_by_id(user.id).hashed_password)


def test_user_same_password_is_not_a_change(db):
    store = UserStore(db)
    user = store.create({"user_name": "reader", "password": "secret"})
    hashed = user.hashed_password

    assert store.update(user.id, {"password": "secret"}) is False
    assert store.update(user.id, {"user_name": "reader", "password": "secret"}) is False
    assert store.get_by_id(user.id).hashed_password == hashed
    assert store.update("missing", {"password": "secret"}) is False


def test_concurrent_duplicate_user_names_create_single_record(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'users.db'}")
    Base.metadata.create_all(bind=engine)
    session_factory = make_session_factory(engine)
    barrier = threading.Barrier(2)
    outcomes = []

    def create_user(password):
        db = session_factory()
        try:
            barrier.wait()
            UserStore(db).create({"user_name": "dup", "password": password})
            outcomes.append("created")
        except ConflictError:
            outcomes.append("conflict")
        finally:
            db.close()

    threads = [threading.Thread(target=create_user, args=(p,)) for p in ("one", "two")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    db = session_factory()
    try:
        assert sorted(outcomes) == ["conflict", "created"]
        assert len(UserStore(db).find_by(user_name="dup")) == 1
    finally:
        db.close()
        engine.dispose()


def test_user_location_and_lookup(db):
    store = UserStore(db)
    point = {"type": "Point", "coordinates": [36.2314, 49.9915]}
    store.create({"user_name": "geo", "password": "p", "location": point})

    assert store.get_by_user_name("geo").location == point
    assert store.get_by_user_name("nobody") is None


def test_author_lookups(db):
    store = AuthorStore(db)
    store.create({"name": "Ім'я 1", "surname": "Ім'я 12"})
    store.create({"name": "Ім'я 2", "surname": "Ім'я 12"})
    store.create({"name": "Ім'я 3", "surname": "Ім'я 2"})

    assert len(store.get_by_name("Ім'я 1")) == 1
    assert len(store.get_by_surname("Ім'я 12")) == 2
    assert store.get_by_name("nobody") == []


def test_genre_lookup_by_name(db):
    store = GenreStore(db)
    genre = store.create({"name": "Poetry"})

    assert store.get_by_name("Poetry").id == genre.id
    assert store.get_by_name("poetry") is None


@pytest.fixture
def books(db):
    store = BookStore(db)
    store.create({"id": "b1", "title": "The Colour of Magic", "author_id": "a1", "genre_id": "g1", "publish_year": 1983})
    store.create({"id": "b2", "title": "The Light Fantastic", "author_id": "a1", "genre_id": "g1", "publish_year": 1986})
    store.create({"id": "b3", "title": "Neuromancer", "author_id": "a2", "genre_id": "g2", "publish_year": 1984})
    store.create({"id": "b4", "title": "Count Zero", "author_id": "a2", "genre_id": "g2", "publish_year": 1986})
    return store


def ids(records):
    return sorted(r.id for r in records)


def test_book_title_substring_is_case_insensitive(books):
    assert ids(books.get_by_title("the")) == ["b1", "b2"]
    assert ids(books.get_by_title("MAGIC")) == ["b1"]
    assert books.get_by_title("%") == []


def test_book_reference_lookups(books):
    assert ids(books.get_by_author("a2")) == ["b3", "b4"]
    assert ids(books.get_by_genre("g1")) == ["b1", "b2"]
    assert ids(books.get_by_publish_year(1986)) == ["b2", "b4"]


def test_book_find_combines_filters(books):
    assert ids(books.find(title="o", publish_year=1986)) == ["b4"]
    assert ids(books.find(genre_id="g1")) == ["b1", "b2"]
    assert len(books.find()) == 4


def test_book_search_and_or(books):
    assert ids(books.search_and("fantastic", 1986)) == ["b2"]
    assert ids(books.search_and("fantastic", 1983)) == []
    assert ids(books.search_or("neuro", 1986)) == ["b2", "b3", "b4"]


def test_review_lookups(db):
    store = ReviewStore(db)
    store.create({"user_id": "u1", "book_id": "b1", "rating": 5, "text": "a"})
    store.create({"user_id": "u1", "book_id": "b2", "rating": 4, "text": "b"})
    store.create({"user_id": "u2", "book_id": "b1", "rating": 3, "text": "c"})

    assert len(store.get_by_book("b1")) == 2
    assert len(store.get_by_user("u1")) == 2
    assert store.get_by_user("u3") == []


def test_review_created_at_defaults(db):
    review = ReviewStore(db).create({"user_id": "u1", "book_id": "b1", "rating": 1})

    assert review.created_at is not None
    assert review.updated_at is None


def test_append_text_twice_appends_twice(db):
    store = ReviewStore(db)
    review = store.create({"user_id": "u1", "book_id": "b1", "rating": 5, "text": "abc"})

    assert store.append_text_to_all("!") is True
    assert store.append_text_to_all("!") is True

    updated = store.get_by_id(review.id)
    assert updated.text == "abc!!"
    assert updated.updated_at is not None


def test_append_text_keeps_missing_text_missing(db):
    store = ReviewStore(db)
    review = store.create({"user_id": "u1", "book_id": "b1", "rating": 5})

    assert store.append_text_to_all("!") is True
    assert store.get_by_id(review.id).text is None


def test_bulk_operations_on_empty_collection(db):
    store = ReviewStore(db)

    assert store.append_text_to_all("!") is False
    assert store.format_texts() is False


def test_format_texts(db):
    store = ReviewStore(db)
    with_text = store.create({"user_id": "u1", "book_id": "b1", "rating": 5, "text": "Great"})
    without_text = store.create({"user_id": "u1", "book_id": "b2", "rating": 3})

    assert store.format_texts(label="Review: ", placeholder="No description") is True

    assert store.get_by_id(with_text.id).text == "Review: Great"
    assert store.get_by_id(without_text.id).text == "No description"


def test_store_raises_storage_error_without_tables():
    engine = make_engine("sqlite://")
    db = make_session_factory(engine)()
    try:
        with pytest.raises(StorageError):
            GenreStore(db).create({"name": "Fantasy"})
        with pytest.raises(StorageError):
            GenreStore(db).get_all()
    finally:
        db.close()
        engine.dispose()
