from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional, List, Literal

from catalog import schemas
from catalog.database import get_db
from catalog.reports import CatalogReports
from catalog.store import BookStore

router = APIRouter(prefix="/books", tags=["Books"])


def get_store(db: Session = Depends(get_db)) -> BookStore:
    return BookStore(db)


@router.get("", response_model=List[schemas.BookResponse])
def get_books(
    title: Optional[str] = Query(None, description="Подстрока названия без учёта регистра"),
    author_id: Optional[str] = Query(None, alias="authorId"),
    genre_id: Optional[str] = Query(None, alias="genreId"),
    publish_year: Optional[int] = Query(None, alias="publishYear"),
    store: BookStore = Depends(get_store)
):
    filters = {"author_id": author_id, "genre_id": genre_id, "publish_year": publish_year}
    return store.find(title=title, **{k: v for k, v in filters.items() if v is not None})


@router.get("/search", response_model=List[schemas.BookResponse])
def search_books(
    title: str = Query(..., description="Подстрока названия"),
    publish_year: int = Query(..., alias="publishYear"),
    mode: Literal["and", "or"] = Query("and", description="and: оба условия, or: любое"),
    store: BookStore = Depends(get_store)
):
    if mode == "or":
        return store.search_or(title, publish_year)
    return store.search_and(title, publish_year)


@router.get("/average-rating", response_model=List[schemas.BookRating])
def get_books_with_average_rating(db: Session = Depends(get_db)):
    """
    Средний рейтинг по каждой книге.

    **averageRating** равен null для книг без отзывов, чтобы отличать
    "нет оценок" от нулевой оценки.
    """
    return CatalogReports(db).books_with_average_rating()


@router.get("/count-by-genre", response_model=List[schemas.GenreBookCount])
def count_books_by_genre(db: Session = Depends(get_db)):
    """Количество книг по жанрам. Жанры без книг не выводятся."""
    return CatalogReports(db).count_books_by_genre()


@router.get("/{book_id}", response_model=schemas.BookResponse)
def get_book(book_id: str, store: BookStore = Depends(get_store)):
    book = store.get_by_id(book_id)
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    return book


@router.post("", response_model=schemas.BookResponse, status_code=201)
def create_book(book: schemas.BookCreate, store: BookStore = Depends(get_store)):
    """Ссылки на автора и жанр не проверяются."""
    return store.create(book.model_dump(exclude_none=True))


@router.put("/{book_id}", response_model=schemas.BookResponse)
def update_book(
    book_id: str,
    book: schemas.BookUpdate,
    store: BookStore = Depends(get_store)
):
    if not store.update(book_id, book.model_dump(exclude_unset=True)):
        raise HTTPException(status_code=404, detail="Not found")
    return store.get_by_id(book_id)


@router.delete("/{book_id}", response_model=schemas.OperationResult)
def delete_book(book_id: str, store: BookStore = Depends(get_store)):
    return {"success": store.delete(book_id)}
