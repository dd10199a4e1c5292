from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional, List

from catalog import schemas
from catalog.database import get_db
from catalog.errors import ConflictError
from catalog.reports import CatalogReports
from catalog.store import GenreStore

router = APIRouter(prefix="/genres", tags=["Genres"])

DUPLICATE_NAME = "Genre with this name already exists"


def get_store(db: Session = Depends(get_db)) -> GenreStore:
    return GenreStore(db)


@router.get("", response_model=List[schemas.GenreResponse])
def get_genres(
    name: Optional[str] = Query(None, description="Точное совпадение названия"),
    store: GenreStore = Depends(get_store)
):
    if name is not None:
        genre = store.get_by_name(name)
        return [genre] if genre else []
    return store.get_all()


@router.get("/book-count", response_model=List[schemas.GenreSummary])
def get_books_count_by_genre(db: Session = Depends(get_db)):
    """Все жанры с количеством книг, жанры без книг с нулём."""
    return CatalogReports(db).books_count_by_genre()


@router.get("/{genre_id}", response_model=schemas.GenreResponse)
def get_genre(genre_id: str, store: GenreStore = Depends(get_store)):
    genre = store.get_by_id(genre_id)
    if not genre:
        raise HTTPException(status_code=404, detail="Genre not found")
    return genre


@router.post("", response_model=schemas.GenreResponse, status_code=201)
def create_genre(genre: schemas.GenreCreate, store: GenreStore = Depends(get_store)):
    try:
        return store.create(genre.model_dump(exclude_none=True))
    except ConflictError:
        raise HTTPException(status_code=400, detail=DUPLICATE_NAME)


@router.put("/{genre_id}", response_model=schemas.GenreResponse)
def update_genre(
    genre_id: str,
    genre: schemas.GenreUpdate,
    store: GenreStore = Depends(get_store)
):
    try:
        updated = store.update(genre_id, genre.model_dump(exclude_unset=True))
    except ConflictError:
        raise HTTPException(status_code=400, detail=DUPLICATE_NAME)

    if not updated:
        raise HTTPException(status_code=404, detail="Not found")
    return store.get_by_id(genre_id)


@router.delete("/{genre_id}", response_model=schemas.OperationResult)
def delete_genre(genre_id: str, store: GenreStore = Depends(get_store)):
    return {"success": store.delete(genre_id)}
