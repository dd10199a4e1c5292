from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional, List

from catalog import schemas
from catalog.database import get_db
from catalog.store import AuthorStore

router = APIRouter(prefix="/authors", tags=["Authors"])


def get_store(db: Session = Depends(get_db)) -> AuthorStore:
    return AuthorStore(db)


@router.get("", response_model=List[schemas.AuthorResponse])
def get_authors(
    name: Optional[str] = Query(None, description="Точное совпадение имени"),
    surname: Optional[str] = Query(None, description="Точное совпадение фамилии"),
    store: AuthorStore = Depends(get_store)
):
    filters = {"name": name, "surname": surname}
    return store.find_by(**{k: v for k, v in filters.items() if v is not None})


@router.get("/{author_id}", response_model=schemas.AuthorResponse)
def get_author(author_id: str, store: AuthorStore = Depends(get_store)):
    author = store.get_by_id(author_id)
    if not author:
        raise HTTPException(status_code=404, detail="Author not found")
    return author


@router.post("", response_model=schemas.AuthorResponse, status_code=201)
def create_author(author: schemas.AuthorCreate, store: AuthorStore = Depends(get_store)):
    return store.create(author.model_dump(exclude_none=True))


@router.put("/{author_id}", response_model=schemas.AuthorResponse)
def update_author(
    author_id: str,
    author: schemas.AuthorUpdate,
    store: AuthorStore = Depends(get_store)
):
    """Частичное обновление. 404, если запись не найдена или ничего не изменилось."""
    if not store.update(author_id, author.model_dump(exclude_unset=True)):
        raise HTTPException(status_code=404, detail="Not found")
    return store.get_by_id(author_id)


@router.delete("/{author_id}", response_model=schemas.OperationResult)
def delete_author(author_id: str, store: AuthorStore = Depends(get_store)):
    return {"success": store.delete(author_id)}
