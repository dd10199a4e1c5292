from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional, List

from catalog import schemas
from catalog.database import get_db
from catalog.store import ReviewStore

router = APIRouter(prefix="/reviews", tags=["Reviews"])


def get_store(db: Session = Depends(get_db)) -> ReviewStore:
    return ReviewStore(db)


@router.get("", response_model=List[schemas.ReviewResponse])
def get_reviews(
    book_id: Optional[str] = Query(None, alias="bookId"),
    user_id: Optional[str] = Query(None, alias="userId"),
    store: ReviewStore = Depends(get_store)
):
    filters = {"book_id": book_id, "user_id": user_id}
    return store.find_by(**{k: v for k, v in filters.items() if v is not None})


@router.get("/{review_id}", response_model=schemas.ReviewResponse)
def get_review(review_id: str, store: ReviewStore = Depends(get_store)):
    review = store.get_by_id(review_id)
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")
    return review


@router.post("", response_model=schemas.ReviewResponse, status_code=201)
def create_review(review: schemas.ReviewCreate, store: ReviewStore = Depends(get_store)):
    return store.create(review.model_dump(exclude_none=True))


@router.post("/append-text", response_model=schemas.OperationResult)
def append_text_to_all_reviews(
    request: schemas.AppendTextRequest,
    store: ReviewStore = Depends(get_store)
):
    """
    Дописывает текст ко всем отзывам.

    **Не идемпотентна**: повторный вызов допишет текст ещё раз.
    """
    return {"success": store.append_text_to_all(request.suffix)}


@router.post("/format-text", response_model=schemas.OperationResult)
def format_review_texts(store: ReviewStore = Depends(get_store)):
    """Добавляет метку к тексту всех отзывов, пустой текст заменяется заглушкой."""
    return {"success": store.format_texts()}


@router.put("/{review_id}", response_model=schemas.ReviewResponse)
def update_review(
    review_id: str,
    review: schemas.ReviewUpdate,
    store: ReviewStore = Depends(get_store)
):
    if not store.update(review_id, review.model_dump(exclude_unset=True)):
        raise HTTPException(status_code=404, detail="Not found")
    return store.get_by_id(review_id)


@router.delete("/{review_id}", response_model=schemas.OperationResult)
def delete_review(review_id: str, store: ReviewStore = Depends(get_store)):
    return {"success": store.delete(review_id)}
