from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional, List

from catalog import schemas
from catalog.database import get_db
from catalog.errors import ConflictError
from catalog.store import UserStore

router = APIRouter(prefix="/users", tags=["Users"])

DUPLICATE_NAME = "User with this name already exists"


def get_store(db: Session = Depends(get_db)) -> UserStore:
    return UserStore(db)


@router.get("", response_model=List[schemas.UserResponse])
def get_users(
    user_name: Optional[str] = Query(None, alias="userName"),
    store: UserStore = Depends(get_store)
):
    if user_name is not None:
        user = store.get_by_user_name(user_name)
        return [user] if user else []
    return store.get_all()


@router.get("/{user_id}", response_model=schemas.UserResponse)
def get_user(user_id: str, store: UserStore = Depends(get_store)):
    user = store.get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("", response_model=schemas.UserResponse, status_code=201)
def create_user(user: schemas.UserCreate, store: UserStore = Depends(get_store)):
    """Создание пользователя. Пароль сохраняется только в виде хеша."""
    try:
        return store.create(user.model_dump(exclude_none=True))
    except ConflictError:
        raise HTTPException(status_code=400, detail=DUPLICATE_NAME)


@router.put("/{user_id}", response_model=schemas.UserResponse)
def update_user(
    user_id: str,
    user: schemas.UserUpdate,
    store: UserStore = Depends(get_store)
):
    try:
        updated = store.update(user_id, user.model_dump(exclude_unset=True))
    except ConflictError:
        raise HTTPException(status_code=400, detail=DUPLICATE_NAME)

    if not updated:
        raise HTTPException(status_code=404, detail="Not found")
    return store.get_by_id(user_id)


@router.delete("/{user_id}", response_model=schemas.OperationResult)
def delete_user(user_id: str, store: UserStore = Depends(get_store)):
    return {"success": store.delete(user_id)}
