from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Literal
from datetime import date, datetime


class CatalogModel(BaseModel):
    """Поля в JSON в camelCase, в Python в snake_case"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class OperationResult(BaseModel):
    success: bool


class AuthorBase(CatalogModel):
    name: str = Field(..., min_length=1, description="Имя автора")
    surname: str = Field(..., min_length=1, description="Фамилия автора")
    birth_date: Optional[date] = Field(None, description="Дата рождения")

class AuthorCreate(AuthorBase):
    id: Optional[str] = Field(None, max_length=32)

class AuthorUpdate(CatalogModel):
    # обязательные поля можно не передавать, но нельзя обнулить
    name: str = Field(None, min_length=1)
    surname: str = Field(None, min_length=1)
    birth_date: Optional[date] = None

class AuthorResponse(AuthorBase):
    id: str


class GenreBase(CatalogModel):
    name: str = Field(..., min_length=1, max_length=100, description="Название жанра")

class GenreCreate(GenreBase):
    id: Optional[str] = Field(None, max_length=32)

class GenreUpdate(CatalogModel):
    name: str = Field(None, min_length=1, max_length=100)

class GenreResponse(GenreBase):
    id: str


class BookBase(CatalogModel):
    title: str = Field(..., min_length=1, description="Название книги")
    author_id: str = Field(..., description="ID автора")
    genre_id: str = Field(..., description="ID жанра")
    publish_year: int = Field(..., description="Год издания")

class BookCreate(BookBase):
    id: Optional[str] = Field(None, max_length=32)

class BookUpdate(CatalogModel):
    title: str = Field(None, min_length=1)
    author_id: str = None
    genre_id: str = None
    publish_year: int = None

class BookResponse(BookBase):
    id: str


class GeoPoint(CatalogModel):
    """Точка GeoJSON, coordinates = [долгота, широта]"""
    type: Literal["Point"] = "Point"
    coordinates: List[float] = Field(..., min_length=2, max_length=2)

    @field_validator("coordinates")
    @classmethod
    def check_ranges(cls, value: List[float]) -> List[float]:
        longitude, latitude = value
        if not -180 <= longitude <= 180:
            raise ValueError("longitude must be within [-180, 180]")
        if not -90 <= latitude <= 90:
            raise ValueError("latitude must be within [-90, 90]")
        return value

class UserCreate(CatalogModel):
    id: Optional[str] = Field(None, max_length=32)
    user_name: str = Field(..., min_length=1, max_length=50, description="Имя пользователя")
    password: str = Field(..., min_length=1, description="Пароль")
    location: Optional[GeoPoint] = Field(None, description="Местоположение")

class UserUpdate(CatalogModel):
    user_name: str = Field(None, min_length=1, max_length=50)
    password: str = Field(None, min_length=1)
    location: Optional[GeoPoint] = None

class UserResponse(CatalogModel):
    """Пароль в ответах не возвращается"""
    id: str
    user_name: str
    location: Optional[GeoPoint] = None


class ReviewBase(CatalogModel):
    user_id: str = Field(..., description="ID пользователя")
    book_id: str = Field(..., description="ID книги")
    rating: float = Field(..., ge=1, le=5, multiple_of=0.5, description="Оценка от 1 до 5 с шагом 0.5")
    text: Optional[str] = Field(None, description="Текст отзыва")

class ReviewCreate(ReviewBase):
    id: Optional[str] = Field(None, max_length=32)
    created_at: Optional[datetime] = None

class ReviewUpdate(CatalogModel):
    user_id: str = None
    book_id: str = None
    rating: float = Field(None, ge=1, le=5, multiple_of=0.5)
    text: Optional[str] = None

class ReviewResponse(ReviewBase):
    id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

class AppendTextRequest(CatalogModel):
    suffix: str = Field(..., description="Текст, дописываемый к каждому отзыву")


class GenreBookCount(CatalogModel):
    """Строка отчёта по книгам: только жанры, у которых есть книги"""
    genre_id: str
    genre_name: str
    count: int

class GenreSummary(CatalogModel):
    """Строка отчёта по жанрам: все жанры, включая пустые"""
    id: str
    name: str
    book_count: int

class BookRating(CatalogModel):
    book_id: str
    title: str
    author_name: str
    publish_year: int
    average_rating: Optional[float] = Field(None, description="None, если отзывов нет")
    review_count: int
