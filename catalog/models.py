import uuid
from sqlalchemy import Column, Integer, String, Date, DateTime, Float, Text, JSON
from datetime import datetime
from catalog.database import Base


def new_id() -> str:
    return uuid.uuid4().hex


# Ссылки между коллекциями слабые: без ForeignKey и каскадного удаления

class Author(Base):
    __tablename__ = "authors"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, index=True)
    surname = Column(String(255), nullable=False, index=True)
    birth_date = Column(Date, nullable=True)

class Genre(Base):
    __tablename__ = "genres"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(100), unique=True, index=True, nullable=False)

class Book(Base):
    __tablename__ = "books"

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    author_id = Column(String(32), index=True, nullable=False)
    genre_id = Column(String(32), index=True, nullable=False)
    publish_year = Column(Integer, nullable=False, index=True)

class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    user_name = Column(String(50), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    # GeoJSON: {"type": "Point", "coordinates": [lng, lat]}
    location = Column(JSON, nullable=True)

class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String(32), index=True, nullable=False)
    book_id = Column(String(32), index=True, nullable=False)
    rating = Column(Float, nullable=False)
    text = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)
