from .authors import router as authors_router
from .genres import router as genres_router
from .books import router as books_router
from .users import router as users_router
from .reviews import router as reviews_router

__all__ = [
    "authors_router",
    "genres_router",
    "books_router",
    "users_router",
    "reviews_router"
]
