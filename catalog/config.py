import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./library.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

# Массовое форматирование текстов отзывов
REVIEW_LABEL = os.getenv("REVIEW_LABEL", "Review: ")
REVIEW_PLACEHOLDER = os.getenv("REVIEW_PLACEHOLDER", "No description")
