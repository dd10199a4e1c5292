"""Library catalog REST API: authors, genres, books, users, reviews and reports."""
