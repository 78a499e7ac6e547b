# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from models.user import User
from models.book import Book
from models.reading_session import ReadingSession
from models.collection import Collection, collection_books

__all__ = [
    "User",
    "Book",
    "ReadingSession",
    "Collection",
    "collection_books",
]
