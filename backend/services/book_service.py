"""
book_service.py — Library management
CRUD for Books. Status changes go through book_lifecycle so the progress and
date fields stay consistent with the status.
"""

import logging

from sqlalchemy.orm import Session
from sqlalchemy import desc, or_

from database import utcnow
from models import Book
from services.book_lifecycle import (
    BookFormat,
    BookPriority,
    BookStatus,
    apply_status_change,
    initial_lifecycle_fields,
    parse_enum,
)

logger = logging.getLogger(__name__)


def _clean(value):
    """Empty strings from forms are stored as NULL."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class BookService:
    @staticmethod
    def create(db: Session, user_id: int, data: dict) -> Book:
        """Create a book. Raises InvalidEnumValue for a bad status/format/priority."""
        status = data.get("status") or BookStatus.TO_READ.value
        book_format = parse_enum(BookFormat, data.get("format") or BookFormat.PHYSICAL.value, "format")
        priority = parse_enum(BookPriority, data.get("priority") or BookPriority.MEDIUM.value, "priority")
        lifecycle = initial_lifecycle_fields(status, data.get("pages"))

        try:
            book = Book(
                user_id=user_id,
                title=data["title"].strip(),
                author=data["author"].strip(),
                pages=data.get("pages"),
                isbn=_clean(data.get("isbn")),
                publisher=_clean(data.get("publisher")),
                published_year=data.get("published_year"),
                language=_clean(data.get("language")) or "English",
                description=_clean(data.get("description")),
                cover_image=_clean(data.get("cover_image")),
                format=book_format.value,
                priority=priority.value,
                **lifecycle,
            )
            book.genres = data.get("genre") or []
            db.add(book)
            db.commit()
            db.refresh(book)
            logger.info(f"Created book {book.id} for user {user_id}")
            return book
        except Exception:
            db.rollback()
            logger.exception(f"Failed to create book for user {user_id}")
            raise

    @staticmethod
    def get_all(db: Session, user_id: int, filters: dict = None) -> list[Book]:
        query = db.query(Book).filter(Book.user_id == user_id)
        filters = filters or {}

        if filters.get("search"):
            term = f"%{filters['search']}%"
            query = query.filter(or_(Book.title.ilike(term), Book.author.ilike(term)))
        if filters.get("status"):
            status = parse_enum(BookStatus, filters["status"], "status")
            query = query.filter(Book.status == status.value)

        books = query.order_by(desc(Book.date_added), desc(Book.id)).all()
        if filters.get("genre"):
            books = [b for b in books if filters["genre"] in b.genres]
        return books

    @staticmethod
    def get_by_id(db: Session, user_id: int, book_id: int) -> Book | None:
        return db.query(Book).filter_by(id=book_id, user_id=user_id).first()

    @staticmethod
    def update(db: Session, user_id: int, book_id: int, data: dict) -> Book | None:
        """
        Apply a partial update. Returns None when the book does not exist for
        this user; raises InvalidEnumValue before touching the row.
        """
        book = BookService.get_by_id(db, user_id, book_id)
        if not book:
            return None

        supplied = {k: v for k, v in data.items() if k != "status"}
        for key, enum_cls in (("format", BookFormat), ("priority", BookPriority)):
            if key in supplied:
                if supplied[key] is None:
                    supplied.pop(key)
                else:
                    supplied[key] = parse_enum(enum_cls, supplied[key], key).value
        if "current_page" in supplied and supplied["current_page"] is None:
            supplied["current_page"] = 0
        for key in ("title", "author"):
            if key in supplied:
                supplied[key] = supplied[key].strip()
        for key in ("notes", "review", "isbn", "publisher", "description", "cover_image", "language"):
            if key in supplied:
                supplied[key] = _clean(supplied[key])
        # language falls back to the column default rather than NULL
        if "language" in supplied and supplied["language"] is None:
            supplied.pop("language")

        derived = apply_status_change(book, data.get("status"), supplied)

        try:
            genres = supplied.pop("genre", None)
            if genres is not None:
                book.genres = genres
            for key, value in {**supplied, **derived}.items():
                setattr(book, key, value)
            book.updated_at = utcnow()
            db.commit()
            db.refresh(book)
            return book
        except Exception:
            db.rollback()
            logger.exception(f"Failed to update book {book_id}")
            raise

    @staticmethod
    def delete(db: Session, user_id: int, book_id: int) -> bool:
        book = BookService.get_by_id(db, user_id, book_id)
        if not book:
            return False
        try:
            db.delete(book)
            db.commit()
            logger.info(f"Deleted book {book_id} for user {user_id}")
            return True
        except Exception:
            db.rollback()
            logger.exception(f"Failed to delete book {book_id}")
            raise

    @staticmethod
    def get_stats(db: Session, user_id: int) -> dict:
        base = db.query(Book).filter(Book.user_id == user_id)
        return {
            "total_books": base.count(),
            "completed_books": base.filter(Book.status == BookStatus.COMPLETED.value).count(),
            "in_progress_books": base.filter(Book.status == BookStatus.IN_PROGRESS.value).count(),
            "to_read_books": base.filter(Book.status == BookStatus.TO_READ.value).count(),
        }
