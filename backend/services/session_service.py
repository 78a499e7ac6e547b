"""
session_service.py — Reading sessions
Logs reading intervals against a book and advances the book's progress in the
same commit.
"""

import logging
from datetime import timezone

from sqlalchemy.orm import Session, joinedload
from sqlalchemy import desc

from models import Book, ReadingSession
from services.book_lifecycle import apply_session_recorded

logger = logging.getLogger(__name__)


class SessionService:
    @staticmethod
    def create(db: Session, user_id: int, book: Book, data: dict) -> ReadingSession:
        """
        Insert a session for `book` (already checked to belong to the user) and
        apply the resulting progress update to the book.
        """
        try:
            session = ReadingSession(
                user_id=user_id,
                book_id=book.id,
                start_page=data["start_page"],
                end_page=data["end_page"],
                duration=data["duration"],
                mood=data.get("mood"),
                location=data.get("location"),
                notes=data.get("notes"),
            )
            if data.get("date"):
                date = data["date"]
                if date.tzinfo is not None:
                    date = date.astimezone(timezone.utc).replace(tzinfo=None)
                session.date = date
            db.add(session)

            for key, value in apply_session_recorded(book, data["end_page"]).items():
                setattr(book, key, value)

            db.commit()
            db.refresh(session)
            logger.info(f"Logged session {session.id} on book {book.id} ({session.pages_read} pages)")
            return session
        except Exception:
            db.rollback()
            logger.exception(f"Failed to log reading session for book {book.id}")
            raise

    @staticmethod
    def get_all(db: Session, user_id: int, book_id: int | None = None) -> list[ReadingSession]:
        query = db.query(ReadingSession).options(joinedload(ReadingSession.book)) \
                  .filter(ReadingSession.user_id == user_id)
        if book_id is not None:
            query = query.filter(ReadingSession.book_id == book_id)
        return query.order_by(desc(ReadingSession.date), desc(ReadingSession.id)).all()

    @staticmethod
    def delete(db: Session, user_id: int, session_id: int) -> bool:
        session = db.query(ReadingSession).filter_by(id=session_id, user_id=user_id).first()
        if not session:
            return False
        try:
            db.delete(session)
            db.commit()
            return True
        except Exception:
            db.rollback()
            logger.exception(f"Failed to delete reading session {session_id}")
            raise

    @staticmethod
    def get_stats(db: Session, user_id: int) -> dict:
        sessions = db.query(ReadingSession).filter_by(user_id=user_id).all()
        total_sessions = len(sessions)
        total_pages = sum(s.pages_read for s in sessions)
        total_minutes = sum(s.duration for s in sessions)
        return {
            "total_sessions": total_sessions,
            "total_pages": total_pages,
            "total_minutes": total_minutes,
            "avg_session_time": round(total_minutes / total_sessions) if total_sessions else 0,
        }
