from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from services.book_service import BookService
from services.session_service import SessionService

router = APIRouter(prefix="/api/v1/reading-sessions", tags=["Reading Sessions"])


class SessionCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    book_id: int
    start_page: int
    end_page: int
    duration: int  # minutes
    date: Optional[datetime] = None
    mood: Optional[str] = Field(default=None, max_length=50)
    location: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = None


@router.get("")
async def list_sessions(
    book_id: Optional[int] = None,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return [s.to_dict() for s in SessionService.get_all(db, user_id, book_id)]
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("", status_code=201)
async def create_session(
    session_data: SessionCreate,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        if session_data.start_page < 0:
            raise HTTPException(status_code=400, detail="Start page cannot be negative")
        if session_data.end_page <= session_data.start_page:
            raise HTTPException(status_code=400, detail="End page must be greater than start page")
        if session_data.duration <= 0:
            raise HTTPException(status_code=400, detail="Duration must be a positive number of minutes")

        # Verify book belongs to user
        book = BookService.get_by_id(db, user_id, session_data.book_id)
        if not book:
            raise HTTPException(status_code=404, detail="Book not found")
        if book.pages and session_data.end_page > book.pages:
            raise HTTPException(status_code=400, detail=f"End page cannot exceed the book's {book.pages} pages")

        session = SessionService.create(db, user_id, book, session_data.model_dump())
        return session.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/stats")
async def session_stats(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return SessionService.get_stats(db, user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{session_id}")
async def delete_session(session_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        if not SessionService.delete(db, user_id, session_id):
            raise HTTPException(status_code=404, detail="Reading session not found")
        return {"message": "Reading session deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
