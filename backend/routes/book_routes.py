from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from services.book_lifecycle import InvalidEnumValue
from services.book_service import BookService

router = APIRouter(prefix="/api/v1/books", tags=["Books"])


class BookCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1, max_length=500)
    author: str = Field(min_length=1, max_length=300)
    genre: List[str] = []
    pages: Optional[int] = Field(default=None, gt=0)
    status: Optional[str] = "TO_READ"
    isbn: Optional[str] = Field(default=None, max_length=20)
    publisher: Optional[str] = None
    published_year: Optional[int] = None
    language: Optional[str] = "English"
    description: Optional[str] = None
    cover_image: Optional[str] = None
    format: Optional[str] = "PHYSICAL"
    priority: Optional[str] = "MEDIUM"

    @field_validator("title", "author")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class BookUpdate(BaseModel):
    """Every field a client may change; date_added and the dates are derived."""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    author: Optional[str] = Field(default=None, min_length=1, max_length=300)
    genre: Optional[List[str]] = None
    pages: Optional[int] = Field(default=None, gt=0)
    status: Optional[str] = None
    current_page: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None
    review: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    isbn: Optional[str] = Field(default=None, max_length=20)
    publisher: Optional[str] = None
    published_year: Optional[int] = None
    language: Optional[str] = None
    description: Optional[str] = None
    cover_image: Optional[str] = None
    format: Optional[str] = None
    priority: Optional[str] = None

    @field_validator("title", "author")
    @classmethod
    def required_fields_not_null(cls, v):
        if v is None or not v.strip():
            raise ValueError("must not be empty")
        return v


@router.get("")
async def list_books(
    search: Optional[str] = None,
    status: Optional[str] = None,
    genre: Optional[str] = None,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        filters = {"search": search, "status": status, "genre": genre}
        return [b.to_dict() for b in BookService.get_all(db, user_id, filters)]
    except InvalidEnumValue as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("", status_code=201)
async def create_book(book_data: BookCreate, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        book = BookService.create(db, user_id, book_data.model_dump())
        return book.to_dict()
    except InvalidEnumValue as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/stats/overview")
async def book_stats(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return BookService.get_stats(db, user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{book_id}")
async def get_book(book_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    book = BookService.get_by_id(db, user_id, book_id)
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    return book.to_dict()


@router.put("/{book_id}")
async def update_book(
    book_id: int,
    book_data: BookUpdate,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        book = BookService.update(db, user_id, book_id, book_data.model_dump(exclude_unset=True))
        if not book:
            raise HTTPException(status_code=404, detail="Book not found")
        return book.to_dict()
    except HTTPException:
        raise
    except InvalidEnumValue as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{book_id}")
async def delete_book(book_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        if not BookService.delete(db, user_id, book_id):
            raise HTTPException(status_code=404, detail="Book not found")
        return {"message": "Book deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
