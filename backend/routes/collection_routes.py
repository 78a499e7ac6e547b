from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from services.book_service import BookService
from services.collection_service import CollectionService, DuplicateCollection

router = APIRouter(prefix="/api/v1/collections", tags=["Collections"])


class CollectionCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    description: Optional[str] = None
    color: Optional[str] = Field(default="#6366f1", max_length=20)
    is_public: bool = False


def _get_owned(db: Session, user_id: int, collection_id: int):
    collection = CollectionService.get_by_id(db, user_id, collection_id)
    if not collection:
        raise HTTPException(status_code=404, detail="Collection not found")
    return collection


@router.get("")
async def list_collections(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return [c.to_dict() for c in CollectionService.get_all(db, user_id)]
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("", status_code=201)
async def create_collection(
    body: CollectionCreate,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not body.name.strip():
        raise HTTPException(status_code=400, detail="Collection name is required")
    try:
        collection = CollectionService.create(db, user_id, body.model_dump())
        return collection.to_dict()
    except DuplicateCollection:
        raise HTTPException(status_code=400, detail="Collection name already exists")
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{collection_id}")
async def get_collection(collection_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return _get_owned(db, user_id, collection_id).to_dict(include_books=True)


@router.post("/{collection_id}/books/{book_id}")
async def add_book(
    collection_id: int,
    book_id: int,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    collection = _get_owned(db, user_id, collection_id)
    book = BookService.get_by_id(db, user_id, book_id)
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    try:
        return CollectionService.add_book(db, collection, book).to_dict(include_books=True)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{collection_id}/books/{book_id}")
async def remove_book(
    collection_id: int,
    book_id: int,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    collection = _get_owned(db, user_id, collection_id)
    book = BookService.get_by_id(db, user_id, book_id)
    try:
        if not book or not CollectionService.remove_book(db, collection, book):
            raise HTTPException(status_code=404, detail="Book not in collection")
        return {"message": "Book removed from collection"}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{collection_id}")
async def delete_collection(collection_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        if not CollectionService.delete(db, user_id, collection_id):
            raise HTTPException(status_code=404, detail="Collection not found")
        return {"message": "Collection deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
