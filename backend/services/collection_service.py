"""
collection_service.py — Named groupings of books
"""

import logging

from sqlalchemy.orm import Session
from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError

from models import Book, Collection

logger = logging.getLogger(__name__)


class DuplicateCollection(Exception):
    pass


class CollectionService:
    @staticmethod
    def create(db: Session, user_id: int, data: dict) -> Collection:
        name = data["name"].strip()
        if db.query(Collection).filter_by(user_id=user_id, name=name).first():
            raise DuplicateCollection(name)
        try:
            collection = Collection(
                user_id=user_id,
                name=name,
                description=data.get("description"),
                color=data.get("color") or "#6366f1",
                is_public=bool(data.get("is_public", False)),
            )
            db.add(collection)
            db.commit()
            db.refresh(collection)
            return collection
        except IntegrityError:
            db.rollback()
            raise DuplicateCollection(name)
        except Exception:
            db.rollback()
            logger.exception(f"Failed to create collection for user {user_id}")
            raise

    @staticmethod
    def get_all(db: Session, user_id: int) -> list[Collection]:
        return db.query(Collection).filter_by(user_id=user_id) \
                 .order_by(desc(Collection.created_at), desc(Collection.id)).all()

    @staticmethod
    def get_by_id(db: Session, user_id: int, collection_id: int) -> Collection | None:
        return db.query(Collection).filter_by(id=collection_id, user_id=user_id).first()

    @staticmethod
    def add_book(db: Session, collection: Collection, book: Book) -> Collection:
        if book in collection.books:
            return collection
        try:
            collection.books.append(book)
            db.commit()
            db.refresh(collection)
            return collection
        except Exception:
            db.rollback()
            logger.exception(f"Failed to add book {book.id} to collection {collection.id}")
            raise

    @staticmethod
    def remove_book(db: Session, collection: Collection, book: Book) -> bool:
        if book not in collection.books:
            return False
        try:
            collection.books.remove(book)
            db.commit()
            return True
        except Exception:
            db.rollback()
            logger.exception(f"Failed to remove book {book.id} from collection {collection.id}")
            raise

    @staticmethod
    def delete(db: Session, user_id: int, collection_id: int) -> bool:
        collection = CollectionService.get_by_id(db, user_id, collection_id)
        if not collection:
            return False
        try:
            db.delete(collection)
            db.commit()
            return True
        except Exception:
            db.rollback()
            logger.exception(f"Failed to delete collection {collection_id}")
            raise
