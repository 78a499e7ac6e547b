"""
user_service.py — Accounts & profiles
Registration, credential checks and profile updates.
"""

import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from auth import hash_password, verify_password
from config import DEFAULT_READING_GOAL
from models import User

logger = logging.getLogger(__name__)


class EmailTaken(Exception):
    pass


class UserService:
    @staticmethod
    def get_by_id(db: Session, user_id: int) -> User | None:
        return db.query(User).filter_by(id=user_id).first()

    @staticmethod
    def register(db: Session, email: str, password: str, name: str | None = None) -> User:
        email = email.strip().lower()
        if db.query(User).filter_by(email=email).first():
            raise EmailTaken(email)
        try:
            user = User(
                email=email,
                hashed_password=hash_password(password),
                name=name,
                reading_goal=DEFAULT_READING_GOAL,
            )
            db.add(user)
            db.commit()
            db.refresh(user)
            logger.info(f"Registered user {user.id}")
            return user
        except IntegrityError:
            db.rollback()
            raise EmailTaken(email)
        except Exception:
            db.rollback()
            logger.exception("Failed to register user")
            raise

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> User | None:
        user = db.query(User).filter_by(email=email.strip().lower()).first()
        if not user or not verify_password(password, user.hashed_password):
            return None
        return user

    @staticmethod
    def update_profile(db: Session, user_id: int, data: dict) -> User | None:
        user = UserService.get_by_id(db, user_id)
        if not user:
            return None
        try:
            for key, value in data.items():
                setattr(user, key, value)
            db.commit()
            db.refresh(user)
            return user
        except Exception:
            db.rollback()
            logger.exception(f"Failed to update profile for user {user_id}")
            raise
