import json

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database import Base, utcnow


def _iso(value):
    return value.isoformat() if value else None


class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    author = Column(String(300), nullable=False)
    genre = Column(Text, nullable=True)  # JSON array string
    pages = Column(Integer, nullable=True)
    isbn = Column(String(20), nullable=True)
    publisher = Column(String(200), nullable=True)
    published_year = Column(Integer, nullable=True)
    language = Column(String(50), default="English")
    description = Column(Text, nullable=True)
    cover_image = Column(String(1000), nullable=True)
    format = Column(String(20), default="PHYSICAL")  # PHYSICAL/EBOOK/AUDIOBOOK/PDF
    priority = Column(String(20), default="MEDIUM")  # LOW/MEDIUM/HIGH/URGENT

    status = Column(String(20), default="TO_READ", nullable=False)  # TO_READ/IN_PROGRESS/COMPLETED/ON_HOLD/DNF
    current_page = Column(Integer, default=0, nullable=False)
    date_added = Column(DateTime, default=utcnow, nullable=False)
    date_started = Column(DateTime, nullable=True)
    date_finished = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    notes = Column(Text, nullable=True)
    review = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)  # 1-5

    user = relationship("User", back_populates="books")
    sessions = relationship(
        "ReadingSession",
        back_populates="book",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    collections = relationship("Collection", secondary="collection_books", back_populates="books")

    @property
    def genres(self) -> list[str]:
        if not self.genre:
            return []
        return json.loads(self.genre)

    @genres.setter
    def genres(self, values) -> None:
        seen = []
        for g in values or []:
            g = str(g).strip()
            if g and g not in seen:
                seen.append(g)
        self.genre = json.dumps(seen)

    def summary(self) -> dict:
        return {"id": self.id, "title": self.title, "author": self.author}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "author": self.author,
            "genre": self.genres,
            "pages": self.pages,
            "isbn": self.isbn,
            "publisher": self.publisher,
            "published_year": self.published_year,
            "language": self.language,
            "description": self.description,
            "cover_image": self.cover_image,
            "format": self.format,
            "priority": self.priority,
            "status": self.status,
            "current_page": self.current_page,
            "date_added": _iso(self.date_added),
            "date_started": _iso(self.date_started),
            "date_finished": _iso(self.date_finished),
            "updated_at": _iso(self.updated_at),
            "notes": self.notes,
            "review": self.review,
            "rating": self.rating,
        }
