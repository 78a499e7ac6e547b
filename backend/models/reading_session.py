from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database import Base, utcnow


class ReadingSession(Base):
    __tablename__ = "reading_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    start_page = Column(Integer, nullable=False)
    end_page = Column(Integer, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    date = Column(DateTime, default=utcnow, nullable=False)
    mood = Column(String(50), nullable=True)
    location = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)

    book = relationship("Book", back_populates="sessions")

    @property
    def pages_read(self) -> int:
        return self.end_page - self.start_page

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "book_id": self.book_id,
            "start_page": self.start_page,
            "end_page": self.end_page,
            "duration": self.duration,
            "date": self.date.isoformat() if self.date else None,
            "mood": self.mood,
            "location": self.location,
            "notes": self.notes,
            "book": self.book.summary() if self.book else None,
        }
