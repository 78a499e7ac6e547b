from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship
from database import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)
    location = Column(String(100), nullable=True)
    website = Column(String(255), nullable=True)
    reading_goal = Column(Integer, default=12)  # books per year
    created_at = Column(DateTime, default=utcnow)

    books = relationship("Book", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    collections = relationship("Collection", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "bio": self.bio,
            "location": self.location,
            "website": self.website,
            "reading_goal": self.reading_goal,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
