"""
ai_service.py — Reading assistant
Builds short prompts from the user's library and forwards them to the AI
provider. Structured answers are pulled out of the reply as JSON.
"""

import json
import logging

from sqlalchemy.orm import Session
from sqlalchemy import desc

from database import utcnow
from models import Book, ReadingSession, User
from services.book_lifecycle import BookStatus

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are ReadingHub's reading assistant. Be friendly, concise and specific. "
    "When asked for JSON, reply with a single JSON object and nothing else."
)

EMPTY_LIBRARY_INSIGHTS = {
    "insights": {
        "reading_patterns": "Start adding books to your library to get personalized insights!",
        "favorite_genres": [],
        "reading_strengths": "Begin your reading journey by adding your first book.",
        "suggestions": "Add books you've read or want to read to get AI-powered insights.",
        "year_progress": "Your reading adventure is about to begin!",
    }
}


class AIServiceError(Exception):
    pass


def extract_json(text: str | None) -> dict:
    """Parse the outermost {...} object in a model reply."""
    if not text:
        raise AIServiceError("Empty response from AI provider")
    start = text.find("{")
    end = text.rfind("}") + 1
    if start == -1 or end == 0:
        raise AIServiceError("Could not find JSON in AI response")
    try:
        return json.loads(text[start:end])
    except json.JSONDecodeError as e:
        raise AIServiceError(f"Malformed JSON in AI response: {e}") from e


def _describe(book: Book) -> str:
    genres = ", ".join(book.genres) or "Unknown genre"
    line = f'"{book.title}" by {book.author} ({genres}) - {book.status}'
    if book.rating:
        line += f", rated {book.rating}/5"
    return line


async def _ask(provider, prompt: str) -> str:
    result = await provider.ask(SYSTEM_PROMPT, prompt)
    if result.get("status") != "success":
        logger.error(f"AI provider {result.get('provider')} failed: {result.get('error')}")
        raise AIServiceError(result.get("error") or "AI provider failed")
    return result.get("text") or ""


class AIService:

    @staticmethod
    async def recommendations(db: Session, user_id: int, provider) -> dict:
        books = db.query(Book).filter_by(user_id=user_id).all()
        if not books:
            return {
                "recommendations": [],
                "message": "Add some books to your library to get personalized recommendations!",
            }

        genres = sorted({g for b in books for g in b.genres})
        authors = list(dict.fromkeys(b.author for b in books))[:5]
        prompt = (
            "Recommend 5 books this reader has not read yet.\n"
            "READING HISTORY:\n" + "\n".join(_describe(b) for b in books) + "\n"
            f"Favorite genres: {', '.join(genres) or 'Not specified'}\n"
            f"Favorite authors: {', '.join(authors)}\n"
            'Return JSON: {"recommendations": [{"title": "", "author": "", "genre": [], '
            '"reason": "", "description": ""}]}'
        )
        return extract_json(await _ask(provider, prompt))

    @staticmethod
    async def insights(db: Session, user_id: int, provider) -> dict:
        books = db.query(Book).filter_by(user_id=user_id).all()
        if not books:
            return EMPTY_LIBRARY_INSIGHTS

        sessions = db.query(ReadingSession).filter_by(user_id=user_id) \
                     .order_by(desc(ReadingSession.date)).limit(50).all()
        completed = [b for b in books if b.status == BookStatus.COMPLETED.value]
        reading = [b for b in books if b.status == BookStatus.IN_PROGRESS.value]
        prompt = (
            f"COMPLETED BOOKS ({len(completed)}):\n" + "\n".join(_describe(b) for b in completed) + "\n"
            f"CURRENTLY READING ({len(reading)}):\n" + "\n".join(_describe(b) for b in reading) + "\n"
            f"RECENT SESSIONS: {len(sessions)} sessions, "
            f"{sum(s.pages_read for s in sessions)} pages, {sum(s.duration for s in sessions)} minutes\n"
            "Analyze this reader's habits. Return JSON: "
            '{"insights": {"reading_patterns": "", "favorite_genres": [], "reading_strengths": "", '
            '"suggestions": "", "year_progress": ""}}'
        )
        return extract_json(await _ask(provider, prompt))

    @staticmethod
    async def summary(book: Book, provider) -> dict:
        prompt = f'Summarize the book "{book.title}" by {book.author}.\n'
        if book.notes:
            prompt += f"The reader's notes: {book.notes}\n"
        prompt += (
            'Return JSON: {"summary": {"overview": "", "key_themes": [], "main_takeaways": [], '
            '"recommended_for": "", "similar_books": []}}'
        )
        return extract_json(await _ask(provider, prompt))

    @staticmethod
    async def goals(db: Session, user_id: int, provider) -> dict:
        books = db.query(Book).filter_by(user_id=user_id).all()
        user = db.query(User).filter_by(id=user_id).first()
        year = utcnow().year
        completed_this_year = [
            b for b in books
            if b.status == BookStatus.COMPLETED.value and b.date_finished and b.date_finished.year == year
        ]
        reading = [b for b in books if b.status == BookStatus.IN_PROGRESS.value]
        prompt = (
            f"Books completed this year: {len(completed_this_year)}\n"
            f"Current yearly goal: {user.reading_goal if user and user.reading_goal else 'Not set'}\n"
            f"Books in library: {len(books)}\n"
            f"Currently reading: {len(reading)}\n"
            "Suggest realistic reading goals. Return JSON: "
            '{"goals": {"yearly_goal": "", "monthly_goal": "", "genre_challenge": "", '
            '"reading_habit": "", "motivation": ""}}'
        )
        return extract_json(await _ask(provider, prompt))

    @staticmethod
    async def chat(db: Session, user_id: int, message: str, provider, book: Book | None = None) -> dict:
        if book is not None:
            context = f'The user is asking about "{book.title}" by {book.author}. '
            if book.notes:
                context += f"Their notes: {book.notes}. "
            if book.review:
                context += f"Their review: {book.review}. "
        else:
            recent = db.query(Book).filter_by(user_id=user_id) \
                       .order_by(desc(Book.updated_at)).limit(5).all()
            context = ""
            if recent:
                context = "The user's recent books: " + ", ".join(
                    f'"{b.title}" by {b.author} ({b.status})' for b in recent
                ) + ". "

        answer = await _ask(provider, f"{context}User question: {message}")
        return {"response": answer, "timestamp": utcnow().isoformat()}
