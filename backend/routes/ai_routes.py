# ---------- routes/ai_routes.py ----------
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field

from auth import get_current_user
from config import GEMINI_API_KEY, GEMINI_MODEL, GEMINI_TIMEOUT
from database import get_db
from providers import BaseProvider, GeminiProvider
from services.ai_service import AIService, AIServiceError
from services.book_service import BookService

router = APIRouter(prefix="/api/v1/ai", tags=["AI"])


# ── Pydantic schemas ──────────────────────────────────────────────
class ChatRequest(BaseModel):
    message: str = Field(min_length=1, max_length=4000)
    book_id: Optional[int] = None


# ── Provider dependency ───────────────────────────────────────────
def get_ai_provider() -> BaseProvider:
    if not GEMINI_API_KEY:
        raise HTTPException(status_code=503, detail="AI service is not configured")
    return GeminiProvider(GEMINI_API_KEY, default_model=GEMINI_MODEL, timeout=GEMINI_TIMEOUT)


# ── Routes ────────────────────────────────────────────────────────
@router.get("/recommendations")
async def recommendations(
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
    provider: BaseProvider = Depends(get_ai_provider),
):
    """Personalized book recommendations based on the library."""
    try:
        return await AIService.recommendations(db, user_id, provider)
    except AIServiceError as e:
        raise HTTPException(status_code=502, detail=f"Failed to generate recommendations: {e}")
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/insights")
async def insights(
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
    provider: BaseProvider = Depends(get_ai_provider),
):
    try:
        return await AIService.insights(db, user_id, provider)
    except AIServiceError as e:
        raise HTTPException(status_code=502, detail=f"Failed to generate insights: {e}")
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/summary/{book_id}")
async def summary(
    book_id: int,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
    provider: BaseProvider = Depends(get_ai_provider),
):
    try:
        book = BookService.get_by_id(db, user_id, book_id)
        if not book:
            raise HTTPException(status_code=404, detail="Book not found")
        return await AIService.summary(book, provider)
    except HTTPException:
        raise
    except AIServiceError as e:
        raise HTTPException(status_code=502, detail=f"Failed to generate book summary: {e}")
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/goals")
async def goals(
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
    provider: BaseProvider = Depends(get_ai_provider),
):
    try:
        return await AIService.goals(db, user_id, provider)
    except AIServiceError as e:
        raise HTTPException(status_code=502, detail=f"Failed to generate reading goals: {e}")
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/chat")
async def chat(
    body: ChatRequest,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
    provider: BaseProvider = Depends(get_ai_provider),
):
    """Free-form question about books, optionally about one book."""
    try:
        book = None
        if body.book_id is not None:
            book = BookService.get_by_id(db, user_id, body.book_id)
            if not book:
                raise HTTPException(status_code=404, detail="Book not found")
        return await AIService.chat(db, user_id, body.message, provider, book=book)
    except HTTPException:
        raise
    except AIServiceError as e:
        raise HTTPException(status_code=502, detail=f"Failed to process chat message: {e}")
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
