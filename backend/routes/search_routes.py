from fastapi import APIRouter, Depends, HTTPException, Query
import httpx

from auth import get_current_user
from services.book_search_service import BookSearchService, BookSearchError

router = APIRouter(prefix="/api/v1/search", tags=["Search"])


def get_search_transport() -> httpx.AsyncBaseTransport | None:
    """Overridable hook for the outgoing HTTP transport; None means the network."""
    return None


@router.get("")
async def search_books(
    q: str = "",
    max_results: int = Query(default=20, ge=1, le=40),
    user_id: int = Depends(get_current_user),
    transport: httpx.AsyncBaseTransport | None = Depends(get_search_transport),
):
    if not q.strip():
        raise HTTPException(status_code=400, detail="Search query is required")
    try:
        return await BookSearchService.search(q.strip(), max_results, transport=transport)
    except BookSearchError as e:
        raise HTTPException(status_code=502, detail=f"Book search failed: {e}")
