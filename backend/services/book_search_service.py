"""
book_search_service.py — Google Books lookup
Searches the public Google Books API and normalizes volumes into the shape the
book-creation endpoint accepts.
"""

import logging
import re

import httpx

from config import GOOGLE_BOOKS_API_KEY, GOOGLE_BOOKS_URL

logger = logging.getLogger(__name__)

LANGUAGES = {"en": "English", "es": "Spanish", "fr": "French", "de": "German", "it": "Italian",
             "pt": "Portuguese", "hi": "Hindi", "ja": "Japanese", "zh": "Chinese", "ru": "Russian"}


class BookSearchError(Exception):
    pass


def _isbn(identifiers: list[dict]) -> str | None:
    by_type = {i.get("type"): i.get("identifier") for i in identifiers or []}
    return by_type.get("ISBN_13") or by_type.get("ISBN_10")


def _year(published_date: str | None) -> int | None:
    match = re.match(r"(\d{4})", published_date or "")
    return int(match.group(1)) if match else None


def parse_volume(item: dict) -> dict | None:
    """Map one Google Books volume onto book fields; None if it has no title."""
    if not isinstance(item, dict):
        return None
    info = item.get("volumeInfo") or {}
    if not info.get("title"):
        return None

    images = info.get("imageLinks") or {}
    cover = images.get("thumbnail") or images.get("smallThumbnail")
    if cover and cover.startswith("http://"):
        cover = "https://" + cover[len("http://"):]

    language = info.get("language")
    return {
        "title": info["title"],
        "author": ", ".join(info.get("authors") or []) or "Unknown Author",
        "genre": info.get("categories") or [],
        "pages": info.get("pageCount") or None,
        "isbn": _isbn(info.get("industryIdentifiers")),
        "publisher": info.get("publisher"),
        "published_year": _year(info.get("publishedDate")),
        "language": LANGUAGES.get(language, language or "English"),
        "description": info.get("description"),
        "cover_image": cover,
    }


class BookSearchService:

    @staticmethod
    async def search(query: str, max_results: int = 20, transport: httpx.AsyncBaseTransport | None = None) -> list[dict]:
        params = {"q": query, "maxResults": min(max_results, 40)}
        if GOOGLE_BOOKS_API_KEY:
            params["key"] = GOOGLE_BOOKS_API_KEY

        try:
            async with httpx.AsyncClient(timeout=10.0, transport=transport) as client:
                response = await client.get(GOOGLE_BOOKS_URL, params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Google Books request failed for {query!r}: {e}")
            raise BookSearchError(str(e)) from e
        except ValueError as e:
            logger.error(f"Google Books returned a non-JSON body for {query!r}: {e}")
            raise BookSearchError("Unreadable response from Google Books") from e

        if not isinstance(data, dict) or not isinstance(data.get("items", []), list):
            logger.error(f"Unexpected Google Books payload for {query!r}")
            raise BookSearchError("Unexpected response from Google Books")

        results = []
        for item in data.get("items", []):
            parsed = parse_volume(item)
            if parsed:
                results.append(parsed)
        return results
