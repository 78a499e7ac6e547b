"""
book_lifecycle.py — Reading status rules for a Book
Computes the derived fields (current_page, date_started, date_finished) that must
change together with a book's status. Pure functions: they read the current book
state and return a dict of field updates, the caller persists it.
"""

from datetime import datetime
from enum import Enum

from database import utcnow


class BookStatus(str, Enum):
    TO_READ = "TO_READ"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ON_HOLD = "ON_HOLD"
    DNF = "DNF"


class BookFormat(str, Enum):
    PHYSICAL = "PHYSICAL"
    EBOOK = "EBOOK"
    AUDIOBOOK = "AUDIOBOOK"
    PDF = "PDF"


class BookPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class InvalidEnumValue(ValueError):
    """Raised when a status/format/priority is not one of the allowed values."""

    def __init__(self, field: str, value, valid: list[str]):
        self.field = field
        self.value = value
        self.valid = valid
        super().__init__(f"Invalid {field}. Must be one of: {', '.join(valid)}")


def parse_enum(enum_cls: type[Enum], value, field: str) -> Enum:
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidEnumValue(field, value, [m.value for m in enum_cls]) from None


def _clamp_to_pages(current_page: int | None, pages: int | None) -> int | None:
    if current_page is not None and pages and current_page > pages:
        return pages
    return current_page


def initial_lifecycle_fields(status: str, pages: int | None, now: datetime | None = None) -> dict:
    """Fields for a book created directly in the given status."""
    status = parse_enum(BookStatus, status, "status")
    now = now or utcnow()
    fields = {"status": status.value, "current_page": 0}

    if status == BookStatus.IN_PROGRESS:
        fields["date_started"] = now
    elif status == BookStatus.COMPLETED:
        fields["date_started"] = now
        fields["date_finished"] = now
        fields["current_page"] = pages or 0
    return fields


def apply_status_change(book, requested_status: str | None, supplied: dict, now: datetime | None = None) -> dict:
    """
    Return the field updates implied by moving `book` to `requested_status`.

    `supplied` holds the other fields updated in the same request (pages,
    current_page, ...). The result is meant to be applied on top of them, so a
    derived value always wins over a supplied one. Raises InvalidEnumValue
    before anything is computed when the status is unknown.
    """
    updates: dict = {}
    if requested_status is not None:
        status = parse_enum(BookStatus, requested_status, "status")
        updates["status"] = status.value
    else:
        status = None

    now = now or utcnow()

    if status is not None and status.value != book.status:
        if status == BookStatus.IN_PROGRESS:
            if book.status == BookStatus.TO_READ.value or book.date_started is None:
                updates["date_started"] = now
        elif status == BookStatus.COMPLETED:
            updates["date_finished"] = now
            if book.date_started is None:
                updates["date_started"] = now
            if supplied.get("pages"):
                updates["current_page"] = supplied["pages"]
            elif book.pages:
                updates["current_page"] = book.pages
        elif status == BookStatus.TO_READ:
            # Moving back to "to read" restarts the book from scratch
            updates["current_page"] = 0
            updates["date_started"] = None
            updates["date_finished"] = None

    pages = supplied["pages"] if "pages" in supplied else book.pages
    current_page = updates.get("current_page", supplied.get("current_page", book.current_page))
    clamped = _clamp_to_pages(current_page, pages)
    if clamped != current_page:
        updates["current_page"] = clamped

    return updates


def apply_session_recorded(book, end_page: int, now: datetime | None = None) -> dict:
    """Progress updates for a newly logged session ending at `end_page`."""
    current_page = max(book.current_page or 0, end_page)
    updates = {"current_page": _clamp_to_pages(current_page, book.pages)}

    # The first logged session implicitly starts the book
    if book.status == BookStatus.TO_READ.value:
        updates["status"] = BookStatus.IN_PROGRESS.value
        updates["date_started"] = now or utcnow()
    return updates
