"""
analytics_service.py — Reading statistics
Aggregates books and reading sessions into dashboard numbers: totals for a
timeframe, reading streaks, yearly goal progress, completions over time and
genre distribution.
"""

import math
from collections import Counter
from datetime import datetime, date, timedelta

from sqlalchemy.orm import Session

from config import DEFAULT_READING_GOAL
from database import utcnow
from models import Book, ReadingSession, User
from services.book_lifecycle import BookStatus

TIMEFRAMES = ("month", "quarter", "year", "all")


def timeframe_start(timeframe: str, now: datetime) -> datetime:
    if timeframe == "month":
        return datetime(now.year, now.month, 1)
    if timeframe == "quarter":
        return datetime(now.year, (now.month - 1) // 3 * 3 + 1, 1)
    if timeframe == "year":
        return datetime(now.year, 1, 1)
    return datetime(2000, 1, 1)  # all time


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def compute_streaks(days, today: date) -> tuple[int, int]:
    """
    (current, longest) runs of consecutive reading days. The current streak
    only counts if there was a session today.
    """
    unique = sorted(set(days))
    longest = run = 0
    previous = None
    for d in unique:
        run = run + 1 if previous is not None and d - previous == timedelta(days=1) else 1
        longest = max(longest, run)
        previous = d

    current = 0
    day_set = set(unique)
    cursor = today
    while cursor in day_set:
        current += 1
        cursor -= timedelta(days=1)
    return current, longest


class AnalyticsService:

    @staticmethod
    def get_stats(db: Session, user_id: int, timeframe: str = "year", now: datetime | None = None) -> dict:
        now = now or utcnow()
        start = timeframe_start(timeframe, now)

        books = db.query(Book).filter(Book.user_id == user_id)
        total_books = books.count()
        completed_total = books.filter(Book.status == BookStatus.COMPLETED.value).count()
        in_progress = books.filter(Book.status == BookStatus.IN_PROGRESS.value).count()
        to_read = books.filter(Book.status == BookStatus.TO_READ.value).count()
        completed_in_timeframe = books.filter(
            Book.status == BookStatus.COMPLETED.value,
            Book.date_finished >= start,
        ).count()

        sessions = db.query(ReadingSession).filter(
            ReadingSession.user_id == user_id,
            ReadingSession.date >= start,
        ).all()
        pages_read = sum(s.pages_read for s in sessions)
        total_minutes = sum(s.duration for s in sessions)
        days_in_timeframe = math.ceil((now - start).total_seconds() / 86400)

        all_dates = [d for (d,) in db.query(ReadingSession.date).filter(ReadingSession.user_id == user_id)]
        current_streak, longest_streak = compute_streaks((d.date() for d in all_dates), now.date())

        user = db.query(User).filter_by(id=user_id).first()
        yearly_goal = (user.reading_goal if user else None) or DEFAULT_READING_GOAL
        completed_this_year = books.filter(
            Book.status == BookStatus.COMPLETED.value,
            Book.date_finished >= datetime(now.year, 1, 1),
            Book.date_finished < datetime(now.year + 1, 1, 1),
        ).count()
        yearly_progress = completed_this_year / yearly_goal * 100

        return {
            "timeframe": timeframe,
            "total_books": total_books,
            "books_completed": completed_in_timeframe,
            "books_in_progress": in_progress,
            "books_to_read": to_read,
            "pages_read": pages_read,
            "reading_time": round(total_minutes / 60),  # hours
            "reading_streak": current_streak,
            "longest_streak": longest_streak,
            "avg_pages_per_day": round(pages_read / days_in_timeframe) if days_in_timeframe > 0 else 0,
            "avg_session_time": round(total_minutes / len(sessions)) if sessions else 0,
            "completion_rate": round(completed_total / total_books * 100) if total_books else 0,
            "yearly_goal": yearly_goal,
            "books_completed_this_year": completed_this_year,
            "yearly_progress": round(min(yearly_progress, 100), 1),
            # pace: how far ahead of a linear monthly schedule the user is
            "monthly_progress": round(min(yearly_progress * 12 / now.month, 100), 1),
        }

    @staticmethod
    def get_reading_progress(db: Session, user_id: int, timeframe: str = "year", now: datetime | None = None) -> list:
        """Completed books bucketed by day (month), week (quarter) or month."""
        now = now or utcnow()
        today = datetime(now.year, now.month, now.day)

        buckets = []
        if timeframe == "month":
            for i in range(30):
                start = today - timedelta(days=i)
                buckets.append((start, start + timedelta(days=1), f"{start:%b} {start.day}"))
        elif timeframe == "quarter":
            end_of_today = today + timedelta(days=1)
            for i in range(12):
                end = end_of_today - timedelta(weeks=i)
                start = end - timedelta(weeks=1)
                buckets.append((start, end, f"Week of {start:%b} {start.day}"))
        else:
            for i in range(12):
                y, m = _shift_month(now.year, now.month, -i)
                ny, nm = _shift_month(y, m, 1)
                start = datetime(y, m, 1)
                buckets.append((start, datetime(ny, nm, 1), f"{start:%b}"))

        earliest = min(b[0] for b in buckets)
        finished = [
            d for (d,) in db.query(Book.date_finished).filter(
                Book.user_id == user_id,
                Book.status == BookStatus.COMPLETED.value,
                Book.date_finished >= earliest,
            )
        ]

        progress = []
        for start, end, label in reversed(buckets):
            progress.append({
                "period": label,
                "books": sum(1 for d in finished if start <= d < end),
                "date": start.isoformat(),
            })
        return progress

    @staticmethod
    def get_genres(db: Session, user_id: int) -> list:
        counts = Counter()
        for book in db.query(Book).filter(Book.user_id == user_id):
            counts.update(book.genres)
        ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [{"name": name, "count": count} for name, count in ordered]
