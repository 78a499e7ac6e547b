"""Tests for reading analytics."""
from datetime import date, datetime, timedelta

import pytest

from models import Book, ReadingSession
from services.analytics_service import AnalyticsService, compute_streaks, timeframe_start

NOW = datetime(2026, 5, 20, 15, 0, 0)


@pytest.fixture
def library(db_session, user):
    """Three finished books, one in progress and one unread, with sessions."""
    books = [
        Book(user_id=user.id, title="Old", author="A", status="COMPLETED", pages=100, current_page=100,
             date_started=datetime(2025, 11, 1), date_finished=datetime(2025, 12, 15)),
        Book(user_id=user.id, title="March", author="B", status="COMPLETED", pages=200, current_page=200,
             date_started=datetime(2026, 3, 1), date_finished=datetime(2026, 3, 10)),
        Book(user_id=user.id, title="May", author="C", status="COMPLETED", pages=300, current_page=300,
             date_started=datetime(2026, 5, 1), date_finished=datetime(2026, 5, 18)),
        Book(user_id=user.id, title="Reading", author="D", status="IN_PROGRESS", pages=400, current_page=60,
             date_started=datetime(2026, 5, 18)),
        Book(user_id=user.id, title="Someday", author="E"),
    ]
    books[0].genres = ["Fantasy", "Classics"]
    books[1].genres = ["Fantasy"]
    books[2].genres = ["Mystery", "Fantasy"]
    books[3].genres = ["Mystery"]
    db_session.add_all(books)
    db_session.commit()

    reading = books[3]
    for day, (start, end, minutes) in zip((18, 19, 20), ((0, 20, 30), (20, 40, 30), (40, 60, 60))):
        db_session.add(ReadingSession(user_id=user.id, book_id=reading.id, start_page=start, end_page=end,
                                      duration=minutes, date=datetime(2026, 5, day, 8, 0)))
    db_session.add(ReadingSession(user_id=user.id, book_id=books[1].id, start_page=0, end_page=200,
                                  duration=240, date=datetime(2026, 3, 5, 21, 0)))
    db_session.commit()
    return books


def test_timeframe_start():
    assert timeframe_start("month", NOW) == datetime(2026, 5, 1)
    assert timeframe_start("quarter", NOW) == datetime(2026, 4, 1)
    assert timeframe_start("year", NOW) == datetime(2026, 1, 1)
    assert timeframe_start("all", NOW) == datetime(2000, 1, 1)


def test_streaks():
    today = date(2026, 5, 20)
    days = [date(2026, 5, 20), date(2026, 5, 19), date(2026, 5, 19), date(2026, 5, 10),
            date(2026, 5, 11), date(2026, 5, 12), date(2026, 5, 13)]

    assert compute_streaks(days, today) == (2, 4)
    assert compute_streaks(days, date(2026, 5, 21)) == (0, 4)
    assert compute_streaks([], today) == (0, 0)


def test_stats_for_year(db_session, user, library):
    stats = AnalyticsService.get_stats(db_session, user.id, "year", now=NOW)

    assert stats["total_books"] == 5
    assert stats["books_completed"] == 2
    assert stats["books_in_progress"] == 1
    assert stats["books_to_read"] == 1
    assert stats["pages_read"] == 260
    assert stats["reading_time"] == 6
    assert stats["reading_streak"] == 3
    assert stats["longest_streak"] == 3
    assert stats["avg_session_time"] == 90
    assert stats["completion_rate"] == 60
    assert stats["yearly_goal"] == 12
    assert stats["books_completed_this_year"] == 2
    assert stats["yearly_progress"] == pytest.approx(16.7)
    assert stats["monthly_progress"] == 40.0


def test_stats_for_month(db_session, user, library):
    stats = AnalyticsService.get_stats(db_session, user.id, "month", now=NOW)

    assert stats["books_completed"] == 1
    assert stats["pages_read"] == 60
    # 60 pages over the 20 days since May 1st
    assert stats["avg_pages_per_day"] == 3


def test_stats_use_reading_goal(db_session, user, library):
    user.reading_goal = 4
    db_session.commit()

    stats = AnalyticsService.get_stats(db_session, user.id, "year", now=NOW)

    assert stats["yearly_progress"] == 50.0
    assert stats["monthly_progress"] == 100


def test_stats_empty_library(db_session, user):
    stats = AnalyticsService.get_stats(db_session, user.id, "all", now=NOW)

    assert stats["total_books"] == 0
    assert stats["completion_rate"] == 0
    assert stats["avg_session_time"] == 0
    assert stats["reading_streak"] == 0


def test_reading_progress_by_month(db_session, user, library):
    progress = AnalyticsService.get_reading_progress(db_session, user.id, "year", now=NOW)

    assert len(progress) == 12
    assert progress[0]["period"] == "Jun"
    assert progress[-1]["period"] == "May"
    counts = {p["period"]: p["books"] for p in progress}
    assert counts["Dec"] == 1
    assert counts["Mar"] == 1
    assert counts["May"] == 1
    assert sum(counts.values()) == 3


def test_reading_progress_by_day(db_session, user, library):
    progress = AnalyticsService.get_reading_progress(db_session, user.id, "month", now=NOW)

    assert len(progress) == 30
    assert progress[-1]["period"] == "May 20"
    assert [p["period"] for p in progress if p["books"]] == ["May 18"]


def test_reading_progress_by_week(db_session, user, library):
    progress = AnalyticsService.get_reading_progress(db_session, user.id, "quarter", now=NOW)

    assert len(progress) == 12
    assert sum(p["books"] for p in progress) == 2
    assert progress[-1]["books"] == 1
    assert datetime.fromisoformat(progress[-1]["date"]) == datetime(2026, 5, 21) - timedelta(weeks=1)


def test_genres(db_session, user, library):
    assert AnalyticsService.get_genres(db_session, user.id) == [
        {"name": "Fantasy", "count": 3},
        {"name": "Mystery", "count": 2},
        {"name": "Classics", "count": 1},
    ]


def test_analytics_routes(client, auth_headers, create_book):
    create_book(status="COMPLETED", genre=["Horror"])

    stats = client.get("/api/v1/analytics/stats", params={"timeframe": "all"}, headers=auth_headers)
    assert stats.status_code == 200
    assert stats.json()["books_completed"] == 1

    assert client.get("/api/v1/analytics/genres", headers=auth_headers).json() == [{"name": "Horror", "count": 1}]
    assert len(client.get("/api/v1/analytics/reading-progress", headers=auth_headers).json()) == 12
    assert client.get("/api/v1/analytics/stats", params={"timeframe": "decade"}, headers=auth_headers).status_code == 400
