"""Tests for the /books endpoints."""
from models import Book, ReadingSession


def test_create_book_defaults(create_book):
    book = create_book()

    assert book["status"] == "TO_READ"
    assert book["current_page"] == 0
    assert book["format"] == "PHYSICAL"
    assert book["priority"] == "MEDIUM"
    assert book["language"] == "English"
    assert book["genre"] == ["Science Fiction"]
    assert book["date_added"] is not None
    assert book["date_started"] is None
    assert book["date_finished"] is None


def test_create_completed_book_is_fully_read(create_book):
    book = create_book(status="COMPLETED", pages=412)

    assert book["current_page"] == 412
    assert book["date_started"] is not None
    assert book["date_finished"] is not None


def test_create_in_progress_book_is_started(create_book):
    book = create_book(status="IN_PROGRESS")

    assert book["date_started"] is not None
    assert book["date_finished"] is None


def test_create_book_rejects_invalid_enums(client, auth_headers):
    response = client.post("/api/v1/books", json={"title": "X", "author": "Y", "status": "READING"}, headers=auth_headers)
    assert response.status_code == 400
    assert "Must be one of: TO_READ, IN_PROGRESS, COMPLETED, ON_HOLD, DNF" in response.json()["detail"]

    response = client.post("/api/v1/books", json={"title": "X", "author": "Y", "format": "SCROLL"}, headers=auth_headers)
    assert response.status_code == 400
    assert "Invalid format" in response.json()["detail"]

    response = client.post("/api/v1/books", json={"title": "X", "author": "Y", "priority": "NOW"}, headers=auth_headers)
    assert response.status_code == 400


def test_create_book_requires_title_and_author(client, auth_headers):
    response = client.post("/api/v1/books", json={"title": "  ", "author": "Y"}, headers=auth_headers)
    assert response.status_code == 422

    response = client.post("/api/v1/books", json={"author": "Y"}, headers=auth_headers)
    assert response.status_code == 422


def test_requires_authentication(client):
    response = client.get("/api/v1/books")
    assert response.status_code == 401

    response = client.get("/api/v1/books", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_list_books_filters(client, auth_headers, create_book):
    create_book(title="Dune", author="Frank Herbert", genre=["Science Fiction"])
    create_book(title="Emma", author="Jane Austen", genre=["Classics", "Romance"], status="COMPLETED")
    create_book(title="Persuasion", author="Jane Austen", genre=["Classics"])

    all_books = client.get("/api/v1/books", headers=auth_headers).json()
    assert [b["title"] for b in all_books] == ["Persuasion", "Emma", "Dune"]

    austen = client.get("/api/v1/books", params={"search": "austen"}, headers=auth_headers).json()
    assert {b["title"] for b in austen} == {"Emma", "Persuasion"}

    completed = client.get("/api/v1/books", params={"status": "COMPLETED"}, headers=auth_headers).json()
    assert [b["title"] for b in completed] == ["Emma"]

    romance = client.get("/api/v1/books", params={"genre": "Romance"}, headers=auth_headers).json()
    assert [b["title"] for b in romance] == ["Emma"]

    response = client.get("/api/v1/books", params={"status": "ARCHIVED"}, headers=auth_headers)
    assert response.status_code == 400


def test_books_are_scoped_to_owner(client, create_book, other_headers):
    book = create_book()

    assert client.get(f"/api/v1/books/{book['id']}", headers=other_headers).status_code == 404
    assert client.put(f"/api/v1/books/{book['id']}", json={"title": "Mine"}, headers=other_headers).status_code == 404
    assert client.delete(f"/api/v1/books/{book['id']}", headers=other_headers).status_code == 404
    assert client.get("/api/v1/books", headers=other_headers).json() == []


def test_complete_book_via_update(client, auth_headers, create_book):
    book = create_book(pages=300)

    response = client.put(f"/api/v1/books/{book['id']}", json={"status": "COMPLETED"}, headers=auth_headers)

    assert response.status_code == 200
    updated = response.json()
    assert updated["status"] == "COMPLETED"
    assert updated["current_page"] == 300
    assert updated["date_started"] is not None
    assert updated["date_finished"] is not None


def test_complete_with_new_page_count_keeps_start_date(client, auth_headers, create_book):
    book = create_book(status="IN_PROGRESS", pages=200)
    started = book["date_started"]

    response = client.put(
        f"/api/v1/books/{book['id']}",
        json={"status": "COMPLETED", "pages": 250, "rating": 5, "review": "Loved it"},
        headers=auth_headers,
    )

    updated = response.json()
    assert updated["current_page"] == 250
    assert updated["pages"] == 250
    assert updated["date_started"] == started
    assert updated["rating"] == 5
    assert updated["review"] == "Loved it"


def test_revert_to_to_read_restarts(client, auth_headers, create_book):
    book = create_book(status="COMPLETED")

    response = client.put(f"/api/v1/books/{book['id']}", json={"status": "TO_READ"}, headers=auth_headers)

    updated = response.json()
    assert updated["current_page"] == 0
    assert updated["date_started"] is None
    assert updated["date_finished"] is None


def test_invalid_status_update_changes_nothing(client, auth_headers, create_book, db_session):
    book = create_book(pages=300)

    response = client.put(
        f"/api/v1/books/{book['id']}",
        json={"status": "ARCHIVED", "title": "Renamed"},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert "Invalid status" in response.json()["detail"]
    stored = db_session.get(Book, book["id"])
    assert stored.title == "Dune"
    assert stored.status == "TO_READ"


def test_update_rejects_unknown_and_immutable_fields(client, auth_headers, create_book):
    book = create_book()

    response = client.put(f"/api/v1/books/{book['id']}", json={"date_added": "2020-01-01T00:00:00"}, headers=auth_headers)
    assert response.status_code == 422

    response = client.put(f"/api/v1/books/{book['id']}", json={"shelf": "top"}, headers=auth_headers)
    assert response.status_code == 422

    response = client.put(f"/api/v1/books/{book['id']}", json={"rating": 6}, headers=auth_headers)
    assert response.status_code == 422

    response = client.put(f"/api/v1/books/{book['id']}", json={"title": None}, headers=auth_headers)
    assert response.status_code == 422


def test_update_clamps_current_page(client, auth_headers, create_book):
    book = create_book(status="IN_PROGRESS", pages=300)

    response = client.put(f"/api/v1/books/{book['id']}", json={"current_page": 450}, headers=auth_headers)

    assert response.json()["current_page"] == 300


def test_update_plain_fields(client, auth_headers, create_book):
    book = create_book()

    response = client.put(
        f"/api/v1/books/{book['id']}",
        json={"notes": "Spice!", "genre": ["Classics", "Classics", "Adventure"], "priority": "HIGH"},
        headers=auth_headers,
    )

    updated = response.json()
    assert updated["notes"] == "Spice!"
    assert updated["genre"] == ["Classics", "Adventure"]
    assert updated["priority"] == "HIGH"
    assert updated["date_added"] == book["date_added"]


def test_delete_book_cascades_sessions(client, auth_headers, create_book, db_session):
    book = create_book()
    client.post(
        "/api/v1/reading-sessions",
        json={"book_id": book["id"], "start_page": 0, "end_page": 20, "duration": 30},
        headers=auth_headers,
    )

    response = client.delete(f"/api/v1/books/{book['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert client.get(f"/api/v1/books/{book['id']}", headers=auth_headers).status_code == 404
    assert db_session.query(ReadingSession).count() == 0


def test_stats_overview(client, auth_headers, create_book):
    create_book()
    create_book(status="IN_PROGRESS")
    create_book(status="COMPLETED")
    create_book(status="DNF")

    stats = client.get("/api/v1/books/stats/overview", headers=auth_headers).json()

    assert stats == {"total_books": 4, "completed_books": 1, "in_progress_books": 1, "to_read_books": 1}


def test_update_normalizes_text_fields(client, auth_headers, create_book):
    book = create_book(language="French")

    response = client.put(
        f"/api/v1/books/{book['id']}",
        json={"title": "  Dune Messiah  ", "author": " Frank Herbert ", "language": None},
        headers=auth_headers,
    )

    updated = response.json()
    assert updated["title"] == "Dune Messiah"
    assert updated["author"] == "Frank Herbert"
    assert updated["language"] == "French"
