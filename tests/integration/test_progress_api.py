"""Progress and session endpoint tests."""

from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import AsyncClient

from app.core.security import create_access_token
from app.models.book import Book
from app.models.user import User


def progress_url(user: User, book: Book) -> str:
    return f"/v1/users/{user.id}/books/{book.id}/progress"


class TestAuthentication:
    async def test_missing_token(self, client: AsyncClient, test_user: User, test_book: Book):
        response = await client.get(progress_url(test_user, test_book))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    async def test_token_for_unknown_user(self, client: AsyncClient, test_user: User):
        token = create_access_token(subject=str(uuid4()))

        response = await client.get(
            f"/v1/users/{test_user.id}/progress",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 401

    async def test_non_uuid_subject(self, client: AsyncClient, test_user: User):
        token = create_access_token(subject="not-a-uuid")

        response = await client.get(
            f"/v1/users/{test_user.id}/progress",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 401


class TestProgressEndpoints:
    async def test_report_and_fetch(
        self, authenticated_client: AsyncClient, test_user: User, test_book: Book
    ):
        response = await authenticated_client.put(
            progress_url(test_user, test_book),
            json={"current_page": 50, "total_pages": 200},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["current_page"] == 50
        assert Decimal(data["progress"]) == Decimal("25.00")
        assert "X-Request-ID" in response.headers

        response = await authenticated_client.get(progress_url(test_user, test_book))
        assert response.status_code == 200
        assert response.json()["id"] == data["id"]

    async def test_over_range_page(
        self, authenticated_client: AsyncClient, test_user: User, test_book: Book
    ):
        response = await authenticated_client.put(
            progress_url(test_user, test_book),
            json={"current_page": 250, "total_pages": 200},
        )

        assert response.status_code == 200
        assert response.json()["current_page"] == 200
        assert Decimal(response.json()["progress"]) == Decimal("100.00")

    async def test_zero_total_is_validation_error(
        self, authenticated_client: AsyncClient, test_user: User, test_book: Book
    ):
        response = await authenticated_client.put(
            progress_url(test_user, test_book),
            json={"current_page": 3, "total_pages": 0},
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_negative_page_uses_error_envelope(
        self, authenticated_client: AsyncClient, test_user: User, test_book: Book
    ):
        response = await authenticated_client.put(
            progress_url(test_user, test_book),
            json={"current_page": -1, "total_pages": 200},
        )

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["request_id"] == response.headers["X-Request-ID"]
        assert error["details"]["errors"][0]["loc"] == ["body", "current_page"]

    async def test_timestamps_carry_utc_offset(
        self, authenticated_client: AsyncClient, test_user: User, test_book: Book
    ):
        response = await authenticated_client.put(
            progress_url(test_user, test_book),
            json={"current_page": 5, "total_pages": 200},
        )

        last_read_at = response.json()["last_read_at"]
        assert last_read_at.endswith("Z") or last_read_at.endswith("+00:00")

    async def test_unknown_book(self, authenticated_client: AsyncClient, test_user: User):
        response = await authenticated_client.put(
            f"/v1/users/{test_user.id}/books/{uuid4()}/progress",
            json={"current_page": 3, "total_pages": 10},
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "REFERENCE_NOT_FOUND"

    async def test_no_progress_yet(
        self, authenticated_client: AsyncClient, test_user: User, test_book: Book
    ):
        response = await authenticated_client.get(progress_url(test_user, test_book))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    async def test_list_recent_and_stats(
        self, authenticated_client: AsyncClient, test_user: User, test_book: Book
    ):
        await authenticated_client.put(
            progress_url(test_user, test_book),
            json={"current_page": 20, "total_pages": 200},
        )

        listed = await authenticated_client.get(f"/v1/users/{test_user.id}/progress")
        assert listed.status_code == 200
        assert len(listed.json()) == 1

        recent = await authenticated_client.get(f"/v1/users/{test_user.id}/progress/recent?limit=5")
        assert recent.status_code == 200
        assert recent.json()[0]["book_title"] == "The Test Book"

        stats = await authenticated_client.get(f"/v1/users/{test_user.id}/progress/stats")
        assert stats.status_code == 200
        assert stats.json()["total_books_started"] == 1


class TestCrossUserAccess:
    """Every attempt on another reader's rows is a 403, never an empty 200/404."""

    @pytest.mark.parametrize(
        "path",
        [
            "/v1/users/{other}/progress",
            "/v1/users/{other}/progress/recent",
            "/v1/users/{other}/progress/stats",
            "/v1/users/{other}/books/{book}/progress",
            "/v1/users/{other}/sessions",
            "/v1/users/{other}/sessions?book_id={book}",
        ],
    )
    async def test_reads_forbidden(
        self,
        authenticated_client: AsyncClient,
        other_user: User,
        test_book: Book,
        path: str,
    ):
        response = await authenticated_client.get(path.format(other=other_user.id, book=test_book.id))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    async def test_report_for_other_user_forbidden(
        self, authenticated_client: AsyncClient, other_user: User, test_book: Book
    ):
        response = await authenticated_client.put(
            progress_url(other_user, test_book),
            json={"current_page": 1, "total_pages": 10},
        )

        assert response.status_code == 403

    async def test_open_session_for_other_user_forbidden(
        self, authenticated_client: AsyncClient, other_user: User, test_book: Book
    ):
        response = await authenticated_client.post(
            f"/v1/users/{other_user.id}/books/{test_book.id}/sessions"
        )

        assert response.status_code == 403


class TestSessionEndpoints:
    async def test_open_close_list(
        self, authenticated_client: AsyncClient, test_user: User, test_book: Book
    ):
        # The 409 below rolls the shared session back, expiring the fixtures
        user_id, book_id = test_user.id, test_book.id

        opened = await authenticated_client.post(f"/v1/users/{user_id}/books/{book_id}/sessions")
        assert opened.status_code == 201
        session_id = opened.json()["id"]
        assert opened.json()["end_time"] is None

        closed = await authenticated_client.post(
            f"/v1/sessions/{session_id}/close",
            json={"pages_read": 10},
        )
        assert closed.status_code == 200
        body = closed.json()
        assert body["end_time"] is not None
        assert body["duration"] >= 0
        assert body["pages_read"] == 10

        again = await authenticated_client.post(
            f"/v1/sessions/{session_id}/close",
            json={"pages_read": 11},
        )
        assert again.status_code == 409
        assert again.json()["error"]["code"] == "CONFLICT"

        listed = await authenticated_client.get(
            f"/v1/users/{user_id}/sessions",
            params={"book_id": str(book_id)},
        )
        assert listed.status_code == 200
        assert [s["id"] for s in listed.json()] == [session_id]

    async def test_open_with_explicit_start(
        self, authenticated_client: AsyncClient, test_user: User, test_book: Book
    ):
        response = await authenticated_client.post(
            f"/v1/users/{test_user.id}/books/{test_book.id}/sessions",
            json={"start_time": "2026-05-01T08:30:00Z"},
        )

        assert response.status_code == 201
        assert response.json()["start_time"].startswith("2026-05-01T08:30:00")

    async def test_close_with_negative_pages(
        self, authenticated_client: AsyncClient, test_user: User, test_book: Book
    ):
        opened = await authenticated_client.post(
            f"/v1/users/{test_user.id}/books/{test_book.id}/sessions"
        )

        response = await authenticated_client.post(
            f"/v1/sessions/{opened.json()['id']}/close",
            json={"pages_read": -5},
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_close_unknown_session(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(
            f"/v1/sessions/{uuid4()}/close",
            json={"pages_read": 1},
        )

        assert response.status_code == 404
