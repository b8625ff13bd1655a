"""Store failures surface as 500 JSON errors on every route."""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

THOUGHT_ID = str(uuid4())


def _store_down() -> OperationalError:
    return OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("target", "method", "url", "body", "needs_auth"),
    [
        ("happy_thoughts.services.thoughts.list_recent_thoughts", "GET", "/thoughts", None, False),
        ("happy_thoughts.services.thoughts.get_thought", "GET", f"/thoughts/{THOUGHT_ID}", None, False),
        ("happy_thoughts.services.thoughts.create_thought", "POST", "/thoughts", {"message": "hello world"}, True),
        (
            "happy_thoughts.services.thoughts.update_thought_message",
            "PATCH",
            f"/thoughts/{THOUGHT_ID}",
            {"message": "changed message"},
            True,
        ),
        ("happy_thoughts.services.thoughts.delete_thought", "DELETE", f"/thoughts/{THOUGHT_ID}", None, True),
        ("happy_thoughts.services.thoughts.like_thought", "POST", f"/thoughts/{THOUGHT_ID}/like", None, False),
        (
            "happy_thoughts.services.users.create_user",
            "POST",
            "/signup",
            {"email": "down@example.com", "password": "secret1"},
            False,
        ),
        (
            "happy_thoughts.services.users.authenticate_user",
            "POST",
            "/login",
            {"email": "down@example.com", "password": "secret1"},
            False,
        ),
    ],
)
async def test_store_error_is_500(client, alice, target, method, url, body, needs_auth):
    _, auth_headers = alice
    headers = {"X-Request-ID": "store-down", **(auth_headers if needs_auth else {})}

    with patch(target, new_callable=AsyncMock, side_effect=_store_down()):
        response = await client.request(method, url, json=body, headers=headers)

    assert response.status_code == 500
    data = response.json()
    assert data["error"]
    assert data["request_id"] == "store-down"
    assert "connection refused" not in response.text
