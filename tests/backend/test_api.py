"""
HTTP tests for the relay endpoints.

Apart from the lifespan tests the app runs without its lifespan; the relay
service dependency is replaced with one wired to the in-memory fakes.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_relay_service
from app.main import app, settings
from app.services.relay import ChatRelayService


@pytest.fixture
def client(store, directory, responder):
    """TestClient whose relay service uses the conftest fakes."""

    def override_relay_service() -> ChatRelayService:
        return ChatRelayService(
            store=store,
            directory=directory,
            responder=responder,
            history_limit=10,
            request_timeout=5.0,
        )

    app.dependency_overrides[get_relay_service] = override_relay_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def registered(client) -> str:
    """Register Ann and return the userId."""
    response = client.post("/register-user", json={"name": "Ann", "email": "a.b@x.com"})
    assert response.status_code == 200
    return response.json()["userId"]


# -----------------------------
# /register-user
# -----------------------------


class TestRegisterUserEndpoint:
    """Tests for POST /register-user."""

    def test_register(self, client) -> None:
        """A new user gets the derived camelCase userId back."""
        response = client.post("/register-user", json={"name": "Ann", "email": "a.b@x.com"})

        assert response.status_code == 200
        assert response.json() == {"userId": "a_b_x_com", "name": "Ann", "email": "a.b@x.com"}

    def test_register_twice(self, client, store) -> None:
        """Registering the same email twice is idempotent."""
        payload = {"name": "Ann", "email": "a.b@x.com"}
        first = client.post("/register-user", json=payload)
        second = client.post("/register-user", json=payload)

        assert first.status_code == second.status_code == 200
        assert first.json()["userId"] == second.json()["userId"]
        assert store.user_creates == 1

    @pytest.mark.parametrize(
        "payload",
        [{}, {"name": "Ann"}, {"email": "a@x.com"}, {"name": "", "email": "a@x.com"}],
    )
    def test_missing_fields(self, client, payload) -> None:
        """Absent or empty name/email is a 400."""
        response = client.post("/register-user", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Name and email are required"}

    def test_upstream_failure_is_generic_500(self, client, directory) -> None:
        """A Stream failure surfaces as a generic 500."""
        directory.fail_lookup = True

        response = client.post("/register-user", json={"name": "Ann", "email": "a@x.com"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}


# -----------------------------
# /chat
# -----------------------------


class TestChatEndpoint:
    """Tests for POST /chat."""

    def test_chat(self, client, registered, chat_model, directory) -> None:
        """A registered user gets the model reply, mirrored to the channel."""
        chat_model.replies = ["Hello Ann"]

        response = client.post("/chat", json={"message": "hi", "userId": registered})

        assert response.status_code == 200
        assert response.json() == {"reply": "Hello Ann"}
        assert directory.channels[f"chat-{registered}"][0]["text"] == "Hello Ann"

    def test_unregistered_user_is_404(self, client) -> None:
        """An unknown userId is a 404, not a 500."""
        response = client.post("/chat", json={"message": "hi", "userId": "unknown"})

        assert response.status_code == 404
        assert response.json() == {"error": "User not found, please, register first"}

    def test_user_only_in_directory_is_404(self, client, directory) -> None:
        """A Stream-only user without a database row is a 404."""
        directory.users["half"] = {"id": "half"}

        response = client.post("/chat", json={"message": "hi", "userId": "half"})

        assert response.status_code == 404
        assert response.json() == {"error": "User is not found, please register"}

    @pytest.mark.parametrize("payload", [{}, {"message": "hi"}, {"userId": "a_b_x_com"}])
    def test_missing_fields(self, client, payload) -> None:
        """Missing message or userId is a 400."""
        response = client.post("/chat", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Message and user are required"}

    def test_model_failure_hides_detail_by_default(self, client, registered, chat_model) -> None:
        """Model errors do not leak into the response body."""
        chat_model.error = RuntimeError("API key revoked")

        response = client.post("/chat", json={"message": "hi", "userId": registered})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}

    def test_model_failure_detail_when_exposed(
        self, client, registered, chat_model, monkeypatch
    ) -> None:
        """EXPOSE_ERROR_DETAILS appends the cause to the 500 body."""
        monkeypatch.setattr(settings, "expose_error_details", True)
        chat_model.error = RuntimeError("API key revoked")

        response = client.post("/chat", json={"message": "hi", "userId": registered})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error: API key revoked"}

    def test_timeout_is_504(self, client, store, directory, make_chat_model, registered) -> None:
        """A model slower than the request timeout is a 504."""
        from packages.llm import ChatResponder

        slow = ChatResponder(llm=make_chat_model(delay=1.0))
        app.dependency_overrides[get_relay_service] = lambda: ChatRelayService(
            store, directory, slow, request_timeout=0.05
        )

        response = client.post("/chat", json={"message": "hi", "userId": registered})

        assert response.status_code == 504
        assert response.json() == {"error": "Upstream request timed out"}

    def test_slow_mirror_still_returns_reply(
        self, client, store, directory, responder, registered
    ) -> None:
        """A stored reply is returned even when the mirror outlasts the timeout."""
        app.dependency_overrides[get_relay_service] = lambda: ChatRelayService(
            store, directory, responder, request_timeout=0.05
        )
        directory.mirror_delay = 0.2

        response = client.post("/chat", json={"message": "hi", "userId": registered})

        assert response.status_code == 200
        assert len(store.chats) == 1


# -----------------------------
# /chat-history
# -----------------------------


class TestChatHistoryEndpoint:
    """Tests for POST /chat-history."""

    def test_history_after_n_chats(self, client, registered) -> None:
        """N chats give N message/reply pairs in order."""
        for i in range(3):
            assert client.post("/chat", json={"message": f"q{i}", "userId": registered}).status_code == 200

        response = client.post("/chat-history", json={"userId": registered})

        assert response.status_code == 200
        messages = response.json()["messages"]
        assert len(messages) == 3
        assert [m["message"] for m in messages] == ["q0", "q1", "q2"]
        assert set(messages[0]) == {"message", "reply"}

    def test_history_for_user_without_chats(self, client) -> None:
        """A user with no chats gets an empty list."""
        response = client.post("/chat-history", json={"userId": "nobody"})

        assert response.status_code == 200
        assert response.json() == {"messages": []}

    def test_missing_user_id_is_400(self, client) -> None:
        """An empty body is a 400."""
        response = client.post("/chat-history", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "User id is required"}

    def test_store_failure_is_500(self, client, store) -> None:
        """A failing history query is a generic 500."""
        store.fail_list_chats = True

        response = client.post("/chat-history", json={"userId": "a_b_x_com"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}


# -----------------------------
# Plumbing
# -----------------------------


class TestPlumbing:
    """Tests for request parsing, CORS, and health."""

    def test_malformed_json_is_400(self, client) -> None:
        """A body that is not JSON is a 400 with an error string."""
        response = client.post(
            "/chat",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("Request body must be a JSON object")

    def test_non_string_field_is_400(self, client) -> None:
        """A wrongly typed field is a 400, not a 422."""
        response = client.post("/register-user", json={"name": ["Ann"], "email": "a@x.com"})

        assert response.status_code == 400
        assert "error" in response.json()

    def test_healthz(self, client) -> None:
        """Health check reports ok."""
        response = client.get("/healthz")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_cors_allows_only_configured_origin(self, client) -> None:
        """Only CORS_ORIGIN is echoed back, with credentials."""
        allowed = client.options(
            "/chat",
            headers={
                "Origin": settings.cors_origin,
                "Access-Control-Request-Method": "POST",
            },
        )
        denied = client.options(
            "/chat",
            headers={
                "Origin": "https://evil.example",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert allowed.headers["access-control-allow-origin"] == settings.cors_origin
        assert allowed.headers["access-control-allow-credentials"] == "true"
        assert "access-control-allow-origin" not in denied.headers


# -----------------------------
# Lifespan
# -----------------------------


class TestLifespan:
    """Tests for startup and shutdown wiring."""

    def test_container_created_and_closed(self) -> None:
        """Startup puts the container on app.state; shutdown closes it and the engine."""
        container = MagicMock()
        container.aclose = AsyncMock()

        with (
            patch("app.main.ServiceContainer.from_settings", return_value=container),
            patch("app.main.dispose_engine", new_callable=AsyncMock) as dispose,
        ):
            with TestClient(app) as client:
                assert app.state.services is container
                assert client.get("/healthz").status_code == 200
                container.aclose.assert_not_awaited()

        container.aclose.assert_awaited_once()
        dispose.assert_awaited_once()
