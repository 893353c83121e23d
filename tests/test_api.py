"""HTTP tests for the chat, message and completion routes."""

import pytest


def create_chat(client, title="New chat") -> dict:
    response = client.post("/api/chats", json={"title": title})
    assert response.status_code == 200
    return response.json()


class TestHealth:
    def test_root_and_health(self, client):
        assert client.get("/").json()["status"] == "ok"
        assert client.get("/health").json() == {"status": "ok"}

    def test_ready_reports_database(self, client):
        body = client.get("/ready").json()
        assert body["status"] == "ok"
        assert body["dependencies"]["database"] == "ok"

    def test_ready_degraded_without_primary(self, degraded_client):
        body = degraded_client.get("/ready").json()
        assert body["status"] == "degraded"
        assert body["dependencies"]["database"] == "unavailable"


class TestChatRoutes:
    """Tests for /api/chats."""

    def test_create_and_list(self, client):
        chat = create_chat(client, "Lending markets")
        assert chat["title"] == "Lending markets"
        assert chat["messages"] == []

        listed = client.get("/api/chats").json()
        assert [c["id"] for c in listed] == [chat["id"]]

    @pytest.mark.parametrize("body", [{}, {"title": ""}, {"title": None}])
    def test_create_requires_title(self, client, body):
        response = client.post("/api/chats", json=body)
        assert response.status_code == 400
        assert response.json() == {
            "error": "Bad Request",
            "detail": "Title is required",
            "status_code": 400,
        }

    def test_malformed_body(self, client):
        response = client.post(
            "/api/chats",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid request body"

    def test_get_rename_delete(self, client):
        chat = create_chat(client)

        renamed = client.patch(f"/api/chats/{chat['id']}", json={"title": "Renamed"})
        assert renamed.status_code == 200
        assert renamed.json()["title"] == "Renamed"
        assert client.get(f"/api/chats/{chat['id']}").json()["title"] == "Renamed"

        deleted = client.delete(f"/api/chats/{chat['id']}")
        assert deleted.status_code == 200
        assert deleted.json() == {"success": True}

        missing = client.get(f"/api/chats/{chat['id']}")
        assert missing.status_code == 404
        assert missing.json()["error"] == "Not Found"
        assert client.get(f"/api/chats/{chat['id']}/messages").json() == []

    def test_unknown_chat_is_404(self, client):
        assert client.get("/api/chats/missing").status_code == 404
        assert client.patch("/api/chats/missing", json={"title": "t"}).status_code == 404
        assert client.delete("/api/chats/missing").status_code == 404


class TestMessageRoutes:
    """Tests for /api/chats/{chat_id}/messages."""

    def test_post_message_returns_camel_case(self, client, gemini):
        chat = create_chat(client)
        response = client.post(
            f"/api/chats/{chat['id']}/messages", json={"question": "What is a DEX?"}
        )
        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"id", "question", "answer", "chatId"}
        assert body["chatId"] == chat["id"]
        assert body["answer"] == gemini.answer

        fetched = client.get(f"/api/chats/{chat['id']}").json()
        assert fetched["title"] == "What is a DEX?"
        assert [m["id"] for m in fetched["messages"]] == [body["id"]]

    def test_model_selects_provider(self, client, deepseek):
        chat = create_chat(client)
        response = client.post(
            f"/api/chats/{chat['id']}/messages",
            json={"question": "Hi", "model": "deepseek"},
        )
        assert response.json()["answer"] == deepseek.answer

    def test_list_messages_in_order(self, client):
        chat = create_chat(client)
        for question in ["one", "two", "three"]:
            client.post(f"/api/chats/{chat['id']}/messages", json={"question": question})
        messages = client.get(f"/api/chats/{chat['id']}/messages").json()
        assert [m["question"] for m in messages] == ["one", "two", "three"]

    def test_empty_question_is_400(self, client):
        chat = create_chat(client)
        response = client.post(f"/api/chats/{chat['id']}/messages", json={"question": ""})
        assert response.status_code == 400
        assert response.json()["detail"] == "Question is required"

    def test_unknown_chat_is_404(self, client):
        response = client.post("/api/chats/missing/messages", json={"question": "Hi"})
        assert response.status_code == 404

    def test_provider_failure_is_500(self, failing_client):
        chat = create_chat(failing_client)
        response = failing_client.post(
            f"/api/chats/{chat['id']}/messages", json={"question": "Hi"}
        )
        assert response.status_code == 500
        assert response.json()["error"] == "Internal Server Error"
        assert failing_client.get(f"/api/chats/{chat['id']}/messages").json() == []


class TestPrimaryStoreDown:
    """The API keeps working from the fallback store."""

    def test_full_conversation(self, degraded_client):
        chat = create_chat(degraded_client, "Outage")
        posted = degraded_client.post(
            f"/api/chats/{chat['id']}/messages", json={"question": "Still there?"}
        )
        assert posted.status_code == 200

        listed = degraded_client.get("/api/chats").json()
        assert chat["id"] in [c["id"] for c in listed]
        messages = degraded_client.get(f"/api/chats/{chat['id']}/messages").json()
        assert [m["question"] for m in messages] == ["Still there?"]

        assert degraded_client.delete(f"/api/chats/{chat['id']}").status_code == 200
        assert degraded_client.get(f"/api/chats/{chat['id']}").status_code == 404


class TestCompletionRoutes:
    """Tests for /api/chat and /api/providers."""

    def test_complete(self, client, gemini):
        response = client.post(
            "/api/chat",
            json={"messages": [{"role": "user", "content": "What is slippage?"}]},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == {"role": "assistant", "content": gemini.answer}
        assert body["finish_reason"] == "stop"
        assert body["model"] == "gemini-test-model"

    def test_complete_records_in_chat(self, client):
        chat = create_chat(client)
        client.post(
            "/api/chat",
            json={
                "messages": [{"role": "user", "content": "What is slippage?"}],
                "chatId": chat["id"],
            },
        )
        messages = client.get(f"/api/chats/{chat['id']}/messages").json()
        assert [m["question"] for m in messages] == ["What is slippage?"]

    def test_complete_requires_messages(self, client):
        response = client.post("/api/chat", json={})
        assert response.status_code == 400
        assert response.json()["detail"] == "Messages are required and must be an array"

    def test_complete_requires_user_turn(self, client):
        response = client.post(
            "/api/chat", json={"messages": [{"role": "assistant", "content": "hi"}]}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "No user message found"

    def test_list_providers(self, client):
        assert client.get("/api/providers").json() == {
            "default": "gemini",
            "available": ["deepseek", "gemini"],
        }
