from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from app.core.deps import get_note_service
from app.main import app
from domains.core import GatewayError
from domains.infra.llm import LLMClient, LLMSettings
from domains.note_hub import NoteService, NoteStore

from conftest import FakeGateway


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def test_create_note_returns_201_and_is_listed(client: TestClient) -> None:
    response = client.post("/api/notes", json={"title": "T", "body": "B"})

    assert response.status_code == 201
    note = response.json()
    assert note["id"] == 1
    assert (note["title"], note["body"]) == ("T", "B")
    assert set(note) == {"id", "title", "body", "createdAt"}
    assert _parse_timestamp(note["createdAt"]).tzinfo is not None

    assert client.get("/api/notes").json() == [note]


def test_create_note_stores_trimmed_text(client: TestClient) -> None:
    note = client.post("/api/notes", json={"title": "  T ", "body": " B\n"}).json()

    assert (note["title"], note["body"]) == ("T", "B")


@pytest.mark.parametrize(
    "payload",
    [
        {"title": "", "body": "B"},
        {"title": "T", "body": ""},
        {"title": "   ", "body": "B"},
        {"body": "B"},
        {"title": "T"},
        {},
    ],
)
def test_create_note_requires_title_and_body(client: TestClient, store: NoteStore, payload) -> None:
    response = client.post("/api/notes", json=payload)

    assert response.status_code == 400
    assert response.json()["error"] == "Title and body are required"
    assert response.json()["success"] is False
    assert len(store) == 0


@pytest.mark.parametrize("payload", [["T", "B"], {"title": 1, "body": "B"}, "not an object"])
def test_create_note_rejects_malformed_body(client: TestClient, store: NoteStore, payload) -> None:
    response = client.post("/api/notes", json=payload)

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert len(store) == 0


def test_get_note(client: TestClient) -> None:
    created = client.post("/api/notes", json={"title": "T", "body": "B"}).json()

    assert client.get(f"/api/notes/{created['id']}").json() == created
    assert client.get("/api/notes/99").status_code == 404


def test_delete_removes_exactly_one_note(client: TestClient) -> None:
    first = client.post("/api/notes", json={"title": "a", "body": "1"}).json()
    second = client.post("/api/notes", json={"title": "b", "body": "2"}).json()

    response = client.delete(f"/api/notes/{first['id']}")

    assert response.status_code == 204
    assert response.content == b""
    assert client.get("/api/notes").json() == [second]


def test_delete_unknown_note_returns_404(client: TestClient, store: NoteStore) -> None:
    store.create("a", "1")

    response = client.delete("/api/notes/42")

    assert response.status_code == 404
    assert response.json()["error"] == "Note not found"
    assert len(store) == 1


@pytest.mark.parametrize("note_id", ["abc", "0", "-1", "1.5"])
def test_non_numeric_id_is_not_found(client: TestClient, store: NoteStore, note_id: str) -> None:
    store.create("a", "1")

    assert client.get(f"/api/notes/{note_id}").status_code == 404
    assert client.delete(f"/api/notes/{note_id}").status_code == 404
    assert len(store) == 1


def test_summarize_returns_summary_without_changing_note(client: TestClient, gateway: FakeGateway) -> None:
    created = client.post("/api/notes", json={"title": "Groceries", "body": "milk, eggs"}).json()
    gateway.reply = "Buy milk and eggs."

    response = client.post(f"/api/notes/{created['id']}/summarize")

    assert response.status_code == 200
    assert response.json() == {"summary": "Buy milk and eggs."}
    assert client.get("/api/notes").json() == [created]


def test_rewrite_replaces_body_and_keeps_the_rest(client: TestClient, gateway: FakeGateway) -> None:
    created = client.post("/api/notes", json={"title": "Groceries", "body": "milk eggs"}).json()
    gateway.reply = "Milk and eggs."

    response = client.post(f"/api/notes/{created['id']}/rewrite")

    assert response.status_code == 200
    assert response.json() == {"rewritten": "Milk and eggs."}
    assert client.get("/api/notes").json() == [{**created, "body": "Milk and eggs."}]


@pytest.mark.parametrize("action", ["summarize", "rewrite"])
def test_ai_action_on_unknown_note_skips_gateway(client: TestClient, gateway: FakeGateway, action: str) -> None:
    response = client.post(f"/api/notes/5/{action}")

    assert response.status_code == 404
    assert gateway.calls == []


@pytest.mark.parametrize(
    "action, message",
    [("summarize", "Failed to summarize note"), ("rewrite", "Failed to rewrite note")],
)
def test_gateway_failure_returns_500(
    client: TestClient, gateway: FakeGateway, store: NoteStore, action: str, message: str
) -> None:
    note = store.create("T", "original")
    gateway.error = GatewayError("LLM request failed: APIConnectionError")

    response = client.post(f"/api/notes/{note.id}/{action}")

    assert response.status_code == 500
    assert response.json()["error"] == message
    assert response.json()["code"] == "GATEWAY_ERROR"
    assert store.get(note.id).body == "original"


def test_create_list_delete_flow(client: TestClient) -> None:
    created = client.post("/api/notes", json={"title": "Groceries", "body": "milk, eggs, bread"})
    assert created.status_code == 201
    assert created.json()["id"] == 1

    listed = client.get("/api/notes").json()
    assert [(n["id"], n["title"], n["body"]) for n in listed] == [(1, "Groceries", "milk, eggs, bread")]

    assert client.delete("/api/notes/1").status_code == 204
    assert client.get("/api/notes").json() == []


def test_api_responses_carry_request_id(client: TestClient) -> None:
    response = client.get("/api/notes")

    assert response.headers["X-Request-ID"]


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_static_client_is_served(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert "note-form" in response.text
    assert client.get("/script.js").status_code == 200


def test_api_writes_go_to_the_injected_store(client: TestClient, store: NoteStore) -> None:
    created = client.post("/api/notes", json={"title": "T", "body": "B"}).json()

    assert [n.id for n in store.get_all()] == [created["id"]]

    client.delete(f"/api/notes/{created['id']}")
    assert len(store) == 0


def test_unparseable_llm_reply_returns_gateway_error(store: NoteStore) -> None:
    class FailingChatModel:
        async def ainvoke(self, messages):
            raise ValueError("response contained an error field")

    llm_client = LLMClient(settings=LLMSettings(api_key="sk-test"), chat_model=FailingChatModel())
    service = NoteService(store=store, llm_client=llm_client)
    note = store.create("T", "B")

    app.dependency_overrides[get_note_service] = lambda: service
    try:
        response = TestClient(app).post(f"/api/notes/{note.id}/summarize")
    finally:
        app.dependency_overrides.pop(get_note_service, None)

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to summarize note"
    assert response.json()["code"] == "GATEWAY_ERROR"


def test_static_client_reloads_list_after_rewrite(client: TestClient) -> None:
    script = client.get("/script.js").text

    rewrite = script[script.index("async function rewriteNote"):]
    rewrite = rewrite[: rewrite.index("\n}\n")]
    assert "await loadNotes()" in rewrite
    assert "textContent = data.rewritten" not in rewrite
