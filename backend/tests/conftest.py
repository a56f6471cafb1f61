import pytest
from fastapi.testclient import TestClient

from app.core.deps import get_note_service
from app.main import app
from domains.note_hub import NoteService, NoteStore


class FakeGateway:
    """Records every generate() call and returns a canned reply or raises."""

    def __init__(self, reply: str = "", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        model_key: str | None = None,
        caller: str = "",
        purpose: str = "",
    ) -> str:
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "caller": caller,
                "purpose": purpose,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def store() -> NoteStore:
    return NoteStore()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway(reply="fake reply")


@pytest.fixture
def service(store: NoteStore, gateway: FakeGateway) -> NoteService:
    return NoteService(store=store, llm_client=gateway)


@pytest.fixture
def client(service: NoteService):
    app.dependency_overrides[get_note_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_note_service, None)
