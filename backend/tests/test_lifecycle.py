import asyncio

import pytest

from app.core.deps import get_note_service
from app.core.events import create_start_handler, create_stop_handler
from domains.core import ServiceRegistry, get_service_registry, register_core_services, reset_service_registry
from domains.note_hub import NoteService, NoteStore

from conftest import FakeGateway


@pytest.fixture(autouse=True)
def fresh_registry():
    reset_service_registry()
    yield
    reset_service_registry()


def test_registry_resolves_dependencies_first() -> None:
    registry = ServiceRegistry()
    order = []
    registry.register("a", lambda: order.append("a") or "A")
    registry.register("b", lambda: order.append("b") or "B", dependencies=["a"])

    assert registry.get("b") == "B"
    assert order == ["a", "b"]
    assert registry.get("b") == "B"
    assert registry.initialized_services == ["a", "b"]


def test_registry_unknown_service_raises() -> None:
    with pytest.raises(KeyError):
        ServiceRegistry().get("missing")


def test_registry_shutdown_runs_cleanup_in_reverse_order() -> None:
    registry = ServiceRegistry()
    cleaned = []

    async def async_cleanup(instance):
        cleaned.append(instance)

    registry.register("first", lambda: "first", cleanup=cleaned.append)
    registry.register("second", lambda: "second", dependencies=["first"], cleanup=async_cleanup)
    registry.get("second")

    asyncio.run(registry.shutdown())

    assert cleaned == ["second", "first"]
    assert registry.initialized_services == []


def test_registry_reset_recreates_instance() -> None:
    registry = ServiceRegistry()
    registry.register("store", NoteStore)
    first = registry.get("store")

    registry.reset("store")

    assert registry.get("store") is not first


def test_core_services_share_one_store() -> None:
    registry = get_service_registry()
    gateway = FakeGateway()
    registry.set("llm_client", gateway)

    register_core_services()
    service = registry.get("note_service")

    assert isinstance(service, NoteService)
    assert service.store is registry.get("note_store")
    assert service.llm_client is gateway
    assert get_note_service() is service


def test_start_and_stop_handlers() -> None:
    registry = get_service_registry()
    registry.set("llm_client", FakeGateway())

    asyncio.run(create_start_handler()())
    store = registry.get("note_store")
    store.create("T", "B")

    asyncio.run(create_stop_handler()())

    assert len(store) == 0
    assert registry.initialized_services == []
