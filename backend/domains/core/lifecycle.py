"""
进程内服务注册表

应用只有三个长生命周期对象: note_store、llm_client、note_service。
它们按名称注册工厂，第一次 get() 时创建，应用关闭时逆序清理。

    registry = register_core_services()
    service = registry.get("note_service")
    ...
    await registry.shutdown()

测试可以在 register_core_services() 之前用 set() 放入替身。
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

Cleanup = Callable[[Any], Any]


@dataclass
class ServiceDefinition:
    name: str
    factory: Callable[[], Any]
    dependencies: list[str] = field(default_factory=list)
    cleanup: Cleanup | None = None


class ServiceRegistry:
    """按名称管理单例；已创建的实例记录创建顺序，用于逆序清理"""

    def __init__(self):
        self._definitions: dict[str, ServiceDefinition] = {}
        self._instances: dict[str, Any] = {}

    def register(
        self,
        name: str,
        factory: Callable[[], Any],
        dependencies: list[str] | None = None,
        cleanup: Cleanup | None = None,
    ) -> "ServiceRegistry":
        """
        注册工厂

        Args:
            name: 服务名
            factory: 无参工厂
            dependencies: 创建前需要先就绪的服务名
            cleanup: 关闭时对实例调用，可以返回协程
        """
        if name in self._instances:
            logger.warning("service %s re-registered while live, dropping old instance", name)
            self._instances.pop(name)
        self._definitions[name] = ServiceDefinition(name, factory, list(dependencies or []), cleanup)
        return self

    def get(self, name: str) -> Any:
        """获取实例，必要时先创建依赖。未注册时抛出 KeyError"""
        if name in self._instances:
            return self._instances[name]
        if name not in self._definitions:
            raise KeyError(f"Service not registered: {name}")

        definition = self._definitions[name]
        for dependency in definition.dependencies:
            self.get(dependency)

        try:
            instance = definition.factory()
        except Exception:
            logger.exception("service %s failed to start", name)
            raise
        self._instances[name] = instance
        logger.debug("service %s started", name)
        return instance

    def set(self, name: str, instance: Any) -> None:
        """直接放入实例（测试替身或外部创建的对象）"""
        if name not in self._definitions:
            self._definitions[name] = ServiceDefinition(name, lambda: instance)
        self._instances[name] = instance

    def reset(self, name: str) -> None:
        """同步清理单个实例，下次 get() 重新创建"""
        if name not in self._instances:
            return
        instance = self._instances.pop(name)
        result = self._call_cleanup(name, instance)
        if asyncio.iscoroutine(result):
            # 同步路径里无法 await
            result.close()

    def reset_all(self) -> None:
        for name in reversed(list(self._instances)):
            self.reset(name)

    async def shutdown(self) -> None:
        """逆序清理所有已创建的实例"""
        for name in reversed(list(self._instances)):
            instance = self._instances.pop(name)
            result = self._call_cleanup(name, instance)
            if asyncio.iscoroutine(result):
                try:
                    await result
                except Exception:
                    logger.exception("service %s cleanup failed", name)
        logger.info("services shut down")

    def _call_cleanup(self, name: str, instance: Any) -> Any:
        definition = self._definitions.get(name)
        if definition is None or definition.cleanup is None:
            return None
        try:
            return definition.cleanup(instance)
        except Exception:
            logger.exception("service %s cleanup failed", name)
            return None

    @property
    def registered_services(self) -> list[str]:
        return list(self._definitions)

    @property
    def initialized_services(self) -> list[str]:
        return list(self._instances)

    def __contains__(self, name: str) -> bool:
        return name in self._definitions


_registry: ServiceRegistry | None = None


def get_service_registry() -> ServiceRegistry:
    global _registry
    if _registry is None:
        _registry = ServiceRegistry()
    return _registry


def reset_service_registry() -> None:
    """清理并替换全局注册表（测试用）"""
    global _registry
    if _registry is not None:
        _registry.reset_all()
    _registry = ServiceRegistry()


def register_core_services() -> ServiceRegistry:
    """
    在全局注册表中注册笔记服务所需的对象

    已存在的名称保持不变。工厂内延迟导入，core 包不依赖领域包。
    """
    registry = get_service_registry()

    def note_store():
        from domains.note_hub.core.store import NoteStore
        return NoteStore()

    def llm_client():
        from domains.infra.llm import get_llm_client
        return get_llm_client()

    def note_service():
        from domains.note_hub.services.note_service import NoteService
        return NoteService(store=registry.get("note_store"), llm_client=registry.get("llm_client"))

    if "note_store" not in registry:
        registry.register("note_store", note_store, cleanup=lambda store: store.clear())
    if "llm_client" not in registry:
        registry.register("llm_client", llm_client)
    if "note_service" not in registry:
        registry.register("note_service", note_service, dependencies=["note_store", "llm_client"])

    return registry


__all__ = [
    "ServiceDefinition",
    "ServiceRegistry",
    "get_service_registry",
    "reset_service_registry",
    "register_core_services",
]
