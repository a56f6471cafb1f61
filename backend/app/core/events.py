"""Startup / shutdown hooks."""

from typing import Awaitable, Callable

from domains.core import get_service_registry, register_core_services
from domains.infra.logging import get_logger

logger = get_logger(__name__)


def create_start_handler() -> Callable[[], Awaitable[None]]:
    async def start_app() -> None:
        # 存储在这里创建；LLM 模型实例等到第一次 AI 调用时才构建
        try:
            registry = register_core_services()
            store = registry.get("note_store")

            llm_settings = getattr(registry.get("llm_client"), "settings", None)
            if llm_settings is not None and not llm_settings.api_key:
                logger.warning(
                    "llm_api_key_missing",
                    hint="set LLM_API_KEY or OPENAI_API_KEY; summarize/rewrite will fail",
                )

            logger.info(
                "api_started",
                notes=len(store),
                services=registry.initialized_services,
            )
        except Exception as e:
            logger.error("api_start_failed", error=str(e), error_type=type(e).__name__)

    return start_app


def create_stop_handler() -> Callable[[], Awaitable[None]]:
    async def stop_app() -> None:
        try:
            await get_service_registry().shutdown()
        except Exception as e:
            logger.warning("service_shutdown_failed", error=str(e))
        logger.info("api_stopped")

    return stop_app
