"""
LLM 客户端

基于 LangChain 提供统一的 LLM 调用接口。
这是一个纯技术封装，不包含业务逻辑：调用方传入 system/user prompt，
客户端返回提取后的纯文本。
"""

import time
import uuid
from typing import Any

import openai
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from domains.core import ConfigurationError, GatewayError

from ..logging import LogSanitizer, get_logger
from .config import LLMSettings, get_llm_settings

logger = get_logger(__name__)

# 日志中 prompt 预览的最大长度
PROMPT_PREVIEW_CHARS = 200


class LLMClient:
    """
    LLM 客户端

    提供简洁的 LLM 调用接口，支持:
    - 配置驱动的模型选择
    - 显式超时与 SDK 层有限重试
    - 结构化调用日志
    """

    def __init__(
        self,
        settings: LLMSettings | None = None,
        model_key: str | None = None,
        chat_model: BaseChatModel | None = None,
    ):
        """
        初始化 LLM 客户端

        Args:
            settings: LLM 配置，None 则使用全局配置
            model_key: 默认模型 key
            chat_model: 预构建的模型实例（测试或自定义 provider 时使用）
        """
        self.settings = settings or get_llm_settings()
        self.default_model_key = model_key or self.settings.default_model
        self._models: dict[str, BaseChatModel] = {}
        if chat_model is not None:
            self._models[self.default_model_key] = chat_model

    def _create_model(self, model_key: str) -> BaseChatModel:
        """创建 LangChain 模型实例"""
        if not self.settings.api_key:
            raise ConfigurationError("LLM_API_KEY", "API key is not set")

        config = self.settings.resolve_config(model_key=model_key)

        kwargs: dict[str, Any] = {
            "model": config["model"],
            "openai_api_base": self.settings.api_url,
            "openai_api_key": self.settings.api_key,
            "timeout": self.settings.timeout,
            "max_retries": self.settings.max_retries,
        }
        if config["temperature"] is not None:
            kwargs["temperature"] = config["temperature"]
        if config["max_tokens"] is not None:
            kwargs["max_tokens"] = config["max_tokens"]
        if config["use_responses_api"]:
            kwargs["use_responses_api"] = True

        return ChatOpenAI(**kwargs)

    def get_model(self, model_key: str | None = None) -> BaseChatModel:
        """获取模型实例 (带缓存)"""
        key = model_key or self.default_model_key
        if key not in self._models:
            self._models[key] = self._create_model(key)
        return self._models[key]

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        model_key: str | None = None,
        caller: str = "",
        purpose: str = "",
    ) -> str:
        """
        发送 system/user prompt 并返回响应文本

        Args:
            system_prompt: 系统指令
            user_prompt: 用户内容
            model_key: 模型 key，None 则使用默认
            caller: 调用方标识 (用于日志)
            purpose: 调用目的 (用于日志)

        Returns:
            去除首尾空白的响应文本；响应中没有文本时返回空字符串

        Raises:
            GatewayError: 网络失败、非 2xx 响应、响应结构不可用或未配置 API 密钥
        """
        try:
            model = self.get_model(model_key)
        except ConfigurationError as e:
            logger.error("llm_not_configured", caller=caller, purpose=purpose, error=e.message)
            raise GatewayError("LLM gateway is not configured", details=e.details, cause=e) from e

        config = self.settings.resolve_config(model_key=model_key)
        call_id = f"llm_{uuid.uuid4().hex[:12]}"

        logger.info(
            "llm_request",
            call_id=call_id,
            model=config["model"],
            caller=caller,
            purpose=purpose,
            system_prompt_chars=len(system_prompt),
            user_prompt_chars=len(user_prompt),
        )
        logger.debug(
            "llm_request_prompt",
            call_id=call_id,
            user_prompt=LogSanitizer.sanitize(user_prompt[:PROMPT_PREVIEW_CHARS]),
        )

        start_time = time.time()
        try:
            response = await model.ainvoke(self._convert_messages(system_prompt, user_prompt))
            text = self.extract_text(response)
        except GatewayError as e:
            self._log_error(call_id, config["model"], e, start_time)
            raise
        except openai.OpenAIError as e:
            self._log_error(call_id, config["model"], e, start_time)
            raise GatewayError(
                f"LLM request failed: {type(e).__name__}",
                details={"model": config["model"], "error_type": type(e).__name__},
                cause=e,
            ) from e
        except Exception as e:
            # LangChain 解析响应时的错误，例如 Responses API 返回 error 字段
            self._log_error(call_id, config["model"], e, start_time)
            raise GatewayError(
                f"LLM response could not be used: {type(e).__name__}",
                details={"model": config["model"], "error_type": type(e).__name__},
                cause=e,
            ) from e

        duration_ms = (time.time() - start_time) * 1000
        prompt_tokens, completion_tokens, total_tokens = self._extract_token_usage(response)

        logger.info(
            "llm_response",
            call_id=call_id,
            model=config["model"],
            content_chars=len(text),
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total_tokens,
            duration_ms=round(duration_ms, 2),
        )
        return text

    @staticmethod
    def _log_error(call_id: str, model: str, error: Exception, start_time: float) -> None:
        logger.error(
            "llm_error",
            call_id=call_id,
            model=model,
            error=str(error),
            error_type=type(error).__name__,
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )

    @staticmethod
    def _convert_messages(system_prompt: str, user_prompt: str) -> list[BaseMessage]:
        return [
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_prompt),
        ]

    @staticmethod
    def extract_text(response: Any) -> str:
        """
        从模型响应中提取文本

        优先使用字符串形式的 content；Responses API 等返回结构化
        content block 列表时，取第一个带文本的 block。

        Raises:
            GatewayError: content 既不是字符串也不是列表
        """
        content = getattr(response, "content", None)

        if isinstance(content, str):
            return content.strip()

        if isinstance(content, list):
            for block in content:
                if isinstance(block, str):
                    return block.strip()
                if not isinstance(block, dict):
                    continue
                text = block.get("text")
                if isinstance(text, dict):
                    text = text.get("value")
                if isinstance(text, str):
                    return text.strip()
            return ""

        raise GatewayError(
            "LLM response has an unexpected shape",
            details={"content_type": type(content).__name__},
        )

    @staticmethod
    def _extract_token_usage(response: Any) -> tuple[int, int, int]:
        """
        从响应对象提取 token 使用信息

        Returns:
            (prompt_tokens, completion_tokens, total_tokens)
        """
        usage_metadata = getattr(response, "usage_metadata", None)
        if not usage_metadata:
            return 0, 0, 0
        return (
            usage_metadata.get("input_tokens", 0),
            usage_metadata.get("output_tokens", 0),
            usage_metadata.get("total_tokens", 0),
        )


# 全局客户端实例
_llm_client: LLMClient | None = None


def get_llm_client() -> LLMClient:
    """获取全局 LLM 客户端"""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client


def reset_llm_client() -> None:
    """重置 LLM 客户端（用于配置变更后）"""
    global _llm_client
    _llm_client = None
