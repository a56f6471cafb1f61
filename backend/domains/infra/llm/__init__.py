"""
LLM 基础设施层

提供基于 LangChain 的 LLM 调用能力:
- 配置驱动的模型管理
- 结构化调用日志
- 简洁的调用接口

业务相关的 Prompt 模板应在各业务域中实现。

Example:
    from domains.infra.llm import get_llm_client

    client = get_llm_client()
    text = await client.generate(
        "You summarize personal notes.",
        "Here is the note:\\n\\nmilk eggs bread",
        caller="note_hub",
        purpose="summarize",
    )
"""

from .client import (
    LLMClient,
    get_llm_client,
    reset_llm_client,
)
from .config import (
    LLMSettings,
    ModelConfig,
    get_llm_settings,
    reload_llm_settings,
)

__all__ = [
    # Config
    "LLMSettings",
    "ModelConfig",
    "get_llm_settings",
    "reload_llm_settings",
    # Client
    "LLMClient",
    "get_llm_client",
    "reset_llm_client",
]
