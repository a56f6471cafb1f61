"""
LLM 网关配置

两层来源:
1. config/llm_models.yaml: 默认模型 key、超时、重试次数以及模型表
2. 环境变量 / .env: 端点、密钥，以及对 yaml 的覆盖

    LLM_API_URL       API 端点 (默认 OpenAI)
    LLM_API_KEY       API 密钥，未设置时读取 OPENAI_API_KEY
    LLM_MODEL         直接指定模型名，忽略模型表里的 model
    LLM_TIMEOUT       单次请求超时（秒）
    LLM_MAX_RETRIES   SDK 层重试上限
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# backend/domains/infra/llm/config.py -> 仓库根目录
DEFAULT_MODELS_FILE = Path(__file__).resolve().parents[4] / "config" / "llm_models.yaml"


class ModelConfig(BaseModel):
    """模型表中的一项；temperature / max_tokens 为 None 时使用服务端默认值"""

    provider: str = "openai"
    model: str = "gpt-5.1"
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    use_responses_api: bool = False


class LLMSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    api_url: str = Field(
        default="https://api.openai.com/v1",
        validation_alias=AliasChoices("LLM_API_URL", "api_url"),
    )
    api_key: str = Field(
        default="",
        validation_alias=AliasChoices("LLM_API_KEY", "OPENAI_API_KEY", "api_key"),
    )
    override_model: str = Field(
        default="",
        validation_alias=AliasChoices("LLM_MODEL", "override_model"),
    )
    timeout: float = Field(default=60.0, gt=0)
    max_retries: int = Field(default=2, ge=0, le=10)

    default_model: str = "gpt"
    models: Dict[str, ModelConfig] = Field(default_factory=dict)

    @classmethod
    def from_yaml(cls, yaml_path: Optional[Path] = None) -> "LLMSettings":
        """
        读取模型表并与环境变量合并

        文件不存在时只使用环境变量和默认值。yaml 的 timeout / max_retries
        只在环境变量和 .env 都没有提供对应值时生效。
        """
        path = yaml_path or DEFAULT_MODELS_FILE
        if not path.exists():
            return cls()

        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        defaults = data.get("default") or {}

        values: Dict[str, Any] = {
            "models": {
                key: ModelConfig(**entry) for key, entry in (data.get("llm_configs") or {}).items()
            }
        }
        if "model" in defaults:
            values["default_model"] = defaults["model"]
        settings = cls(**values)

        # 环境变量和 .env 解析出的字段会出现在 model_fields_set 中
        yaml_defaults = {
            key: defaults[key]
            for key in ("timeout", "max_retries")
            if key in defaults and key not in settings.model_fields_set
        }
        if yaml_defaults:
            settings = cls(**values, **yaml_defaults)
        return settings

    def get_model_config(self, model_key: Optional[str] = None) -> ModelConfig:
        """未知的 key 返回默认 ModelConfig"""
        return self.models.get(model_key or self.default_model, ModelConfig())

    def resolve_config(
        self,
        model_key: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        计算一次调用的最终参数

        优先级: 调用参数 > LLM_MODEL > 模型表 > ModelConfig 默认值
        """
        entry = self.get_model_config(model_key)
        return {
            "provider": entry.provider,
            "model": self.override_model or entry.model,
            "temperature": entry.temperature if temperature is None else temperature,
            "max_tokens": entry.max_tokens if max_tokens is None else max_tokens,
            "use_responses_api": entry.use_responses_api,
        }


_llm_settings: Optional[LLMSettings] = None


def get_llm_settings(yaml_path: Optional[Path] = None) -> LLMSettings:
    global _llm_settings
    if _llm_settings is None:
        _llm_settings = LLMSettings.from_yaml(yaml_path)
    return _llm_settings


def reload_llm_settings(yaml_path: Optional[Path] = None) -> LLMSettings:
    """丢弃缓存，重新读取 yaml 和环境变量"""
    global _llm_settings
    _llm_settings = LLMSettings.from_yaml(yaml_path)
    return _llm_settings
