"""HTTP server settings (环境变量或 .env)."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

STATIC_DIR = Path(__file__).resolve().parents[1] / "static"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # .env 里同时放着 LLM_* 等变量
    )

    PROJECT_NAME: str = "Notes AI API"
    VERSION: str = "1.0.0"

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    API_PREFIX: str = "/api"

    # 浏览器客户端与 API 同源，仅在单独起前端开发服务器时需要
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    STATIC_DIR: Path = STATIC_DIR


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
