"""
structlog 配置

structlog 和标准库 logging 共用一个 stderr handler:
- LOG_FORMAT=json (默认) 每行一个 JSON 对象
- LOG_FORMAT=console 开发时的彩色输出
- request_id 通过 contextvars 自动附加到同一请求内的所有日志
"""

import logging
import os
import re
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import structlog

# 这些库的 INFO 日志对排查笔记服务没有帮助
NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "openai", "urllib3")


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"


@dataclass
class LogConfig:
    level: str = "INFO"
    format: LogFormat = LogFormat.JSON
    service_name: str = "notes-api"

    @classmethod
    def from_env(cls, service_name: str = "notes-api") -> "LogConfig":
        """读取 LOG_LEVEL / LOG_FORMAT"""
        fmt = os.getenv("LOG_FORMAT", LogFormat.JSON.value).lower()
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO").upper(),
            format=LogFormat.CONSOLE if fmt == LogFormat.CONSOLE.value else LogFormat.JSON,
            service_name=service_name,
        )


class LogSanitizer:
    """写日志前遮盖密钥和令牌"""

    PATTERNS = [
        (re.compile(r'api[_-]?key["\']?\s*[:=]\s*["\']?[\w-]+', re.IGNORECASE), "api_key=***"),
        (re.compile(r'(password|secret)["\']?\s*[:=]\s*["\']?[\w-]+', re.IGNORECASE), r"\1=***"),
        (re.compile(r"Bearer\s+[\w.-]+", re.IGNORECASE), "Bearer ***"),
        (re.compile(r"sk-[\w-]+"), "sk-***"),
    ]

    @classmethod
    def sanitize(cls, content: str) -> str:
        if not content:
            return content
        for pattern, replacement in cls.PATTERNS:
            content = pattern.sub(replacement, content)
        return content


def configure_logging(config: Optional[LogConfig] = None, service_name: str = "notes-api") -> None:
    """
    初始化日志，应用启动时调用一次

    Args:
        config: 日志配置，None 则从环境变量读取
        service_name: 写入每条日志的 service 字段
    """
    config = config or LogConfig.from_env(service_name=service_name)
    level = logging.getLevelName(config.level)
    if not isinstance(level, int):
        level = logging.INFO

    def add_service(_, __, event_dict):
        event_dict.setdefault("service", config.service_name)
        return event_dict

    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_service,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if config.format == LogFormat.CONSOLE:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        final = [renderer]
    else:
        final = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer(ensure_ascii=False)]

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *final],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    用法:
        logger = get_logger(__name__)
        logger.info("note_created", note_id=1)
    """
    return structlog.get_logger(name)


def bind_request_context(request_id: str) -> None:
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
