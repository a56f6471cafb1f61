"""
结构化日志模块

基于 structlog 提供统一的日志配置。
"""

from .config import (
    LogConfig,
    LogFormat,
    LogSanitizer,
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
)

__all__ = [
    # 配置
    "configure_logging",
    "get_logger",
    "LogConfig",
    "LogFormat",
    # 脱敏
    "LogSanitizer",
    # 上下文
    "bind_request_context",
    "clear_request_context",
]
