"""
Core - 错误类型与服务生命周期

领域包和 HTTP 层共同依赖的基础设施，不含任何笔记逻辑。
"""

from .exceptions import (
    HTTP_STATUS_BY_CATEGORY,
    ApplicationError,
    ConfigurationError,
    ErrorCategory,
    GatewayError,
    NotFoundError,
    ValidationError,
)
from .lifecycle import (
    ServiceDefinition,
    ServiceRegistry,
    get_service_registry,
    register_core_services,
    reset_service_registry,
)

__all__ = [
    # Exceptions
    "ErrorCategory",
    "HTTP_STATUS_BY_CATEGORY",
    "ApplicationError",
    "NotFoundError",
    "ValidationError",
    "GatewayError",
    "ConfigurationError",
    # Lifecycle
    "ServiceRegistry",
    "ServiceDefinition",
    "get_service_registry",
    "reset_service_registry",
    "register_core_services",
]
