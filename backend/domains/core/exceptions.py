"""
笔记服务的错误类型

领域层只抛出 ApplicationError 子类，HTTP 层按 category 决定状态码，
并用 to_response() 生成统一的错误响应体:

    {"success": false, "error": "...", "code": "...", "details": {...}}
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    EXTERNAL = "external"      # LLM 网关
    INTERNAL = "internal"


# 网关失败对客户端表现为 500，而不是 502
HTTP_STATUS_BY_CATEGORY: Dict[ErrorCategory, int] = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.EXTERNAL: 500,
    ErrorCategory.INTERNAL: 500,
}


@dataclass
class ApplicationError(Exception):
    """
    错误基类

    Attributes:
        code: 机器可读的错误码，例如 NOT_FOUND
        message: 返回给客户端的错误信息
        category: 错误分类，决定 HTTP 状态码
        details: 附加上下文，原样放入响应体
        cause: 触发本错误的底层异常，只用于日志
    """
    code: str
    message: str
    category: ErrorCategory = ErrorCategory.INTERNAL
    details: Optional[Dict[str, Any]] = None
    cause: Optional[BaseException] = None

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    @property
    def http_status_code(self) -> int:
        return HTTP_STATUS_BY_CATEGORY.get(self.category, 500)

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }


class NotFoundError(ApplicationError):
    """按 ID 找不到资源"""

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            code="NOT_FOUND",
            message=f"{resource_type} not found",
            category=ErrorCategory.NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": str(resource_id)},
        )


class ValidationError(ApplicationError):
    """请求内容不合法，field 指出第一个出错的字段"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            category=ErrorCategory.VALIDATION,
            details={"field": field} if field else None,
        )
        self.field = field


class GatewayError(ApplicationError):
    """
    LLM 网关调用失败

    包括网络错误、超时、非 2xx 响应、响应结构不可用以及未配置密钥。
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(
            code="GATEWAY_ERROR",
            message=message,
            category=ErrorCategory.EXTERNAL,
            details=details,
            cause=cause,
        )


class ConfigurationError(ApplicationError):
    """必需的配置项缺失或无效"""

    def __init__(self, config_key: str, message: str):
        super().__init__(
            code="CONFIGURATION_ERROR",
            message=f"Configuration error [{config_key}]: {message}",
            details={"config_key": config_key},
        )
        self.config_key = config_key


__all__ = [
    "ErrorCategory",
    "HTTP_STATUS_BY_CATEGORY",
    "ApplicationError",
    "NotFoundError",
    "ValidationError",
    "GatewayError",
    "ConfigurationError",
]
