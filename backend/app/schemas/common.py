"""Shared response schemas."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """错误响应体，所有非 2xx 响应都使用该结构"""

    success: bool = False
    error: str = Field(..., description="可直接展示给用户的错误信息")
    code: str = Field(..., description="错误码，如 NOT_FOUND / GATEWAY_ERROR")
    details: Optional[Dict[str, Any]] = None
