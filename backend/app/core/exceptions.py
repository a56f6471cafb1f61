"""Exception handlers.

所有错误响应共用同一个结构 (见 ApplicationError.to_response)，
客户端只需要读取 error 字段。
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from domains.core import ApplicationError, ValidationError
from domains.infra.logging import get_logger

logger = get_logger(__name__)

INVALID_BODY_MESSAGE = "Invalid request body"


def _to_json_response(exc: ApplicationError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status_code, content=exc.to_response())


def register_exception_handlers(app: FastAPI) -> None:
    """
    注册异常处理器

    - ApplicationError: 按 category 映射状态码
    - RequestValidationError: 请求体不是预期的 JSON 对象，400
    - 其他异常: 500，不向客户端暴露内部信息
    """

    @app.exception_handler(ApplicationError)
    async def handle_application_error(request: Request, exc: ApplicationError) -> JSONResponse:
        log = logger.error if exc.http_status_code >= 500 else logger.info
        log(
            "request_failed",
            path=request.url.path,
            method=request.method,
            status_code=exc.http_status_code,
            code=exc.code,
            error=exc.message,
            cause=repr(exc.cause) if exc.cause else None,
        )
        return _to_json_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        problems = [
            {"loc": [str(part) for part in err.get("loc", ())], "message": err.get("msg", "")}
            for err in exc.errors()
        ]
        logger.info("request_body_invalid", path=request.url.path, problems=problems)

        error = ValidationError(INVALID_BODY_MESSAGE)
        error.details = {"validation_errors": problems}
        return _to_json_response(error)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
        )
        error = ApplicationError(code="INTERNAL_ERROR", message="Internal server error")
        return _to_json_response(error)


__all__ = ["register_exception_handlers"]
