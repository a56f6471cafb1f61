"""Notes AI application.

Routes:
- /api/notes/...  REST API (see app.routes.v1.notes)
- /health         liveness probe
- /               static browser client
"""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.core.config import settings
from app.core.events import create_start_handler, create_stop_handler
from app.core.exceptions import register_exception_handlers
from app.routes.v1.router import api_router
from domains.infra.logging import bind_request_context, clear_request_context, configure_logging, get_logger

configure_logging(service_name="notes-api")
logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class APIAccessLogMiddleware(BaseHTTPMiddleware):
    """为 API 请求分配 request_id 并记录访问日志，静态文件不记录"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not request.url.path.startswith(settings.API_PREFIX):
            return await call_next(request)

        request_id = uuid.uuid4().hex[:8]
        bind_request_context(request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "http_request_crashed",
                method=request.method,
                path=request.url.path,
                elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        else:
            logger.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_request_context()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_start_handler()()
    yield
    await create_stop_handler()()


def create_application() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="个人笔记 + AI 摘要/改写",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Content-Type"],
    )
    app.add_middleware(APIAccessLogMiddleware)

    app.include_router(api_router, prefix=settings.API_PREFIX)
    register_exception_handlers(app)

    @app.get("/health", include_in_schema=False)
    async def health():
        return {"status": "healthy", "version": settings.VERSION}

    # "/" 会吞掉所有未匹配的路径，必须最后挂载
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="client")

    return app


app = create_application()


def run() -> None:
    """notes-ai 命令入口"""
    import uvicorn

    logger.info("server_starting", url=f"http://localhost:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
