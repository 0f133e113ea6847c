"""应用中间件注册。"""

from time import perf_counter
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from notes_api.core.config import Settings

# 前端使用 Google 登录组件，需放行其脚本、接口与内嵌框架来源。
CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'self'",
        "script-src 'self' https://accounts.google.com https://apis.google.com 'unsafe-inline'",
        "connect-src 'self' https://accounts.google.com https://oauth2.googleapis.com",
        "img-src 'self' data:",
        "style-src 'self' 'unsafe-inline'",
        "frame-src https://accounts.google.com",
    ]
)

SECURITY_HEADERS = {
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}


async def request_id_middleware(request: Request, call_next):
    """注入请求追踪 ID，并通过响应头返回。"""
    request.state.request_id = str(uuid.uuid4())
    request.state.request_started_at = perf_counter()
    response = await call_next(request)
    response.headers["X-Request-Id"] = request.state.request_id
    elapsed = perf_counter() - request.state.request_started_at
    response.headers["X-Process-Time-Ms"] = str(round(elapsed * 1000, 2))
    return response


async def security_headers_middleware(request: Request, call_next):
    """为所有响应附加安全响应头。"""
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


def register_middlewares(app: FastAPI, settings: Settings) -> None:
    """集中注册中间件。"""
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(security_headers_middleware)
    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        # 未配置来源列表时不限制来源。
        allow_origins=origins,
        allow_origin_regex=None if origins else ".*",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )
