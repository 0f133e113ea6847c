"""统一错误响应结构工具。"""

from datetime import datetime, timezone
from typing import Any
import uuid

from fastapi import Request

DEFAULT_ERROR_MESSAGE = "internal server error"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def request_id_of(request: Request) -> str:
    """返回请求追踪 ID；中间件尚未注入时（如 CORS 预检拒绝）临时生成。"""
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
    return request_id


def error_payload(
    request: Request,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """构造统一错误响应结构。"""
    final_details = {
        "method": request.method.upper(),
        "path": request.url.path,
        "timestamp": _utc_now_iso(),
    }
    if details:
        final_details.update(details)
    return {
        "request_id": request_id_of(request),
        "error": {
            "code": code,
            "message": message,
            "details": final_details,
        },
    }
