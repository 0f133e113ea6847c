"""会话令牌签发服务。"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from notes_api.core.config import get_settings
from notes_api.models.user import User


def issue_access_token(user: User, *, now: datetime | None = None) -> tuple[str, datetime]:
    """签发绑定用户 ID 与邮箱的会话令牌，返回令牌及其过期时间。

    令牌无状态：服务端不保存会话记录，有效性仅由签名与过期时间决定。
    """
    settings = get_settings()
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(seconds=settings.auth_access_token_ttl_seconds)

    claims: dict[str, object] = {
        "sub": str(user.id),
        "email": user.email,
        "iss": settings.auth_jwt_issuer,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(claims, settings.auth_jwt_secret, algorithm=settings.auth_algorithms[0])
    return token, expires_at
