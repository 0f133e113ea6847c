"""会话令牌解析与校验。

请求状态流转：未认证 -> 已提取令牌 -> 已验证 | 已拒绝。
签名错误、载荷格式错误、已过期统一表现为 INVALID_OR_EXPIRED_TOKEN。
"""

from dataclasses import dataclass
import logging
import re
from typing import Any
from uuid import UUID

import jwt
from jwt import InvalidTokenError

from notes_api.core.config import get_settings
from notes_api.core.errors import invalid_or_expired_token, no_credential

logger = logging.getLogger("notes_api.security")


@dataclass(frozen=True)
class AuthContext:
    """已认证身份，由鉴权依赖显式传递给下游处理函数。"""

    # 当前用户 ID，笔记归属判断的唯一依据。
    user_id: UUID
    # 令牌内登记的邮箱。
    email: str


def _decode_session_token(token: str) -> dict[str, Any]:
    """按当前密钥与过期策略校验会话令牌。"""
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            key=settings.auth_jwt_secret,
            algorithms=settings.auth_algorithms,
            issuer=settings.auth_jwt_issuer,
            leeway=settings.auth_jwt_leeway_seconds,
            options={"require": ["sub", "exp", "iat"]},
        )
    except InvalidTokenError as exc:
        logger.info("session token rejected: %s", type(exc).__name__)
        raise invalid_or_expired_token() from exc


def _extract_bearer_token(authorization: str | None) -> str:
    """从 Authorization 头中提取 Bearer token。"""
    if not authorization or not authorization.strip():
        raise no_credential()
    match = re.match(r"^\s*Bearer\s+(\S+)\s*$", authorization, flags=re.IGNORECASE)
    if not match:
        raise invalid_or_expired_token()
    return match.group(1)


def verify_session_token(token: str) -> AuthContext:
    """校验会话令牌并解析出身份。"""
    claims = _decode_session_token(token)

    email = claims.get("email")
    if not isinstance(email, str) or not email:
        raise invalid_or_expired_token()
    try:
        user_id = UUID(str(claims["sub"]))
    except ValueError as exc:
        raise invalid_or_expired_token() from exc

    return AuthContext(user_id=user_id, email=email)


def parse_authorization_header(authorization: str | None) -> AuthContext:
    """解析认证头并返回已认证身份。"""
    return verify_session_token(_extract_bearer_token(authorization))
