"""Google 联合身份令牌校验。

使用 Google 公布的签名公钥集合校验 ID Token 的签名、受众与签发方，
并提取已验证的邮箱与展示名。
"""

from dataclasses import dataclass
from functools import lru_cache
import logging
from typing import Any, Protocol

import jwt
from jwt import InvalidTokenError, PyJWKClient
from jwt.exceptions import PyJWKClientConnectionError, PyJWKClientError

from notes_api.core.config import Settings
from notes_api.core.errors import invalid_credential, missing_claim, upstream_unavailable

logger = logging.getLogger("notes_api.google")

GOOGLE_SIGNING_ALGORITHMS = ["RS256"]


@dataclass(frozen=True)
class FederatedIdentity:
    """联合身份校验结果。"""

    email: str
    name: str | None
    subject: str | None


class SigningKeySource(Protocol):
    def get_signing_key_from_jwt(self, token: str) -> Any: ...


class FederatedVerifier(Protocol):
    def verify(self, token: str) -> FederatedIdentity: ...


@lru_cache
def _get_jwks_client(jwks_url: str) -> PyJWKClient:
    """缓存密钥集合客户端，减少重复网络开销。"""
    return PyJWKClient(jwks_url)


class GoogleIdentityVerifier:
    """以服务注册的客户端 ID 作为期望受众校验 Google ID Token。"""

    def __init__(
        self,
        *,
        client_id: str | None,
        issuers: list[str],
        key_source: SigningKeySource,
    ) -> None:
        self.client_id = client_id
        self.issuers = issuers
        self._key_source = key_source

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleIdentityVerifier":
        return cls(
            client_id=settings.google_client_id,
            issuers=settings.google_issuer_list,
            key_source=_get_jwks_client(settings.google_jwks_url),
        )

    def _decode(self, token: str) -> dict[str, Any]:
        if not self.client_id:
            logger.error("google sign-in requested but NOTES_GOOGLE_CLIENT_ID is not configured")
            raise upstream_unavailable("Google sign-in is not configured")

        try:
            signing_key = self._key_source.get_signing_key_from_jwt(token)
        except (PyJWKClientConnectionError, ValueError) as exc:
            # 拉取公钥失败或返回体无法解析均属于暂时性故障，客户端可重试，不应视为凭据无效。
            logger.warning("failed to fetch google signing keys: %s", exc)
            raise upstream_unavailable() from exc
        except (PyJWKClientError, InvalidTokenError) as exc:
            logger.info("google token rejected before signature check: %s", type(exc).__name__)
            raise invalid_credential("Invalid Google token") from exc

        try:
            return jwt.decode(
                token,
                key=signing_key.key,
                algorithms=GOOGLE_SIGNING_ALGORITHMS,
                audience=self.client_id,
                issuer=self.issuers,
                options={"require": ["exp", "iat", "iss", "aud"]},
            )
        except InvalidTokenError as exc:
            logger.info("google token rejected: %s", type(exc).__name__)
            raise invalid_credential("Invalid Google token") from exc

    def verify(self, token: str) -> FederatedIdentity:
        """校验令牌并返回联合身份。"""
        claims = self._decode(token)

        email = claims.get("email")
        if not isinstance(email, str) or not email.strip():
            raise missing_claim("email")
        # 提供方显式声明邮箱未验证时拒绝，避免以未验证邮箱接管已有账号。
        if claims.get("email_verified") is False:
            raise invalid_credential("Google account email is not verified")

        name = claims.get("name")
        subject = claims.get("sub")
        return FederatedIdentity(
            email=email.strip(),
            name=name.strip() if isinstance(name, str) and name.strip() else None,
            subject=str(subject) if subject else None,
        )
