"""请求上下文依赖。

职责:
1. 解析并校验会话令牌，产出显式传递的 AuthContext。
2. 暴露应用持有的验证码台账、邮件投递与联合身份校验组件，便于测试替换。
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from notes_api.core.security import AuthContext, parse_authorization_header
from notes_api.services.google_identity import FederatedVerifier
from notes_api.services.mailer import NotificationGateway
from notes_api.services.otp_ledger import OtpLedger

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AuthContext:
    """提取并校验当前请求的会话令牌。"""
    authorization = None
    if credentials is not None and credentials.credentials:
        authorization = f"{credentials.scheme} {credentials.credentials}"
    return parse_authorization_header(authorization)


def get_otp_ledger(request: Request) -> OtpLedger:
    return request.app.state.otp_ledger


def get_notification_gateway(request: Request) -> NotificationGateway:
    return request.app.state.notification_gateway


def get_federated_verifier(request: Request) -> FederatedVerifier:
    return request.app.state.federated_verifier
