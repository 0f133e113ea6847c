"""验证码与联合登录流程编排。

注册：校验账号不存在 -> 签发验证码 -> 投递邮件；
注册验证：核销验证码 -> 创建账号 -> 签发会话令牌；
登录与登录验证同理，但要求账号已存在且不会创建账号。
"""

from dataclasses import dataclass
from datetime import date, datetime
import logging

from sqlalchemy.orm import Session

from notes_api.core.errors import account_not_found, duplicate_account, invalid_credential, notification_failed
from notes_api.models.user import User
from notes_api.services.accounts import (
    create_local_account,
    ensure_federated_account,
    find_user_by_email,
    normalize_email,
)
from notes_api.services.google_identity import FederatedVerifier
from notes_api.services.local_auth import issue_access_token
from notes_api.services.mailer import NotificationError, NotificationGateway
from notes_api.services.otp_ledger import OtpLedger

logger = logging.getLogger("notes_api.auth")

OTP_SENT_MESSAGE = "OTP sent to email"


@dataclass(frozen=True)
class SessionGrant:
    """认证成功后的会话签发结果。"""

    user: User
    token: str
    expires_at: datetime


def _grant(user: User) -> SessionGrant:
    token, expires_at = issue_access_token(user)
    return SessionGrant(user=user, token=token, expires_at=expires_at)


def _dispatch_otp(ledger: OtpLedger, gateway: NotificationGateway, *, email: str, purpose: str) -> None:
    ledger.purge_expired()
    code = ledger.issue(email)
    logger.info("otp issued purpose=%s email=%s", purpose, email)
    try:
        gateway.send_otp(email, code, purpose=purpose)
    except NotificationError as exc:
        # 已签发的验证码保持有效但未送达；客户端需重新发起请求获取新码。
        logger.exception("otp delivery failed purpose=%s email=%s", purpose, email)
        raise notification_failed() from exc


def request_signup_otp(
    db: Session,
    ledger: OtpLedger,
    gateway: NotificationGateway,
    *,
    email: str,
) -> str:
    """注册第一步：账号已存在时直接拒绝，不签发验证码。"""
    email = normalize_email(email)
    if find_user_by_email(db, email) is not None:
        raise duplicate_account()
    _dispatch_otp(ledger, gateway, email=email, purpose="signup")
    return OTP_SENT_MESSAGE


def verify_signup(
    db: Session,
    ledger: OtpLedger,
    *,
    email: str,
    otp: str,
    name: str,
    date_of_birth: date,
) -> SessionGrant:
    """注册第二步：核销验证码并创建账号。

    账号在两步之间已被创建（例如同邮箱完成了 Google 登录）时返回冲突，
    且不消耗验证码。
    """
    email = normalize_email(email)
    if find_user_by_email(db, email) is not None:
        raise duplicate_account()
    if not ledger.verify(email, otp):
        logger.info("signup otp rejected email=%s", email)
        raise invalid_credential()

    user = create_local_account(db, email=email, name=name, date_of_birth=date_of_birth)
    db.commit()
    db.refresh(user)
    return _grant(user)


def request_login_otp(
    db: Session,
    ledger: OtpLedger,
    gateway: NotificationGateway,
    *,
    email: str,
) -> str:
    """登录第一步：账号必须已存在。"""
    email = normalize_email(email)
    if find_user_by_email(db, email) is None:
        raise account_not_found()
    _dispatch_otp(ledger, gateway, email=email, purpose="login")
    return OTP_SENT_MESSAGE


def verify_login(db: Session, ledger: OtpLedger, *, email: str, otp: str) -> SessionGrant:
    """登录第二步：先核销验证码，再解析账号。"""
    email = normalize_email(email)
    if not ledger.verify(email, otp):
        logger.info("login otp rejected email=%s", email)
        raise invalid_credential()

    user = find_user_by_email(db, email)
    if user is None:
        raise account_not_found()
    return _grant(user)


def google_login(db: Session, verifier: FederatedVerifier, *, id_token: str) -> SessionGrant:
    """联合登录：校验提供方令牌，首次登录自动开通账号。"""
    identity = verifier.verify(id_token)
    user, created = ensure_federated_account(
        db,
        email=identity.email,
        name=identity.name,
        subject=identity.subject,
    )
    if created:
        db.commit()
        db.refresh(user)
    return _grant(user)
