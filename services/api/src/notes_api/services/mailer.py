"""验证码邮件投递。"""

from email.message import EmailMessage
import logging
import smtplib
from typing import Protocol

from notes_api.core.config import Settings

logger = logging.getLogger("notes_api.mailer")


class NotificationError(Exception):
    """验证码未能投递。"""


class NotificationGateway(Protocol):
    def send_otp(self, email: str, code: str, *, purpose: str) -> None: ...


def build_otp_message(
    *,
    product_name: str,
    sender: str | None,
    recipient: str,
    code: str,
    purpose: str,
    ttl_seconds: int,
) -> EmailMessage:
    """构造验证码邮件。purpose 为 signup 或 login。"""
    title = "Sign Up" if purpose == "signup" else "Login"
    minutes = max(1, ttl_seconds // 60)
    message = EmailMessage()
    message["Subject"] = f"{product_name} {title} OTP"
    if sender:
        message["From"] = sender
    message["To"] = recipient
    message.set_content(f"Your OTP is {code}. It expires in {minutes} minutes.")
    return message


class SmtpNotificationGateway:
    """通过 SMTP 发送验证码，每次投递新建连接。"""

    def __init__(self, settings: Settings) -> None:
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.smtp_username
        self.password = settings.smtp_password
        self.use_tls = settings.smtp_use_tls
        self.timeout = settings.smtp_timeout_seconds
        self.sender = settings.smtp_from_address or settings.smtp_username
        self.product_name = settings.app_product_name
        self.ttl_seconds = settings.otp_ttl_seconds

    def send_otp(self, email: str, code: str, *, purpose: str) -> None:
        message = build_otp_message(
            product_name=self.product_name,
            sender=self.sender,
            recipient=email,
            code=code,
            purpose=purpose,
            ttl_seconds=self.ttl_seconds,
        )
        try:
            with smtplib.SMTP(host=self.host, port=self.port, timeout=self.timeout) as conn:
                if self.use_tls:
                    conn.starttls()
                if self.username and self.password:
                    conn.login(self.username, self.password)
                conn.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"smtp delivery to {email} failed") from exc


class ConsoleNotificationGateway:
    """开发环境使用：把验证码邮件写入日志而不真正发送。"""

    def __init__(self, settings: Settings) -> None:
        self.product_name = settings.app_product_name
        self.ttl_seconds = settings.otp_ttl_seconds

    def send_otp(self, email: str, code: str, *, purpose: str) -> None:
        message = build_otp_message(
            product_name=self.product_name,
            sender=None,
            recipient=email,
            code=code,
            purpose=purpose,
            ttl_seconds=self.ttl_seconds,
        )
        logger.warning("console mail backend to=%s subject=%s body=%s", email, message["Subject"], message.get_content().strip())


def build_notification_gateway(settings: Settings) -> NotificationGateway:
    """按配置选择验证码投递方式。"""
    if settings.mail_backend == "console":
        return ConsoleNotificationGateway(settings)
    return SmtpNotificationGateway(settings)
