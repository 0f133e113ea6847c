"""账号开通服务。"""

from datetime import date
import logging
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from notes_api.core.errors import duplicate_account
from notes_api.models.enums import AuthProvider
from notes_api.models.user import User

logger = logging.getLogger("notes_api.accounts")

# 联合登录不采集出生日期，首次创建账号时写入固定占位日期。
FEDERATED_PLACEHOLDER_DOB = date(1970, 1, 1)
FEDERATED_PLACEHOLDER_NAME = "Google User"


def normalize_email(value: str) -> str:
    """去除首尾空白；邮箱按原样精确匹配，不做大小写折叠。"""
    return value.strip()


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def get_user(db: Session, user_id: UUID) -> User | None:
    return db.get(User, user_id)


def _insert_user(db: Session, user: User) -> User:
    db.add(user)
    try:
        db.flush()
    except IntegrityError as exc:
        # 并发注册同一邮箱时，以唯一约束为准。
        db.rollback()
        raise duplicate_account() from exc
    return user


def create_local_account(db: Session, *, email: str, name: str, date_of_birth: date) -> User:
    """验证码注册：邮箱已存在时拒绝。"""
    if find_user_by_email(db, email) is not None:
        raise duplicate_account()
    user = _insert_user(
        db,
        User(
            id=uuid4(),
            name=name,
            date_of_birth=date_of_birth,
            email=email,
            auth_provider=AuthProvider.OTP,
        ),
    )
    logger.info("provisioned otp account user_id=%s", user.id)
    return user


def ensure_federated_account(
    db: Session,
    *,
    email: str,
    name: str | None,
    subject: str | None,
) -> tuple[User, bool]:
    """联合登录：按邮箱复用已有账号，不存在时创建。返回 (用户, 是否新建)。"""
    existing = find_user_by_email(db, email)
    if existing is not None:
        return existing, False

    user = User(
        id=uuid4(),
        name=name or FEDERATED_PLACEHOLDER_NAME,
        date_of_birth=FEDERATED_PLACEHOLDER_DOB,
        email=email,
        auth_provider=AuthProvider.GOOGLE,
        external_subject=subject,
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError:
        # 同一邮箱的首次联合登录并发到达时，复用先落库的记录。
        db.rollback()
        winner = find_user_by_email(db, email)
        if winner is None:
            raise
        return winner, False
    logger.info("provisioned federated account user_id=%s", user.id)
    return user, True
