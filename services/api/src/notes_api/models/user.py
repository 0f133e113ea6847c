"""身份模型。"""

from datetime import date

from sqlalchemy import Date, String
from sqlalchemy.orm import Mapped, mapped_column

from notes_api.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from notes_api.models.enums import AuthProvider


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """注册用户。创建后不再修改。"""

    __tablename__ = "users"

    # 展示名。
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    # 出生日期；联合登录创建的账号写入占位日期。
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    # 登录邮箱，按原样精确匹配，全局唯一。
    email: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)
    # 首次创建账号时使用的认证方式。
    auth_provider: Mapped[str] = mapped_column(String(32), nullable=False, default=AuthProvider.OTP)
    # 联合身份主体 ID（Google sub），本地注册账号为空。
    external_subject: Mapped[str | None] = mapped_column(String(256))
