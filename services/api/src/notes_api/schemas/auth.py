"""注册、登录与联合登录请求结构。"""

from datetime import date

from pydantic import BaseModel, Field, field_validator

from notes_api.schemas.common import BaseSchema

EMAIL_PATTERN = r"^\S+@\S+\.\S+$"


def _strip_required(value: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise ValueError("must not be blank")
    return stripped


class SignupRequest(BaseModel):
    """注册申请验证码。"""

    name: str = Field(min_length=1, max_length=128, description="展示名。", examples=["Ada"])
    dob: date = Field(description="出生日期。", examples=["1990-01-01"])
    email: str = Field(min_length=5, max_length=256, pattern=EMAIL_PATTERN, description="邮箱。", examples=["ada@example.com"])

    strip_name = field_validator("name")(_strip_required)


class VerifySignupRequest(BaseModel):
    """注册验证码核销。"""

    email: str = Field(min_length=5, max_length=256, pattern=EMAIL_PATTERN, description="邮箱。")
    otp: str = Field(min_length=1, max_length=16, description="邮件中的六位验证码。", examples=["123456"])
    name: str = Field(min_length=1, max_length=128, description="展示名。")
    dob: date = Field(description="出生日期。")

    strip_name = field_validator("name")(_strip_required)
    strip_otp = field_validator("otp")(_strip_required)


class LoginRequest(BaseModel):
    """登录申请验证码。"""

    email: str = Field(min_length=5, max_length=256, pattern=EMAIL_PATTERN, description="邮箱。", examples=["ada@example.com"])


class VerifyLoginRequest(BaseModel):
    """登录验证码核销。"""

    email: str = Field(min_length=5, max_length=256, pattern=EMAIL_PATTERN, description="邮箱。")
    otp: str = Field(min_length=1, max_length=16, description="邮件中的六位验证码。")

    strip_otp = field_validator("otp")(_strip_required)


class GoogleAuthRequest(BaseModel):
    """联合登录请求。"""

    token: str = Field(min_length=1, description="Google ID Token。")


class UserProfile(BaseSchema):
    """最小用户资料。"""

    name: str = Field(description="展示名。")
    email: str = Field(description="邮箱。")


class SessionData(BaseSchema):
    """认证成功结果。"""

    token: str = Field(description="会话令牌，请以 Bearer 方式携带。")
    user: UserProfile = Field(description="用户资料。")
