"""领域枚举定义。"""

from enum import StrEnum


class AuthProvider(StrEnum):
    """账号来源。"""

    OTP = "otp"  # 邮箱验证码注册。
    GOOGLE = "google"  # Google 联合登录首次创建。
