"""业务错误分类。

所有失败统一以 HTTPException 抛出，detail 携带机器可识别的 code，
由全局异常处理器包装为标准错误结构。认证相关错误刻意保持粗粒度，
避免向调用方暴露具体是哪一项校验失败。
"""

from fastapi import HTTPException, status


def api_error(
    status_code: int,
    *,
    code: str,
    message: str,
    suggestion: str | None = None,
) -> HTTPException:
    """构造带错误码的协议异常。"""
    details: dict[str, object] = {"reason": code.lower()}
    if suggestion:
        details["suggestion"] = suggestion
    return HTTPException(
        status_code=status_code,
        detail={"code": code, "message": message, "details": details},
    )


def duplicate_account() -> HTTPException:
    return api_error(
        status.HTTP_409_CONFLICT,
        code="DUPLICATE_ACCOUNT",
        message="User already exists",
        suggestion="Sign in with this email instead.",
    )


def account_not_found() -> HTTPException:
    return api_error(
        status.HTTP_404_NOT_FOUND,
        code="ACCOUNT_NOT_FOUND",
        message="User not found",
        suggestion="Sign up first.",
    )


def invalid_credential(message: str = "Invalid or expired OTP") -> HTTPException:
    return api_error(
        status.HTTP_401_UNAUTHORIZED,
        code="INVALID_CREDENTIAL",
        message=message,
        suggestion="Request a new code or sign in again.",
    )


def missing_claim(claim: str) -> HTTPException:
    return api_error(
        status.HTTP_401_UNAUTHORIZED,
        code="MISSING_CLAIM",
        message=f"Identity token has no {claim} claim",
    )


def no_credential() -> HTTPException:
    return api_error(
        status.HTTP_401_UNAUTHORIZED,
        code="NO_CREDENTIAL",
        message="No token provided",
        suggestion="Send 'Authorization: Bearer <token>'.",
    )


def invalid_or_expired_token() -> HTTPException:
    return api_error(
        status.HTTP_401_UNAUTHORIZED,
        code="INVALID_OR_EXPIRED_TOKEN",
        message="Invalid or expired token",
        suggestion="Sign in again to obtain a new token.",
    )


def upstream_unavailable(message: str = "Identity provider is unavailable") -> HTTPException:
    return api_error(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        code="UPSTREAM_UNAVAILABLE",
        message=message,
        suggestion="Retry later.",
    )


def notification_failed() -> HTTPException:
    return api_error(
        status.HTTP_502_BAD_GATEWAY,
        code="NOTIFICATION_FAILED",
        message="Failed to send email",
        suggestion="Request a new code.",
    )


def not_found_or_unauthorized() -> HTTPException:
    return api_error(
        status.HTTP_404_NOT_FOUND,
        code="NOT_FOUND_OR_UNAUTHORIZED",
        message="Note not found or unauthorized",
    )
