"""验证码注册、登录与联合登录接口。"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from notes_api.db.session import get_db
from notes_api.dependencies import get_federated_verifier, get_notification_gateway, get_otp_ledger
from notes_api.schemas.auth import (
    GoogleAuthRequest,
    LoginRequest,
    SessionData,
    SignupRequest,
    VerifyLoginRequest,
    VerifySignupRequest,
)
from notes_api.schemas.common import ErrorResponse, MessageData
from notes_api.services.auth_flow import (
    SessionGrant,
    google_login,
    request_login_otp,
    request_signup_otp,
    verify_login,
    verify_signup,
)
from notes_api.services.google_identity import FederatedVerifier
from notes_api.services.mailer import NotificationGateway
from notes_api.services.otp_ledger import OtpLedger

router = APIRouter(tags=["auth"])


def _session_payload(grant: SessionGrant) -> dict:
    return {"token": grant.token, "user": {"name": grant.user.name, "email": grant.user.email}}


@router.post(
    "/signup",
    summary="注册：发送验证码",
    description="校验注册信息，邮箱未注册时向其发送六位验证码。",
    status_code=status.HTTP_200_OK,
    response_model=MessageData,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
def signup(
    payload: SignupRequest,
    db: Session = Depends(get_db),
    ledger: OtpLedger = Depends(get_otp_ledger),
    gateway: NotificationGateway = Depends(get_notification_gateway),
):
    message = request_signup_otp(db, ledger, gateway, email=payload.email)
    return {"message": message}


@router.post(
    "/verify-signup",
    summary="注册：核销验证码",
    description="验证码正确时创建账号并返回会话令牌。",
    status_code=status.HTTP_200_OK,
    response_model=SessionData,
    responses={401: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def verify_signup_otp(
    payload: VerifySignupRequest,
    db: Session = Depends(get_db),
    ledger: OtpLedger = Depends(get_otp_ledger),
):
    grant = verify_signup(
        db,
        ledger,
        email=payload.email,
        otp=payload.otp,
        name=payload.name,
        date_of_birth=payload.dob,
    )
    return _session_payload(grant)


@router.post(
    "/login",
    summary="登录：发送验证码",
    description="邮箱已注册时向其发送六位验证码。",
    status_code=status.HTTP_200_OK,
    response_model=MessageData,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    ledger: OtpLedger = Depends(get_otp_ledger),
    gateway: NotificationGateway = Depends(get_notification_gateway),
):
    message = request_login_otp(db, ledger, gateway, email=payload.email)
    return {"message": message}


@router.post(
    "/verify-login",
    summary="登录：核销验证码",
    description="验证码正确时返回会话令牌。",
    status_code=status.HTTP_200_OK,
    response_model=SessionData,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def verify_login_otp(
    payload: VerifyLoginRequest,
    db: Session = Depends(get_db),
    ledger: OtpLedger = Depends(get_otp_ledger),
):
    grant = verify_login(db, ledger, email=payload.email, otp=payload.otp)
    return _session_payload(grant)


@router.post(
    "/google-auth",
    summary="Google 联合登录",
    description="校验 Google ID Token；邮箱首次出现时自动创建账号。",
    status_code=status.HTTP_200_OK,
    response_model=SessionData,
    responses={401: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
def google_auth(
    payload: GoogleAuthRequest,
    db: Session = Depends(get_db),
    verifier: FederatedVerifier = Depends(get_federated_verifier),
):
    grant = google_login(db, verifier, id_token=payload.token)
    return _session_payload(grant)
