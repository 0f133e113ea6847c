"""服务层能力导出集合。"""

from notes_api.services.accounts import (
    create_local_account,
    ensure_federated_account,
    find_user_by_email,
    get_user,
    normalize_email,
)
from notes_api.services.auth_flow import (
    SessionGrant,
    google_login,
    request_login_otp,
    request_signup_otp,
    verify_login,
    verify_signup,
)
from notes_api.services.google_identity import FederatedIdentity, GoogleIdentityVerifier
from notes_api.services.local_auth import issue_access_token
from notes_api.services.mailer import NotificationError, build_notification_gateway
from notes_api.services.notes import create_note, delete_note, list_notes
from notes_api.services.otp_ledger import OtpLedger

__all__ = [
    "FederatedIdentity",
    "GoogleIdentityVerifier",
    "NotificationError",
    "OtpLedger",
    "SessionGrant",
    "build_notification_gateway",
    "create_local_account",
    "create_note",
    "delete_note",
    "ensure_federated_account",
    "find_user_by_email",
    "get_user",
    "google_login",
    "issue_access_token",
    "list_notes",
    "normalize_email",
    "request_login_otp",
    "request_signup_otp",
    "verify_login",
    "verify_signup",
]
