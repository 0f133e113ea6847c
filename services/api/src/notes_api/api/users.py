"""当前用户接口。"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from notes_api.core.errors import account_not_found
from notes_api.core.security import AuthContext
from notes_api.db.session import get_db
from notes_api.dependencies import get_auth_context
from notes_api.schemas.auth import UserProfile
from notes_api.schemas.common import ErrorResponse
from notes_api.services.accounts import get_user

router = APIRouter(tags=["users"])


@router.get(
    "/me",
    summary="获取当前用户",
    description="返回会话令牌所属用户的展示名与邮箱。",
    status_code=status.HTTP_200_OK,
    response_model=UserProfile,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def me(
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    user = get_user(db, ctx.user_id)
    if user is None:
        raise account_not_found()
    return {"name": user.name, "email": user.email}
