"""笔记接口。所有读写均限定在当前用户名下。"""

from uuid import UUID

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from notes_api.core.security import AuthContext
from notes_api.db.session import get_db
from notes_api.dependencies import get_auth_context
from notes_api.schemas.common import ErrorResponse, MessageData
from notes_api.schemas.note import NoteCreateRequest, NoteData
from notes_api.services.notes import create_note, delete_note, list_notes

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get(
    "",
    summary="列出笔记",
    description="按创建时间倒序返回当前用户的全部笔记。",
    status_code=status.HTTP_200_OK,
    response_model=list[NoteData],
    responses={401: {"model": ErrorResponse}},
)
def get_notes(
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return list_notes(db, user_id=ctx.user_id)


@router.post(
    "",
    summary="创建笔记",
    status_code=status.HTTP_201_CREATED,
    response_model=NoteData,
    responses={401: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def post_note(
    payload: NoteCreateRequest,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return create_note(db, user_id=ctx.user_id, content=payload.content)


@router.delete(
    "/{note_id}",
    summary="删除笔记",
    description="仅允许删除自己的笔记；不存在与无权访问返回同一错误。",
    status_code=status.HTTP_200_OK,
    response_model=MessageData,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def remove_note(
    note_id: UUID = Path(description="笔记 ID。"),
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    delete_note(db, user_id=ctx.user_id, note_id=note_id)
    return {"message": "Note deleted"}
