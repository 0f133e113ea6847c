"""笔记读写服务，所有操作均以当前用户 ID 作为归属条件。"""

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from notes_api.core.errors import not_found_or_unauthorized
from notes_api.models.note import Note


def list_notes(db: Session, *, user_id: UUID) -> list[Note]:
    """按创建时间倒序列出当前用户的笔记。"""
    stmt = select(Note).where(Note.user_id == user_id).order_by(Note.created_at.desc(), Note.id.desc())
    return list(db.execute(stmt).scalars().all())


def create_note(db: Session, *, user_id: UUID, content: str) -> Note:
    note = Note(user_id=user_id, content=content)
    db.add(note)
    db.commit()
    db.refresh(note)
    return note


def delete_note(db: Session, *, user_id: UUID, note_id: UUID) -> None:
    """删除笔记；不存在与不属于当前用户返回同一错误，不暴露他人笔记是否存在。"""
    result = db.execute(delete(Note).where(Note.id == note_id).where(Note.user_id == user_id))
    if result.rowcount == 0:
        db.rollback()
        raise not_found_or_unauthorized()
    db.commit()
