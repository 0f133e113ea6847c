"""笔记模型。"""

from uuid import UUID

from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from notes_api.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Note(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """用户私有笔记，仅所有者可读取与删除。"""

    __tablename__ = "notes"

    # 所有者用户 ID。
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # 笔记正文。
    content: Mapped[str] = mapped_column(Text, nullable=False)
