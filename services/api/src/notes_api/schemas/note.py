"""笔记请求与响应结构。"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from notes_api.schemas.common import BaseSchema


class NoteCreateRequest(BaseModel):
    """创建笔记。"""

    content: str = Field(min_length=1, max_length=20000, description="笔记正文。", examples=["hello"])

    @field_validator("content")
    @classmethod
    def reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content required")
        return value


class NoteData(BaseSchema):
    """笔记结构。"""

    id: UUID = Field(description="笔记 ID。")
    user_id: UUID = Field(description="所有者用户 ID。")
    content: str = Field(description="笔记正文。")
    created_at: datetime = Field(description="创建时间。")
    updated_at: datetime = Field(description="更新时间。")
