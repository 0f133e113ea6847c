"""ORM 模型导出集合。"""

from notes_api.models.base import Base
from notes_api.models.note import Note
from notes_api.models.user import User

__all__ = [
    "Base",
    "Note",
    "User",
]
