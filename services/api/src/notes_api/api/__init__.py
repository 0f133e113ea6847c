"""路由模块导出集合。"""

from . import auth, health, notes, users

__all__ = [
    "auth",
    "health",
    "notes",
    "users",
]
