"""顶层路由注册。"""

from fastapi import APIRouter

from . import auth, health, notes, users

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(notes.router)
