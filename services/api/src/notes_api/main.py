"""FastAPI 应用入口点。"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from notes_api.api.router import api_router
from notes_api.core.config import Settings, get_settings
from notes_api.db.session import engine
from notes_api.exceptions import register_exception_handlers
from notes_api.middlewares import register_middlewares
from notes_api.models import Base
from notes_api.services.google_identity import GoogleIdentityVerifier
from notes_api.services.mailer import build_notification_gateway
from notes_api.services.otp_ledger import OtpLedger


def _setup_logging(settings: Settings) -> None:
    """初始化日志输出格式与级别。"""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """创建并配置 FastAPI 应用实例。"""
    settings = settings or get_settings()
    _setup_logging(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        # 生产环境表结构由迁移脚本维护，仅本地开发按模型建表。
        if settings.database_auto_create:
            Base.metadata.create_all(bind=engine)
        yield

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        debug=settings.app_debug,
        lifespan=lifespan,
        description=(
            "个人笔记服务接口。\n\n"
            "通过邮箱验证码或 Google 账号登录，获取会话令牌后以 `Authorization: Bearer <token>` 访问笔记接口。"
        ),
        openapi_tags=[
            {"name": "health", "description": "服务存活与就绪探针。"},
            {"name": "auth", "description": "验证码注册登录与联合登录。"},
            {"name": "users", "description": "当前用户资料。"},
            {"name": "notes", "description": "个人笔记读写。"},
        ],
    )

    # 进程内组件由应用持有，通过依赖注入提供给路由。
    app.state.otp_ledger = OtpLedger(
        ttl_seconds=settings.otp_ttl_seconds,
        enforce_expiry=settings.otp_enforce_expiry,
    )
    app.state.notification_gateway = build_notification_gateway(settings)
    app.state.federated_verifier = GoogleIdentityVerifier.from_settings(settings)

    register_middlewares(app, settings)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()
