"""健康检查接口。"""

from sqlalchemy import text
from sqlalchemy.orm import Session

from fastapi import APIRouter, Depends, status

from notes_api.db.session import get_db
from notes_api.schemas.common import ErrorResponse, HealthStatusData

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "/live",
    summary="存活探针",
    status_code=status.HTTP_200_OK,
    response_model=HealthStatusData,
)
def live():
    """仅表示进程存活，不校验外部依赖。"""
    return {"status": "ok"}


@router.get(
    "/ready",
    summary="就绪探针",
    description="通过数据库连通性检测服务是否具备对外提供能力。",
    status_code=status.HTTP_200_OK,
    response_model=HealthStatusData,
    responses={500: {"model": ErrorResponse}},
)
def ready(db: Session = Depends(get_db)):
    db.execute(text("select 1"))
    return {"status": "ready"}
