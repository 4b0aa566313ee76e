"""전체 통계 API 라우터입니다."""

from fastapi import APIRouter, Depends

from app.database import Database, get_database
from app.middleware.auth_middleware import CurrentUser, get_current_user
from app.schemas.stats import GlobalStatsOut
from app.services import stats_service

router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/stats", response_model=GlobalStatsOut)
def get_stats(
    database: Database = Depends(get_database),
    current_user: CurrentUser = Depends(get_current_user),
):
    return stats_service.get_global_stats(database)
