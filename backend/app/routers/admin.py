"""관리자 데이터 내보내기/통계 API 라우터입니다."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from app.database import Database, get_database, get_db
from app.middleware.auth_middleware import CurrentUser, require_roles
from app.schemas.stats import AdminStatsOut
from app.services import export_service, stats_service
from app.utils.permissions import ADMIN, STAFF_ROLES

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/export/users")
def export_users(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*STAFF_ROLES)),
):
    return Response(
        content=export_service.export_users_csv(db),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="users.csv"'},
    )


@router.get("/export/reports")
def export_reports(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*STAFF_ROLES)),
):
    return Response(
        content=export_service.export_reports_csv(db),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="reports.csv"'},
    )


@router.get("/export/all")
def export_all(
    database: Database = Depends(get_database),
    current_user: CurrentUser = Depends(require_roles(ADMIN)),
):
    return JSONResponse(
        content=export_service.export_all(database),
        headers={"Content-Disposition": 'attachment; filename="training-portal-data.json"'},
    )


@router.get("/stats", response_model=AdminStatsOut)
def admin_stats(
    database: Database = Depends(get_database),
    current_user: CurrentUser = Depends(require_roles(*STAFF_ROLES)),
):
    return stats_service.get_admin_stats(database)
