"""Daily report API 라우터입니다."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import CurrentUser, get_current_user
from app.schemas.report import ReportOut, ReportSubmit, ReportSubmitResponse
from app.services import report_service

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.post("", response_model=ReportSubmitResponse)
def submit_report(
    data: ReportSubmit,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    report = report_service.submit_report(db, current_user.id, data)
    return ReportSubmitResponse(message="Report submitted successfully", report_id=report.id)


@router.get("", response_model=List[ReportOut])
def list_reports(
    batch_id: Optional[int] = Query(None),
    user_id: Optional[int] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    limit: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return report_service.query_reports(
        db,
        current_user,
        batch_id=batch_id,
        user_id=user_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    )
