"""AI 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import CurrentUser, get_current_user, require_roles
from app.schemas.insights import (
    BatchRecommendationOut,
    ClassInsightsOut,
    CompletionPredictionOut,
    StudentAnalysisOut,
)
from app.services.insights_service import InsightsService
from app.utils.permissions import STAFF_ROLES

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.get("/student-analysis", response_model=StudentAnalysisOut)
def student_analysis(db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    return InsightsService(db).student_progress(current_user.id)


@router.get("/batch-recommendations", response_model=List[BatchRecommendationOut])
def batch_recommendations(db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    return InsightsService(db).batch_recommendations(current_user.id)


@router.get("/completion-prediction/{batch_id}", response_model=CompletionPredictionOut)
def completion_prediction(
    batch_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return InsightsService(db).completion_prediction(current_user.id, batch_id)


@router.get("/class-insights/{batch_id}", response_model=ClassInsightsOut)
def class_insights(
    batch_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*STAFF_ROLES)),
):
    return InsightsService(db).class_insights(batch_id)
