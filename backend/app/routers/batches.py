"""Batches 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import CurrentUser, get_current_user, require_roles
from app.schemas.batch import BatchCreate, BatchCreateResponse, BatchOut
from app.schemas.common import MessageOut
from app.schemas.user import ParticipantOut
from app.services import batch_service, enrollment_service
from app.utils.permissions import STAFF_ROLES

router = APIRouter(prefix="/api", tags=["batches"])


@router.get("/batches", response_model=List[BatchOut])
def list_batches(
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return batch_service.get_batches(db, status)


@router.get("/my-batches", response_model=List[BatchOut])
def list_my_batches(db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    return batch_service.get_my_batches(db, current_user.id)


@router.post("/batches", response_model=BatchCreateResponse, status_code=201)
def create_batch(
    data: BatchCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*STAFF_ROLES)),
):
    batch = batch_service.create_batch(db, data, instructor_id=current_user.id)
    return BatchCreateResponse(message="Batch created successfully", batch_id=batch.id)


@router.post("/batches/{batch_id}/enroll", response_model=MessageOut)
def enroll(batch_id: int, db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    enrollment_service.enroll(db, current_user.id, batch_id)
    return {"message": "Enrolled successfully"}


@router.get("/batches/{batch_id}/participants", response_model=List[ParticipantOut])
def list_participants(
    batch_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return batch_service.get_participants(db, batch_id)
