"""Batch 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import date, datetime

from app.schemas.common import CamelModel

BatchStatus = Literal["active", "upcoming", "completed"]


class BatchCreate(BaseModel):
    name: str = Field(min_length=1)
    duration: str = Field(min_length=1)
    start_date: date
    status: BatchStatus
    max_participants: Optional[int] = Field(default=None, ge=1)


class BatchCreateResponse(CamelModel):
    message: str
    batch_id: int


class BatchOut(BaseModel):
    id: int
    name: str
    instructor_id: Optional[int] = None
    duration: str
    start_date: date
    status: str
    max_participants: int
    created_at: Optional[datetime] = None
    instructor_name: Optional[str] = None
    participant_count: int = 0

    model_config = {"from_attributes": True}
