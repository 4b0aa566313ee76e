"""Daily report 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.common import CamelModel


class ReportSubmit(BaseModel):
    batch_id: int
    report_date: date
    tasks_completed: str = Field(min_length=1)
    challenges: Optional[str] = None
    hours_worked: float = Field(ge=0, allow_inf_nan=False)
    notes: Optional[str] = None


class ReportSubmitResponse(CamelModel):
    message: str
    report_id: int


class ReportOut(BaseModel):
    id: int
    user_id: int
    batch_id: int
    report_date: date
    tasks_completed: str
    challenges: Optional[str] = None
    hours_worked: float
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user_name: str
    username: str
    batch_name: str
