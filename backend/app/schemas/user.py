"""User 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from app.schemas.common import CamelModel


class RegisterRequest(BaseModel):
    # 누락 필드는 서비스 레이어에서 "All fields are required"로 일괄 검증한다.
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[str] = None


class RegisterResponse(CamelModel):
    message: str
    user_id: int


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class UserOut(BaseModel):
    id: int
    username: str
    email: str
    full_name: str
    role: str

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    token: str
    user: UserOut


class ParticipantOut(BaseModel):
    id: int
    username: str
    full_name: str
    email: str
    enrolled_at: Optional[datetime] = None
