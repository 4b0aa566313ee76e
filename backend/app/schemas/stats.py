"""통계 집계 응답 스키마입니다."""

from app.schemas.common import CamelModel


class GlobalStatsOut(CamelModel):
    total_batches: int
    active_batches: int
    total_enrollments: int
    total_reports: int


class AdminStatsOut(GlobalStatsOut):
    total_users: int
    student_count: int
    teacher_count: int
    total_hours: float
    avg_hours: float
    recent_reports: int
