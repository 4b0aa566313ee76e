"""규칙 기반 학습 분석(AI) 응답 스키마입니다."""

from datetime import date
from typing import List, Optional

from app.schemas.common import CamelModel


class ChallengeKeyword(CamelModel):
    challenge: str
    frequency: int


class StudentAnalysisOut(CamelModel):
    total_reports: int
    average_hours: float
    total_hours: float
    consistency: int
    common_challenges: List[ChallengeKeyword]
    performance_level: str
    recommendations: List[str]


class BatchRecommendationOut(CamelModel):
    batch_id: int
    batch_name: str
    reason: str
    availability: int
    start_date: date


class CompletionPredictionOut(CamelModel):
    completion_probability: int
    reports_submitted: int
    average_hours: float
    prediction: str


class StudentInsightOut(CamelModel):
    student_id: int
    student_name: str
    total_reports: int
    average_hours: float
    last_report_date: Optional[date] = None
    engagement_level: str
    needs_attention: bool


class ClassInsightsOut(CamelModel):
    batch_id: int
    total_students: int
    high_engagement: int
    needs_attention: int
    students: List[StudentInsightOut]
