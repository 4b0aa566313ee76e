"""Insights Service 도메인 서비스 레이어입니다.

보고서 원장을 읽기 전용으로 집계해 학습 분석 결과를 만듭니다. 학습된 모델이 아니라
고정 임계값 규칙입니다.
"""

import math
import re
from collections import Counter
from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.batch import Batch
from app.models.enrollment import Enrollment
from app.models.report import Report
from app.models.user import User
from app.services.batch_service import get_batch

STOP_WORDS = frozenset([
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "with", "had", "have", "has", "some", "difficulty",
])
RECENT_CHALLENGE_LIMIT = 10
TOP_CHALLENGE_COUNT = 5
BATCH_RECOMMENDATION_LIMIT = 3
RECOMMENDABLE_STATUSES = ("active", "upcoming")
RECOMMENDATION_REASON = "Based on your learning interests and batch availability"

_NON_WORD = re.compile(r"[^\w\s]")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def two_decimals(value: Optional[float]) -> float:
    return round(value, 2) if value else 0.0


def calculate_consistency(total_reports: int, first_report: Optional[date], last_report: Optional[date]) -> int:
    if not first_report or not last_report:
        return 0
    days_span = (last_report - first_report).days + 1
    if days_span <= 0:
        return 0
    return round_half_up(min(total_reports / days_span * 100, 100))


def extract_common_challenges(challenges: Iterable[Optional[str]]) -> List[dict]:
    keywords: Counter = Counter()
    for text in challenges:
        if not text:
            continue
        words = _NON_WORD.sub("", text.lower()).split()
        keywords.update(word for word in words if len(word) > 3 and word not in STOP_WORDS)
    return [
        {"challenge": word, "frequency": count}
        for word, count in keywords.most_common(TOP_CHALLENGE_COUNT)
    ]


def performance_level(avg_hours: Optional[float], total_reports: int) -> str:
    if not avg_hours or not total_reports:
        return "No Data"
    if avg_hours >= 7 and total_reports >= 20:
        return "Excellent"
    if avg_hours >= 6 and total_reports >= 15:
        return "Very Good"
    if avg_hours >= 5 and total_reports >= 10:
        return "Good"
    if avg_hours >= 4 and total_reports >= 5:
        return "Average"
    return "Needs Improvement"


def generate_recommendations(avg_hours: Optional[float], total_reports: int, has_challenges: bool) -> List[str]:
    avg = avg_hours or 0
    recommendations = []
    if avg < 5:
        recommendations.append(
            "Consider increasing daily study time to at least 5-6 hours for better learning outcomes."
        )
    if total_reports < 10:
        recommendations.append("Build a consistent daily reporting habit to track your progress effectively.")
    if has_challenges:
        recommendations.append(
            "Focus on overcoming recurring challenges - consider seeking help from instructors or peers."
        )
    if avg >= 8:
        recommendations.append("Great dedication! Make sure to balance study with adequate rest.")
    if total_reports >= 20 and avg >= 6:
        recommendations.append("Excellent progress! Consider mentoring other students.")
    if not recommendations:
        recommendations.append("Keep up the good work and maintain consistency!")
    return recommendations


def predict_completion_probability(reports_count: int, avg_hours: Optional[float]) -> int:
    avg = avg_hours or 0
    if reports_count >= 15 and avg >= 6:
        return 95
    if reports_count >= 10 and avg >= 5:
        return 80
    if reports_count >= 5 and avg >= 4:
        return 60
    if reports_count > 0:
        return 40
    return 20


def describe_prediction(probability: int) -> str:
    if probability >= 70:
        return "High likelihood of completion"
    if probability >= 50:
        return "Moderate likelihood of completion"
    return "Needs more engagement"


def engagement_level(total_reports: int) -> str:
    if total_reports >= 15:
        return "High"
    if total_reports >= 10:
        return "Medium"
    return "Low"


def needs_attention(total_reports: int) -> bool:
    return total_reports < 5


class InsightsService:
    def __init__(self, db: Session):
        self.db = db

    def student_progress(self, user_id: int) -> dict:
        stats = (
            self.db.query(
                func.count(Report.id).label("total_reports"),
                func.avg(Report.hours_worked).label("avg_hours"),
                func.sum(Report.hours_worked).label("total_hours"),
                func.min(Report.report_date).label("first_report"),
                func.max(Report.report_date).label("last_report"),
            )
            .filter(Report.user_id == user_id)
            .one()
        )
        challenges = [
            row.challenges
            for row in self.db.query(Report.challenges)
            .filter(
                Report.user_id == user_id,
                Report.challenges.isnot(None),
                Report.challenges != "",
            )
            .order_by(Report.report_date.desc())
            .limit(RECENT_CHALLENGE_LIMIT)
            .all()
        ]

        total_reports = int(stats.total_reports or 0)
        avg_hours = float(stats.avg_hours) if stats.avg_hours is not None else None
        return {
            "total_reports": total_reports,
            "average_hours": two_decimals(avg_hours),
            "total_hours": float(stats.total_hours or 0),
            "consistency": calculate_consistency(total_reports, stats.first_report, stats.last_report),
            "common_challenges": extract_common_challenges(challenges),
            "performance_level": performance_level(avg_hours, total_reports),
            "recommendations": generate_recommendations(avg_hours, total_reports, bool(challenges)),
        }

    def batch_recommendations(self, user_id: int) -> List[dict]:
        enrolled_ids = {
            row.batch_id
            for row in self.db.query(Enrollment.batch_id).filter(Enrollment.user_id == user_id).all()
        }
        participant_count = (
            self.db.query(Enrollment.batch_id, func.count(Enrollment.id).label("current"))
            .group_by(Enrollment.batch_id)
            .subquery()
        )
        rows = (
            self.db.query(Batch, func.coalesce(participant_count.c.current, 0).label("current"))
            .outerjoin(participant_count, participant_count.c.batch_id == Batch.id)
            .filter(Batch.status.in_(RECOMMENDABLE_STATUSES))
            .order_by(Batch.id.asc())
            .all()
        )

        recommendations = []
        for batch, current in rows:
            if batch.id in enrolled_ids or current >= batch.max_participants:
                continue
            recommendations.append({
                "batch_id": batch.id,
                "batch_name": batch.name,
                "reason": RECOMMENDATION_REASON,
                "availability": batch.max_participants - current,
                "start_date": batch.start_date,
            })
            if len(recommendations) >= BATCH_RECOMMENDATION_LIMIT:
                break
        return recommendations

    def completion_prediction(self, user_id: int, batch_id: int) -> dict:
        get_batch(self.db, batch_id)
        data = (
            self.db.query(
                func.count(Report.id).label("reports_count"),
                func.avg(Report.hours_worked).label("avg_hours"),
            )
            .filter(Report.user_id == user_id, Report.batch_id == batch_id)
            .one()
        )
        reports_count = int(data.reports_count or 0)
        avg_hours = float(data.avg_hours) if data.avg_hours is not None else None
        probability = predict_completion_probability(reports_count, avg_hours)
        return {
            "completion_probability": probability,
            "reports_submitted": reports_count,
            "average_hours": two_decimals(avg_hours),
            "prediction": describe_prediction(probability),
        }

    def class_insights(self, batch_id: int) -> dict:
        get_batch(self.db, batch_id)
        rows = (
            self.db.query(
                User.id,
                User.full_name,
                func.count(Report.id).label("total_reports"),
                func.avg(Report.hours_worked).label("avg_hours"),
                func.max(Report.report_date).label("last_report"),
            )
            .join(Enrollment, Enrollment.user_id == User.id)
            .outerjoin(
                Report,
                (Report.user_id == User.id) & (Report.batch_id == Enrollment.batch_id),
            )
            .filter(Enrollment.batch_id == batch_id)
            .group_by(User.id, User.full_name)
            .order_by(User.id.asc())
            .all()
        )

        students = []
        for row in rows:
            total_reports = int(row.total_reports or 0)
            students.append({
                "student_id": row.id,
                "student_name": row.full_name,
                "total_reports": total_reports,
                "average_hours": two_decimals(float(row.avg_hours) if row.avg_hours is not None else None),
                "last_report_date": row.last_report,
                "engagement_level": engagement_level(total_reports),
                "needs_attention": needs_attention(total_reports),
            })

        return {
            "batch_id": batch_id,
            "total_students": len(students),
            "high_engagement": sum(1 for s in students if s["engagement_level"] == "High"),
            "needs_attention": sum(1 for s in students if s["needs_attention"]),
            "students": students,
        }
