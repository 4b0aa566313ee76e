"""사용자/차수/일자 단위 일일 보고서 모델 정의입니다."""

from sqlalchemy import Column, Integer, Date, DateTime, Float, Text, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class Report(Base):
    __tablename__ = "daily_reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    batch_id = Column(Integer, ForeignKey("batches.id"), nullable=False, index=True)
    report_date = Column(Date, nullable=False, index=True)
    tasks_completed = Column(Text, nullable=False)
    challenges = Column(Text, nullable=True)
    hours_worked = Column(Float, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="reports")
    batch = relationship("Batch", back_populates="reports")

    __table_args__ = (
        UniqueConstraint("user_id", "batch_id", "report_date", name="uq_daily_reports_user_batch_date"),
        CheckConstraint("hours_worked >= 0", name="ck_daily_reports_hours"),
    )
