"""차수 수강 등록 원장 모델 정의입니다."""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class Enrollment(Base):
    __tablename__ = "enrollments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    batch_id = Column(Integer, ForeignKey("batches.id"), nullable=False, index=True)
    enrolled_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="enrollments")
    batch = relationship("Batch", back_populates="enrollments")

    __table_args__ = (
        UniqueConstraint("user_id", "batch_id", name="uq_enrollments_user_batch"),
    )
