from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Batch(Base):
    __tablename__ = "batches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    instructor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    duration = Column(String(50), nullable=False)
    start_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False)  # active/upcoming/completed
    max_participants = Column(Integer, nullable=False, default=100, server_default="100")
    created_at = Column(DateTime, server_default=func.now())

    instructor = relationship("User", back_populates="instructed_batches")
    enrollments = relationship("Enrollment", back_populates="batch")
    reports = relationship("Report", back_populates="batch")

    __table_args__ = (
        CheckConstraint("status IN ('active', 'upcoming', 'completed')", name="ck_batches_status"),
    )
