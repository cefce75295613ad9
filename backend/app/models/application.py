from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base

APPLICATION_STATUSES = ["pending", "reviewing", "rejected", "interview", "hired"]


class Application(Base):
    """
    A candidate's application to a job.

    One application per (job, candidate) pair. This is checked by the
    create endpoint before insert, there is no unique index behind it.
    """

    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), index=True, nullable=False)
    candidate_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)

    resume = Column(Text, nullable=False)
    cover_letter = Column(Text, nullable=True)

    status = Column(String, default="pending")  # One of APPLICATION_STATUSES
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    job = relationship("Job", back_populates="applications")
    candidate = relationship("User", back_populates="applications")
