from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base

JOB_TYPES = ["Full-time", "Part-time", "Contract", "Internship"]


class Job(Base):
    """Job posting owned by the admin who created it."""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    company = Column(String, nullable=False)
    location = Column(String, nullable=False)
    description = Column(Text, nullable=False)

    # Format: ["3+ years Python", "SQL"]
    requirements = Column(JSON, default=list)

    salary = Column(String)  # Free text, e.g. "$80k - $100k"
    type = Column(String)  # One of JOB_TYPES
    category = Column(String, index=True)

    posted_by_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    deadline = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    posted_by = relationship("User", back_populates="jobs")
    applications = relationship("Application", back_populates="job")
