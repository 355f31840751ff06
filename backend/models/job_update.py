"""
backend/models/job_update.py

Free-text progress notes attached to a Job ("waiting on carburetor kit",
"customer approved estimate"). Append-only apart from deletion.
"""

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from backend.database import Base, UTCDateTime, utcnow


class JobUpdate(Base):
    __tablename__ = "job_updates"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    update_text = Column(String(4000), nullable=False)
    created_at = Column(UTCDateTime, default=utcnow, nullable=False)

    job = relationship("Job", back_populates="updates")

    def __repr__(self):
        return f"<JobUpdate(id={self.id}, job_id={self.job_id})>"
