"""
backend/services/job_update.py

Progress notes on a job: list (newest first), fetch, add, delete.
"""

from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from backend.models.job_update import JobUpdate
from backend.schemas.job_update import JobUpdateCreate
from backend.services.job import get_job_by_id


def get_updates_for_job(job_id: int, db: Session) -> List[JobUpdate]:
    return (
        db.query(JobUpdate)
        .filter(JobUpdate.job_id == job_id)
        .order_by(JobUpdate.created_at.desc(), JobUpdate.id.desc())
        .all()
    )


def get_update_by_id(job_id: int, update_id: int, db: Session) -> Optional[JobUpdate]:
    return (
        db.query(JobUpdate)
        .filter(JobUpdate.id == update_id, JobUpdate.job_id == job_id)
        .first()
    )


def create_update(job_id: int, update_data: JobUpdateCreate, db: Session) -> JobUpdate:
    if not get_job_by_id(job_id, db):
        raise HTTPException(status_code=404, detail=f"Job with ID {job_id} not found")

    new_update = JobUpdate(job_id=job_id, update_text=update_data.update_text)
    db.add(new_update)
    db.commit()
    db.refresh(new_update)
    return new_update


def delete_update(job_id: int, update_id: int, db: Session) -> bool:
    job_update = get_update_by_id(job_id, update_id, db)
    if not job_update:
        return False

    db.delete(job_update)
    db.commit()
    return True
