"""
backend/services/job.py

Manages creation, update, soft deletion, and retrieval of repair Jobs.

get_valid_job_ids() is the batch lookup the CSV importer relies on: one
query returning the id of every job that can currently receive expenses.
"""

import logging
from typing import FrozenSet, List, Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session

from backend.database import utcnow
from backend.models.customer import Customer
from backend.models.job import Job, JobStatus
from backend.schemas.job import JobCreate, JobUpdate
from backend.services.customer import get_customer_by_id

logger = logging.getLogger(__name__)


def _active(db: Session):
    return db.query(Job).filter(Job.is_deleted.is_(False))


def get_all_jobs(
    db: Session,
    search: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Job]:
    """
    Return active jobs, newest date_received first.

    - search: case-insensitive match on equipment type/model, description
      or customer name
    - status: JobStatus name (any case); unknown values are ignored
    """
    query = _active(db).join(Customer, Job.customer_id == Customer.id)

    if search and search.strip():
        term = f"%{search.strip().lower()}%"
        query = query.filter(or_(
            Job.equipment_type.ilike(term),
            Job.equipment_model.ilike(term),
            Job.description.ilike(term),
            Customer.name.ilike(term),
        ))

    if status and status.strip():
        try:
            query = query.filter(Job.status == JobStatus.parse(status).value)
        except ValueError:
            logger.debug(f"Ignoring unknown status filter '{status}'")

    return query.order_by(Job.date_received.desc(), Job.id.desc()).all()


def get_job_by_id(job_id: int, db: Session) -> Optional[Job]:
    return _active(db).filter(Job.id == job_id).first()


def get_jobs_by_customer_id(customer_id: int, db: Session) -> List[Job]:
    return (
        _active(db)
        .filter(Job.customer_id == customer_id)
        .order_by(Job.date_received.desc(), Job.id.desc())
        .all()
    )


def get_valid_job_ids(db: Session) -> FrozenSet[int]:
    """
    Snapshot of every job id that may currently receive expenses.
    Callers must not keep it beyond the operation they fetched it for.
    """
    rows = db.query(Job.id).filter(Job.is_deleted.is_(False)).all()
    return frozenset(row.id for row in rows)


def _ensure_customer(customer_id: int, db: Session) -> None:
    if not get_customer_by_id(customer_id, db):
        raise HTTPException(
            status_code=400,
            detail=f"Customer with ID {customer_id} not found"
        )


def create_job(job_data: JobCreate, db: Session) -> Job:
    _ensure_customer(job_data.customer_id, db)

    new_job = Job(**job_data.model_dump())
    db.add(new_job)
    db.commit()
    db.refresh(new_job)
    return new_job


def update_job(job_id: int, job_data: JobUpdate, db: Session) -> Optional[Job]:
    """
    Replace a job's editable fields. Returns None if the job doesn't exist.
    """
    job = get_job_by_id(job_id, db)
    if not job:
        return None

    if job_data.customer_id != job.customer_id:
        _ensure_customer(job_data.customer_id, db)

    for field, value in job_data.model_dump().items():
        setattr(job, field, value)

    db.commit()
    db.refresh(job)
    return job


def delete_job(job_id: int, db: Session) -> bool:
    job = get_job_by_id(job_id, db)
    if not job:
        return False

    job.is_deleted = True
    job.deleted_at = utcnow()
    db.commit()
    return True
