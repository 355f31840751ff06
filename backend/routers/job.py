"""
backend/routers/job.py

FastAPI router for repair Job endpoints: list/search, per-customer listing,
and create/update/soft-delete. Expenses and progress notes for a job live
in their own routers nested under /api/jobs/{job_id}/.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.schemas.job import JobCreate, JobRead, JobUpdate
from backend.services import job as job_service

router = APIRouter(tags=["jobs"])


@router.get("/", response_model=List[JobRead])
def list_jobs(
    search: Optional[str] = None,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """
    List active jobs, newest first.

    - search: matches equipment type/model, description or customer name
    - status: one of Quote, InProgress, Completed, Invoiced, Paid
    """
    return job_service.get_all_jobs(db, search=search, status=status)


@router.get("/customer/{customer_id}", response_model=List[JobRead])
def list_jobs_for_customer(customer_id: int, db: Session = Depends(get_db)):
    return job_service.get_jobs_by_customer_id(customer_id, db)


@router.get("/{job_id}", response_model=JobRead)
def get_job(job_id: int, db: Session = Depends(get_db)):
    job = job_service.get_job_by_id(job_id, db)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found.")
    return job


@router.post("/", response_model=JobRead, status_code=201)
def create_job(job: JobCreate, db: Session = Depends(get_db)):
    """
    Create a job for an existing customer (400 if the customer is unknown).
    """
    return job_service.create_job(job, db)


@router.put("/{job_id}", response_model=JobRead)
def update_job(job_id: int, job: JobUpdate, db: Session = Depends(get_db)):
    updated = job_service.update_job(job_id, job, db)
    if not updated:
        raise HTTPException(status_code=404, detail="Job not found.")
    return updated


@router.delete("/{job_id}", status_code=204)
def delete_job(job_id: int, db: Session = Depends(get_db)):
    if not job_service.delete_job(job_id, db):
        raise HTTPException(status_code=404, detail="Job not found.")
    return
