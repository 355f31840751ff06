"""
backend/routers/job_update.py

Progress notes for a job: /api/jobs/{job_id}/updates.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.schemas.job_update import JobUpdateCreate, JobUpdateRead
from backend.services import job_update as job_update_service

router = APIRouter(tags=["job updates"])


@router.get("/", response_model=List[JobUpdateRead])
def list_updates(job_id: int, db: Session = Depends(get_db)):
    return job_update_service.get_updates_for_job(job_id, db)


@router.get("/{update_id}", response_model=JobUpdateRead)
def get_update(job_id: int, update_id: int, db: Session = Depends(get_db)):
    job_update = job_update_service.get_update_by_id(job_id, update_id, db)
    if not job_update:
        raise HTTPException(status_code=404, detail="Job update not found.")
    return job_update


@router.post("/", response_model=JobUpdateRead, status_code=201)
def create_update(job_id: int, update: JobUpdateCreate, db: Session = Depends(get_db)):
    return job_update_service.create_update(job_id, update, db)


@router.delete("/{update_id}", status_code=204)
def delete_update(job_id: int, update_id: int, db: Session = Depends(get_db)):
    if not job_update_service.delete_update(job_id, update_id, db):
        raise HTTPException(status_code=404, detail="Job update not found.")
    return
