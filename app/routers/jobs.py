# app/routers/jobs.py
"""
Job Ledger endpoints. Parts travel embedded in the job payload;
PUT reconciles the stored parts against the submitted list.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.common import MessageOut, error_responses
from app.schemas.job import JobCreate, JobCreatedOut, JobOut, JobUpdate
from app.services import job_service

router = APIRouter()


@router.post("/jobs", response_model=JobCreatedOut, status_code=status.HTTP_201_CREATED,
             summary="Create a job with its parts", responses=error_responses(422, 500))
def create_job(body: JobCreate, db: Session = Depends(get_db)):
    job_id = job_service.create_job(db, body)
    return {"message": "Job created successfully", "jobId": job_id}


@router.get("/jobs/{vehicle_id}", response_model=list[JobOut], summary="List a vehicle's jobs with parts",
            responses=error_responses(500))
def list_jobs(vehicle_id: int, db: Session = Depends(get_db)):
    return job_service.list_jobs_by_vehicle(db, vehicle_id)


@router.put("/jobs/{job_id}", response_model=MessageOut, summary="Update a job and reconcile its parts",
            responses=error_responses(404, 422, 500))
def update_job(job_id: int, body: JobUpdate, db: Session = Depends(get_db)):
    """
    Parts with an id are updated, parts without one are added,
    and stored parts missing from the list are removed.
    """
    job_service.update_job(db, job_id, body)
    return {"message": "Job and parts updated successfully"}


@router.delete("/jobs/{job_id}", response_model=MessageOut, summary="Delete a job and its parts",
               responses=error_responses(404, 500))
def delete_job(job_id: int, db: Session = Depends(get_db)):
    job_service.delete_job(db, job_id)
    return {"message": "Job deleted successfully"}
