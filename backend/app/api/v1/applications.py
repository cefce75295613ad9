"""
Application API endpoints.

Candidates apply to jobs and track their applications; admins review the
applications made to jobs they posted and move them through the pipeline.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import AliasChoices, BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from app.api.v1.auth import get_current_admin, get_current_user
from app.api.v1.jobs import JobResponse, UserContact
from app.db.session import get_db
from app.models import APPLICATION_STATUSES, Application, Job, User

logger = logging.getLogger("applications")

router = APIRouter()


# ============== Pydantic Schemas ==============


class ApplicationCreate(BaseModel):
    """Schema for applying to a job."""

    job_id: int = Field(validation_alias=AliasChoices("job_id", "jobId"))
    resume: str = Field(min_length=1)
    cover_letter: Optional[str] = Field(
        None, validation_alias=AliasChoices("cover_letter", "coverLetter")
    )


class StatusUpdateRequest(BaseModel):
    """Schema for changing an application's status."""

    status: str


class ApplicationResponse(BaseModel):
    """Schema for an application with its job and candidate populated."""

    id: int
    job_id: int
    candidate_id: int
    resume: str
    cover_letter: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

    job: Optional[JobResponse] = None
    candidate: Optional[UserContact] = None

    class Config:
        from_attributes = True


# ============== API Endpoints ==============


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def create_application(
    application_data: ApplicationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Apply to a job (Candidate only).

    A candidate can apply to a given job once. The check runs before the
    insert; there is no unique constraint backing it.
    """
    if current_user.role != "candidate":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only candidates can apply to jobs",
        )

    job = db.query(Job).filter(Job.id == application_data.job_id).first()
    if not job:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Job not found",
        )

    existing_application = (
        db.query(Application)
        .filter(
            Application.job_id == job.id,
            Application.candidate_id == current_user.id,
        )
        .first()
    )
    if existing_application:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You have already applied for this job",
        )

    application = Application(
        job_id=job.id,
        candidate_id=current_user.id,
        resume=application_data.resume,
        cover_letter=application_data.cover_letter,
        status="pending",
    )
    db.add(application)
    db.commit()
    db.refresh(application)

    logger.info(f"Candidate {current_user.id} applied to job {job.id} (application {application.id})")
    return application


@router.get("", response_model=list[ApplicationResponse])
async def list_applications(
    job: Optional[int] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    List applications visible to the caller, newest first.

    Admins see applications to the jobs they posted. Candidates see their
    own applications. Optional filters: job (job id) and status.
    """
    query = db.query(Application).options(
        joinedload(Application.job).joinedload(Job.posted_by),
        joinedload(Application.candidate),
    )

    if current_user.role == "admin":
        posted_job_ids = select(Job.id).where(Job.posted_by_id == current_user.id)
        query = query.filter(Application.job_id.in_(posted_job_ids))
    else:
        query = query.filter(Application.candidate_id == current_user.id)

    if job is not None:
        query = query.filter(Application.job_id == job)

    if status_filter:
        query = query.filter(Application.status == status_filter)

    return query.order_by(Application.created_at.desc(), Application.id.desc()).all()


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: int,
    request: StatusUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Update an application's status (Admin only).

    Valid statuses: 'pending', 'reviewing', 'rejected', 'interview', 'hired'.
    Any status may be set from any other. The caller must own the job.
    """
    if request.status not in APPLICATION_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid status",
        )

    application = (
        db.query(Application)
        .options(joinedload(Application.job))
        .filter(Application.id == application_id)
        .first()
    )
    if not application:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Application not found",
        )

    if application.job is None or application.job.posted_by_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to update this application",
        )

    previous_status = application.status
    application.status = request.status
    db.commit()
    db.refresh(application)

    logger.info(
        f"Admin {current_user.id} moved application {application_id} "
        f"from {previous_status} to {request.status}"
    )
    return application
