"""
Job API endpoints.

Public job search and detail views, plus admin-only posting, editing and
removal of the admin's own jobs.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, ValidationError, field_validator
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from app.api.v1.auth import get_current_admin
from app.db.session import get_db
from app.models import Application, Job, JOB_TYPES, User

logger = logging.getLogger("jobs")

router = APIRouter()

ALLOWED_JOB_UPDATES = [
    "title",
    "company",
    "location",
    "description",
    "requirements",
    "salary",
    "type",
    "category",
    "deadline",
]


# ============== Pydantic Schemas ==============


class UserRef(BaseModel):
    """Populated user reference (name only)."""

    id: int
    name: str

    class Config:
        from_attributes = True


class UserContact(UserRef):
    """Populated user reference with contact email."""

    email: str


def _check_job_type(v: Optional[str]) -> Optional[str]:
    if v is not None and v not in JOB_TYPES:
        raise ValueError(f"type must be one of: {JOB_TYPES}")
    return v


class JobCreate(BaseModel):
    """Schema for posting a job."""

    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    location: str = Field(min_length=1)
    description: str = Field(min_length=1)
    requirements: list[str] = []
    salary: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    deadline: Optional[datetime] = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: Optional[str]) -> Optional[str]:
        return _check_job_type(v)

    @field_validator("requirements", mode="before")
    @classmethod
    def default_requirements(cls, v: Any) -> Any:
        return [] if v is None else v


class JobUpdate(BaseModel):
    """Schema for a partial job update. Only allow-listed keys are accepted."""

    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[list[str]] = None
    salary: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    deadline: Optional[datetime] = None

    @field_validator("title", "company", "location", "description")
    @classmethod
    def required_not_null(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            raise ValueError("field cannot be empty")
        return v

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: Optional[str]) -> Optional[str]:
        return _check_job_type(v)

    @field_validator("requirements", mode="before")
    @classmethod
    def default_requirements(cls, v: Any) -> Any:
        return [] if v is None else v

    class Config:
        extra = "forbid"


class JobResponse(BaseModel):
    """Schema for a job in listings."""

    id: int
    title: str
    company: str
    location: str
    description: str
    requirements: list[str] = []
    salary: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    posted_by_id: int
    posted_by: Optional[UserRef] = None
    deadline: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @field_validator("requirements", mode="before")
    @classmethod
    def default_requirements(cls, v: Any) -> Any:
        return [] if v is None else v

    class Config:
        from_attributes = True


class JobDetailResponse(JobResponse):
    """Schema for a single job, with the poster's contact email."""

    posted_by: Optional[UserContact] = None


class MessageResponse(BaseModel):
    message: str


# ============== Helper Functions ==============


def get_owned_job(db: Session, job_id: int, owner: User) -> Job:
    """Fetch a job posted by `owner`, or 404 if it does not exist or is not theirs."""
    job = (
        db.query(Job)
        .filter(Job.id == job_id, Job.posted_by_id == owner.id)
        .first()
    )
    if not job:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Job not found",
        )
    return job


# ============== API Endpoints ==============


@router.get("", response_model=list[JobResponse])
async def list_jobs(
    q: Optional[str] = None,
    location: Optional[str] = None,
    category: Optional[str] = None,
    job_type: Optional[str] = Query(None, alias="type"),
    posted_by: Optional[int] = None,
    posted_by_camel: Optional[int] = Query(None, alias="postedBy"),
    sort: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """
    Search jobs.

    - q: case-insensitive match on title, company or description
    - location: case-insensitive match on location
    - category / type / posted_by (or postedBy): exact match
    - sort: 'newest' or 'oldest' by creation time
    """
    query = db.query(Job).options(joinedload(Job.posted_by))

    if q:
        query = query.filter(
            or_(
                Job.title.icontains(q, autoescape=True),
                Job.company.icontains(q, autoescape=True),
                Job.description.icontains(q, autoescape=True),
            )
        )

    if location:
        query = query.filter(Job.location.icontains(location, autoescape=True))

    if category:
        query = query.filter(Job.category == category)

    if job_type:
        query = query.filter(Job.type == job_type)

    if posted_by is None:
        posted_by = posted_by_camel
    if posted_by is not None:
        query = query.filter(Job.posted_by_id == posted_by)

    if sort == "newest":
        query = query.order_by(Job.created_at.desc(), Job.id.desc())
    elif sort == "oldest":
        query = query.order_by(Job.created_at.asc(), Job.id.asc())
    else:
        query = query.order_by(Job.id.asc())

    return query.all()


@router.get("/{job_id}", response_model=JobDetailResponse)
async def get_job(job_id: int, db: Session = Depends(get_db)):
    """Get a single job with its poster's name and email."""
    job = (
        db.query(Job)
        .options(joinedload(Job.posted_by))
        .filter(Job.id == job_id)
        .first()
    )
    if not job:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Job not found",
        )
    return job


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    job_data: JobCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """Post a new job (Admin only). The caller becomes the job's owner."""
    job = Job(**job_data.model_dump(), posted_by_id=current_user.id)
    db.add(job)
    db.commit()
    db.refresh(job)

    logger.info(f"Admin {current_user.id} posted job {job.id}")
    return job


@router.patch("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: int,
    updates: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Update fields of one of the caller's jobs (Admin only).

    Only keys in ALLOWED_JOB_UPDATES may be sent; any other key rejects
    the whole request.
    """
    if not all(key in ALLOWED_JOB_UPDATES for key in updates):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid updates",
        )

    job = get_owned_job(db, job_id, current_user)

    try:
        job_update = JobUpdate.model_validate(updates)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid updates",
        ) from e

    for field, value in job_update.model_dump(exclude_unset=True).items():
        setattr(job, field, value)

    db.commit()
    db.refresh(job)

    logger.info(f"Admin {current_user.id} updated job {job_id}: {sorted(updates)}")
    return job


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """Delete one of the caller's jobs and every application made to it (Admin only)."""
    job = get_owned_job(db, job_id, current_user)

    deleted = db.query(Application).filter(Application.job_id == job_id).delete(
        synchronize_session=False
    )
    db.delete(job)
    db.commit()

    logger.info(f"Admin {current_user.id} deleted job {job_id} and {deleted} application(s)")
    return MessageResponse(message="Job deleted successfully")
