"""
Authentication API endpoints.

Handles candidate and admin registration/login with JWT token generation,
plus the dependencies that guard every protected route.
"""

import logging
import re
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import (
    create_user_token,
    get_password_hash,
    get_token_subject,
    verify_password,
)
from app.db.session import get_db
from app.models import User

logger = logging.getLogger("auth")

router = APIRouter()

# Bearer scheme; missing credentials are reported as 401 by get_current_user
bearer_scheme = HTTPBearer(auto_error=False)

EMAIL_PATTERN = r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$"


# ============== Pydantic Schemas ==============


class UserRegister(BaseModel):
    """Schema for user registration."""

    name: str = Field(min_length=1)
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate email format."""
        if not re.match(EMAIL_PATTERN, v):
            raise ValueError("Invalid email format")
        return v.lower()


class UserLogin(BaseModel):
    """Schema for login credentials."""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserResponse(BaseModel):
    """Schema for user response (without password)."""

    id: int
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    """Schema for JWT token response."""

    access_token: str
    token_type: str = "bearer"
    token: str  # Same value as access_token, read by the SPA


# ============== Helper Functions ==============


def get_user_by_email(db: Session, email: str, role: Optional[str] = None) -> Optional[User]:
    """Get a user by email address, optionally restricted to one role."""
    query = db.query(User).filter(User.email == email)
    if role is not None:
        query = query.filter(User.role == role)
    return query.first()


def authenticate_user(db: Session, email: str, password: str, role: str) -> Optional[User]:
    """Authenticate a user of the given role by email and password."""
    user = get_user_by_email(db, email, role=role)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def create_user(db: Session, user_data: UserRegister, role: str) -> User:
    """Register a user with a fixed role and return it."""
    if get_user_by_email(db, user_data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists",
        )

    new_user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        role=role,
    )
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists",
        )
    db.refresh(new_user)

    logger.info(f"Registered {role} user {new_user.id}")
    return new_user


def issue_token(user: User) -> Token:
    token = create_user_token(user)
    return Token(access_token=token, token=token)


def login_user(db: Session, credentials: UserLogin, role: str) -> Token:
    user = authenticate_user(db, credentials.email, credentials.password, role)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid credentials",
        )

    logger.info(f"User {user.id} logged in as {role}")
    return issue_token(user)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency to get the current authenticated user from the bearer token.

    Raises HTTPException 401 if the token is missing, invalid, expired,
    or refers to a user that no longer exists.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Please authenticate",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None or credentials.scheme.lower() != "bearer":
        raise credentials_exception

    user_id = get_token_subject(credentials.credentials)
    if user_id is None:
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise credentials_exception

    return user


async def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    """Dependency that only lets admin users through."""
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: Admin rights required",
        )
    return current_user


# ============== API Endpoints ==============


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """
    Register a new candidate.

    The role is always 'candidate'; admins register through /admin/register.
    Returns a token so the client is signed in right away.
    """
    user = create_user(db, user_data, role="candidate")
    return issue_token(user)


@router.post("/admin/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register_admin(user_data: UserRegister, db: Session = Depends(get_db)):
    """Register a new admin."""
    user = create_user(db, user_data, role="admin")
    return issue_token(user)


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """
    Login as a candidate and get a JWT access token.

    Admin accounts are not matched here, they must use /admin/login.
    """
    return login_user(db, credentials, role="candidate")


@router.post("/admin/login", response_model=Token)
async def login_admin(credentials: UserLogin, db: Session = Depends(get_db)):
    """Login as an admin and get a JWT access token."""
    return login_user(db, credentials, role="admin")


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """
    Get current authenticated user profile.

    Requires valid JWT token in Authorization header.
    """
    return current_user
