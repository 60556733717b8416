"""Auth router - current user, profile, onboarding and demo login."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db
from app.core.rate_limit import AUTH_LIMIT, limiter
from app.db.models import User
from app.schemas.auth import (
    DemoLoginRequest,
    DemoLoginResponse,
    OnboardingUpdate,
    ProfileUpdate,
    UserRead,
)
from app.services import demo_service, user_service

router = APIRouter()


@router.get("/me", response_model=UserRead)
def get_me(user: User = Depends(get_current_user)):
    """Current user. The record is provisioned on the first authenticated call."""
    return user


@router.post("/profile", response_model=UserRead)
def update_profile(
    data: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return user_service.update_profile(db, user, data)


@router.patch("/onboarding", response_model=UserRead)
def update_onboarding(
    data: OnboardingUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Save onboarding wizard progress.

    Only the onboarding fields are accepted; any other key (e.g. role) is a 400.
    """
    return user_service.update_onboarding(db, user, data)


@router.post("/demo-login", response_model=DemoLoginResponse)
@limiter.limit(AUTH_LIMIT)
def demo_login(
    request: Request,
    data: DemoLoginRequest,
    db: Session = Depends(get_db),
):
    """Sign in as one of the fixed demo identities (public, evaluation only)."""
    token, user = demo_service.demo_login(db, data.email)
    return DemoLoginResponse(token=token, user=UserRead.model_validate(user))
