"""Integrations router - maps token, Smokeball, PEXA and adapter status."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db, require_roles
from app.core.errors import ValidationError
from app.core.matter_access import MATTER_EDITOR_ROLES, check_matter_access
from app.db.enums import Role
from app.db.models import User
from app.schemas.integrations import MapsTokenRead, ServiceStatusRead
from app.schemas.matter import MatterRead
from app.services import (
    apple_maps_service,
    didit_service,
    matter_service,
    pexa_service,
    resend_email_service,
    smokeball_service,
    twilio_sms_service,
)

router = APIRouter()

require_practice_roles = require_roles([Role.CONVEYANCER, Role.ADMIN])


@router.get("/maps/token", response_model=MapsTokenRead)
def get_maps_token(user: User = Depends(get_current_user)):
    token, expires_at = apple_maps_service.get_token()
    return MapsTokenRead(token=token, expires_at=expires_at)


@router.get("/smokeball/matters")
async def list_smokeball_matters(user: User = Depends(require_practice_roles)):
    return await smokeball_service.list_matters()


@router.post("/smokeball/sync/{matter_id}", response_model=MatterRead)
async def sync_smokeball_matter(
    matter_id: UUID,
    user: User = Depends(require_practice_roles),
    db: Session = Depends(get_db),
):
    """Pull key dates from the linked Smokeball matter."""
    matter = check_matter_access(matter_service.get_matter(db, matter_id), user)
    if not matter.smokeball_matter_id:
        raise ValidationError("Matter is not linked to Smokeball", field="smokeballMatterId")
    remote = await smokeball_service.get_matter(matter.smokeball_matter_id)
    matter = matter_service.apply_smokeball_sync(db, user, matter, remote)
    return matter_service.to_matter_read(matter)


@router.get("/pexa/feed")
async def get_pexa_feed(
    workspace_id: str | None = Query(None, alias="workspaceId", max_length=100),
    user: User = Depends(require_roles(list(MATTER_EDITOR_ROLES))),
):
    return await pexa_service.get_settlement_feed(workspace_id)


@router.get("/pexa/workspaces/{workspace_id}")
async def get_pexa_workspace(
    workspace_id: str,
    user: User = Depends(require_roles(list(MATTER_EDITOR_ROLES))),
):
    return await pexa_service.get_workspace(workspace_id)


@router.get("/services/status", response_model=ServiceStatusRead)
def get_service_status(user: User = Depends(get_current_user)):
    """Which external adapters have credentials configured."""
    return ServiceStatusRead(
        email=resend_email_service.is_configured(),
        sms=twilio_sms_service.is_configured(),
        verification=didit_service.is_configured(),
        maps=apple_maps_service.is_configured(),
        smokeball=smokeball_service.is_configured(),
        pexa=pexa_service.is_configured(),
    )
