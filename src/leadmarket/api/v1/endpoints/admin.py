"""
Administrator settings and role endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from leadmarket.core.dependencies import get_db, get_admin_session
from leadmarket.core.session import UserSession
from leadmarket.services.role_service import RoleService
from leadmarket.services.settings_service import SettingsService
from leadmarket.utils.logging import get_logger
from leadmarket.schemas.admin import LeadMatchingSettings, RoleCreate, RoleSchema

logger = get_logger(__name__)
router = APIRouter(prefix="/admin")


@router.get("/settings/lead-matching", response_model=LeadMatchingSettings)
async def get_lead_matching(
    session: UserSession = Depends(get_admin_session),
    db: Session = Depends(get_db),
):
    """Lead-matching configuration (defaults when never saved)."""
    try:
        return SettingsService(db).get_lead_matching()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error loading lead matching settings:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/settings/lead-matching", response_model=LeadMatchingSettings)
async def update_lead_matching(
    matching: LeadMatchingSettings,
    session: UserSession = Depends(get_admin_session),
    db: Session = Depends(get_db),
):
    """Save the lead-matching configuration."""
    try:
        return SettingsService(db).update_lead_matching(matching)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error updating lead matching settings:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/roles", response_model=List[RoleSchema])
async def get_roles(
    session: UserSession = Depends(get_admin_session),
    db: Session = Depends(get_db),
):
    return RoleService(db).list_roles()


@router.post("/roles", response_model=RoleSchema, status_code=201)
async def add_role(
    role: RoleCreate,
    session: UserSession = Depends(get_admin_session),
    db: Session = Depends(get_db),
):
    try:
        return RoleService(db).add_role(role.name)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error adding role:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/roles/{role_id}", status_code=204)
async def delete_role(
    role_id: str,
    session: UserSession = Depends(get_admin_session),
    db: Session = Depends(get_db),
):
    try:
        RoleService(db).delete_role(role_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error deleting role {role_id}:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))
