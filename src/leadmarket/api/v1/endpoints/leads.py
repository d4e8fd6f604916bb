"""
Leads API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional

from leadmarket.core.dependencies import get_db, get_user_session, get_admin_session
from leadmarket.core.session import UserSession
from leadmarket.services.lead_service import LeadService
from leadmarket.services.purchase_service import PurchaseService
from leadmarket.utils.logging import get_logger
from leadmarket.schemas.base import ErrorResponse
from leadmarket.schemas.leads import (
    CallStatusUpdate,
    LeadCreate,
    LeadDetail,
    LeadListResponse,
    LeadSummary,
    PublishRequest,
    PurchaseResponse,
    StatusUpdate,
)

logger = get_logger(__name__)
router = APIRouter()


@router.get("/leads", response_model=LeadListResponse)
async def get_leads(
    search: Optional[str] = Query(None, description="Matches company name or project description"),
    budget_range: Optional[str] = Query(None),
    timeline: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    session: UserSession = Depends(get_user_session),
    db: Session = Depends(get_db),
):
    """
    List leads, newest first. Marketers only see published leads.
    """
    try:
        service = LeadService(db)
        leads = service.list_leads(
            session,
            search=search,
            budget_range=budget_range,
            timeline=timeline,
            skip=skip,
            limit=limit,
        )
        return {
            "total": len(leads),
            "skip": skip,
            "limit": limit,
            "leads": [LeadSummary.model_validate(lead) for lead in leads],
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error fetching leads:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/leads", response_model=LeadDetail, status_code=201)
async def create_lead(
    lead_data: LeadCreate,
    session: UserSession = Depends(get_admin_session),
    db: Session = Depends(get_db),
):
    """Create a pending, unpublished lead."""
    try:
        service = LeadService(db)
        lead = service.create_lead(lead_data.model_dump())
        return service.lead_view(session, lead)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error creating lead:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/leads/purchased", response_model=LeadListResponse)
async def get_purchased_leads(
    session: UserSession = Depends(get_user_session),
    db: Session = Depends(get_db),
):
    """Leads the caller has bought."""
    try:
        service = LeadService(db)
        leads = service.list_purchased_leads(session)
        return {
            "total": len(leads),
            "skip": 0,
            "limit": len(leads),
            "leads": [LeadSummary.model_validate(lead) for lead in leads],
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error fetching purchased leads:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/leads/{lead_id}", response_model=LeadDetail)
async def get_lead(
    lead_id: str,
    session: UserSession = Depends(get_user_session),
    db: Session = Depends(get_db),
):
    """
    Get a lead. Contact details are included for administrators and for
    marketers who purchased it.
    """
    try:
        service = LeadService(db)
        lead = service.get_lead(session, lead_id)
        return service.lead_view(session, lead)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error fetching lead {lead_id}:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/leads/{lead_id}/publish", response_model=LeadDetail)
async def publish_lead(
    lead_id: str,
    request: PublishRequest,
    session: UserSession = Depends(get_admin_session),
    db: Session = Depends(get_db),
):
    """Publish a lead at a price in credits."""
    try:
        service = LeadService(db)
        lead = service.publish_lead(lead_id, request.price)
        return service.lead_view(session, lead)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error publishing lead {lead_id}:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/leads/{lead_id}/status", response_model=LeadDetail)
async def update_lead_status(
    lead_id: str,
    request: StatusUpdate,
    session: UserSession = Depends(get_admin_session),
    db: Session = Depends(get_db),
):
    """Approve or reject a published lead."""
    try:
        service = LeadService(db)
        lead = service.set_status(lead_id, request.status)
        return service.lead_view(session, lead)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error updating status of lead {lead_id}:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/leads/{lead_id}/call-status", response_model=LeadDetail)
async def update_call_status(
    lead_id: str,
    request: CallStatusUpdate,
    session: UserSession = Depends(get_admin_session),
    db: Session = Depends(get_db),
):
    """Record the outcome of calling the prospect."""
    try:
        service = LeadService(db)
        lead = service.set_call_status(lead_id, request.call_status)
        return service.lead_view(session, lead)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error updating call status of lead {lead_id}:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post(
    "/leads/{lead_id}/purchase",
    response_model=PurchaseResponse,
    responses={
        402: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def purchase_lead(
    lead_id: str,
    session: UserSession = Depends(get_user_session),
    db: Session = Depends(get_db),
):
    """
    Buy a lead with the caller's credits.

    Fails with 404 (unknown or unpublished lead), 409 (purchase limit reached
    or already purchased), 402 (insufficient credits) or 500 (store write failed).
    """
    try:
        service = PurchaseService(db)
        record = service.purchase_lead(session, lead_id)
        return {
            "lead_id": record.lead_id,
            "credits_remaining": record.credits_remaining,
            "transaction_id": record.transaction_id,
            "low_balance": record.low_balance,
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error purchasing lead {lead_id}:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))
