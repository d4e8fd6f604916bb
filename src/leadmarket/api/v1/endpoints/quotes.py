"""
Public quote request endpoint (lead intake form)
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from leadmarket.core.dependencies import get_db
from leadmarket.services.lead_service import LeadService
from leadmarket.utils.logging import get_logger
from leadmarket.schemas.leads import LeadCreate, QuoteReceipt

logger = get_logger(__name__)
router = APIRouter()


@router.post("/quotes", response_model=QuoteReceipt, status_code=201)
async def request_quote(
    quote: LeadCreate,
    db: Session = Depends(get_db),
):
    """
    Submit a quote request. No sign-in is needed; the request becomes a
    pending, unpublished lead that administrators review before publishing.
    """
    try:
        lead = LeadService(db).create_lead(quote.model_dump())
        return lead
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error submitting quote request:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))
