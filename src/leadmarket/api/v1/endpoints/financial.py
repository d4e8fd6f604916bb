"""
Transaction history and invoice endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Query

from leadmarket.api.v1.endpoints.credits import get_credit_service
from leadmarket.core.dependencies import get_user_session
from leadmarket.core.session import UserSession
from leadmarket.services.credit_service import CreditService
from leadmarket.utils.logging import get_logger
from leadmarket.schemas.credits import (
    CreditTransactionSchema,
    InvoiceListResponse,
    TransactionListResponse,
)

logger = get_logger(__name__)
router = APIRouter()


@router.get("/financial/transactions", response_model=TransactionListResponse)
async def get_transactions(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    session: UserSession = Depends(get_user_session),
    service: CreditService = Depends(get_credit_service),
):
    """Credit transactions of the caller, newest first."""
    try:
        transactions = service.list_transactions(session, skip=skip, limit=limit)
        return {
            "total": len(transactions),
            "transactions": [CreditTransactionSchema.model_validate(t) for t in transactions],
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error fetching transactions:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/financial/invoices", response_model=InvoiceListResponse)
async def get_invoices(
    session: UserSession = Depends(get_user_session),
    service: CreditService = Depends(get_credit_service),
):
    """Invoices held by the billing provider for the caller."""
    try:
        invoices = await service.list_invoices(session)
        return {"invoices": invoices}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error fetching invoices:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))
