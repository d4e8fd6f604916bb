"""
Credit balance and top-up checkout endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from leadmarket.core.dependencies import get_db, get_user_session
from leadmarket.core.session import UserSession
from leadmarket.services.credit_service import CreditService
from leadmarket.utils.logging import get_logger
from leadmarket.schemas.credits import (
    BalanceResponse,
    CheckoutRequest,
    CheckoutResponse,
    CreditPackage,
)

logger = get_logger(__name__)
router = APIRouter()


def get_credit_service(db: Session = Depends(get_db)) -> CreditService:
    return CreditService(db)


@router.get("/credits/balance", response_model=BalanceResponse)
async def get_balance(
    session: UserSession = Depends(get_user_session),
    service: CreditService = Depends(get_credit_service),
):
    """Current credit balance of the caller."""
    try:
        balance = service.get_balance(session.user_id)
        return {
            "user_id": session.user_id,
            "credits": balance,
            "low_balance": service.is_low_balance(balance),
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error fetching balance:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/credits/packages", response_model=List[CreditPackage])
async def get_packages(service: CreditService = Depends(get_credit_service)):
    """Credit packages available for purchase."""
    return [package.model_dump() for package in service.list_packages()]


@router.post("/credits/checkout", response_model=CheckoutResponse)
async def start_checkout(
    request: CheckoutRequest,
    session: UserSession = Depends(get_user_session),
    service: CreditService = Depends(get_credit_service),
):
    """
    Start an external checkout for a credit package and return the payment page URL.
    The balance is credited by the billing provider once payment completes.
    """
    try:
        url = await service.start_checkout(session, request.package_id)
        return {"package_id": request.package_id, "url": url}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error starting checkout:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))
