"""
Hosted billing functions client (checkout sessions and invoices)
"""
import httpx
from typing import Any, Dict, List, Optional
from pydantic import ValidationError as PydanticValidationError
from leadmarket.schemas.credits import Invoice
from leadmarket.core.config import settings
from leadmarket.utils.exceptions import BillingAPIError
from leadmarket.utils.logging import get_logger

logger = get_logger(__name__)


class BillingClient:
    """
    Client for the billing provider's serverless functions.
    Each function is invoked with a JSON body via POST {base_url}/{function}.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = settings.billing.base_url
        self.api_key = settings.billing.api_key
        self.timeout = settings.billing.timeout
        self.transport = transport

    def _get_headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def invoke(self, function: str, body: Dict[str, Any]) -> Any:
        """
        Invoke a billing function.

        Args:
            function: Function name (e.g., "create-checkout-session")
            body: JSON request body

        Returns:
            Decoded JSON response, or None for an empty body

        Raises:
            BillingAPIError: If the request fails or returns an error status
        """
        url = f"{self.base_url.rstrip('/')}/{function.lstrip('/')}"

        try:
            logger.debug(f"[cyan]Invoking billing function:[/cyan] {url}")
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, json=body, headers=self._get_headers())
                logger.debug(f"[dim]Response status:[/dim] {response.status_code}")
                response.raise_for_status()
                if not response.content:
                    return None
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"[red]❌ Billing function {function} failed:[/red] "
                f"[yellow]{e.response.status_code}[/yellow] - {e.response.text}"
            )
            raise BillingAPIError(f"Billing function '{function}' returned {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"[red]❌ HTTP error invoking billing function {function}:[/red] {str(e)}")
            raise BillingAPIError(f"Billing function '{function}' is unreachable")
        except ValueError as e:
            logger.error(f"[red]❌ Invalid JSON from billing function {function}:[/red] {str(e)}")
            raise BillingAPIError(f"Billing function '{function}' returned an invalid response")

    async def create_checkout_session(self, package_id: str, user_id: str, credits: int) -> str:
        """
        Start an external checkout for a credit package.

        Returns:
            Redirect URL of the payment page
        """
        data = await self.invoke(
            settings.billing.checkout_function,
            {"packageId": package_id, "userId": user_id, "credits": credits},
        )
        url = data.get("url") if isinstance(data, dict) else None
        if not url:
            logger.error(f"[red]❌ Checkout session without redirect URL:[/red] {data}")
            raise BillingAPIError("Checkout session did not return a redirect URL")

        logger.info(f"[green]✅ Checkout session created:[/green] [cyan]{package_id}[/cyan] for {user_id}")
        return url

    async def get_invoices(self, user_id: str) -> List[Invoice]:
        """Invoices the billing provider holds for a user. An empty or null payload means none."""
        data = await self.invoke(settings.billing.invoices_function, {"user_id": user_id})
        if data is None:
            return []
        if not isinstance(data, list):
            raise BillingAPIError("Invoice listing returned an unexpected payload")
        try:
            return [Invoice.model_validate(item) for item in data]
        except PydanticValidationError as e:
            logger.error(f"[red]❌ Malformed invoice from billing provider:[/red] {e}")
            raise BillingAPIError("Invoice listing returned a malformed invoice")
