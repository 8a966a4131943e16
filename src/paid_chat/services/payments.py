"""Checkout creation and payment status lookups."""

import logging
import secrets
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import urlencode

from paid_chat.domain.checkout import (
    CORRELATION_METADATA_KEY,
    CheckoutLink,
    CheckoutTransaction,
    HostedCheckout,
)

logger = logging.getLogger(__name__)

# Substituted by the payment processor when it redirects after payment.
TRANSACTION_ID_TEMPLATE = "{CHECKOUT_SESSION_ID}"


class CheckoutClient(Protocol):
    """Interface for the payment processor's hosted checkout."""

    async def create_checkout_session(  # noqa: PLR0913
        self,
        *,
        product_name: str,
        product_description: str,
        unit_amount_cents: int,
        currency: str,
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
    ) -> HostedCheckout:
        """Create a one-time payment page and return its id and URL."""

    async def retrieve_checkout_session(
        self, transaction_id: str
    ) -> CheckoutTransaction:
        """Fetch the current state of a checkout transaction."""


@dataclass
class PaymentService:
    """Creates checkouts bound to a fresh correlation id and reads them back."""

    client: CheckoutClient
    base_url: str
    product_name: str
    currency: str = "usd"

    async def create_checkout(
        self, product_description: str, unit_amount_cents: int
    ) -> CheckoutLink:
        """Start a hosted checkout for a single paid chat session."""
        correlation_id = new_correlation_id()
        hosted = await self.client.create_checkout_session(
            product_name=self.product_name,
            product_description=product_description,
            unit_amount_cents=unit_amount_cents,
            currency=self.currency,
            success_url=self.success_url(correlation_id),
            cancel_url=self.base_url,
            metadata={CORRELATION_METADATA_KEY: correlation_id},
        )
        logger.info("Checkout created", extra={"transaction_id": hosted.id})
        return CheckoutLink(
            transaction_id=hosted.id, url=hosted.url, correlation_id=correlation_id
        )

    async def retrieve_status(self, transaction_id: str) -> CheckoutTransaction:
        """Return the processor's view of a checkout transaction."""
        return await self.client.retrieve_checkout_session(transaction_id)

    def success_url(self, correlation_id: str) -> str:
        # The template must stay unescaped for the processor to substitute it.
        query = urlencode({"correlationId": correlation_id})
        return (
            f"{self.base_url}/checkout/callback"
            f"?transactionId={TRANSACTION_ID_TEMPLATE}&{query}"
        )


def new_correlation_id() -> str:
    """Return an unguessable id binding a checkout to its future session."""
    return secrets.token_urlsafe(24)
