"""Stripe Checkout client adapter."""

from dataclasses import dataclass

import stripe

from paid_chat.domain.checkout import (
    CheckoutTransaction,
    HostedCheckout,
    PaymentStatus,
)
from paid_chat.domain.errors import GatewayUnavailableError, TransactionNotFoundError
from paid_chat.services.payments import CheckoutClient


@dataclass
class StripeCheckoutClient(CheckoutClient):
    """Checkout client backed by Stripe's async API."""

    client: stripe.StripeClient
    http_client: stripe.HTTPXClient | None = None

    @classmethod
    def create(cls, api_key: str, timeout: float) -> "StripeCheckoutClient":
        """Create a Stripe client on an httpx transport without retries."""
        http_client = stripe.HTTPXClient(timeout=timeout)
        client = stripe.StripeClient(
            api_key,
            http_client=http_client,
            max_network_retries=0,
        )
        return cls(client=client, http_client=http_client)

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
        """Create a payment-mode Checkout Session with a single line item."""
        params: dict[str, object] = {
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": currency,
                        "product_data": {
                            "name": product_name,
                            "description": product_description,
                        },
                        "unit_amount": unit_amount_cents,
                    },
                    "quantity": 1,
                }
            ],
            "mode": "payment",
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata,
        }
        try:
            session = await self.client.v1.checkout.sessions.create_async(params)
        except stripe.StripeError as exc:
            raise GatewayUnavailableError("Stripe checkout creation failed") from exc
        if not session.url:
            raise GatewayUnavailableError("Stripe returned a session without a URL")
        return HostedCheckout(id=session.id, url=session.url)

    async def retrieve_checkout_session(
        self, transaction_id: str
    ) -> CheckoutTransaction:
        """Retrieve a Checkout Session and map it onto a transaction."""
        try:
            session = await self.client.v1.checkout.sessions.retrieve_async(
                transaction_id
            )
        except stripe.InvalidRequestError as exc:
            if exc.code == "resource_missing":
                raise TransactionNotFoundError(transaction_id) from exc
            raise GatewayUnavailableError("Stripe checkout lookup failed") from exc
        except stripe.StripeError as exc:
            raise GatewayUnavailableError("Stripe checkout lookup failed") from exc
        return CheckoutTransaction(
            id=session.id,
            payment_status=_map_payment_status(session.payment_status, session.status),
            metadata=_metadata_to_dict(session.metadata),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self.http_client is not None:
            await self.http_client.close_async()


def _map_payment_status(payment_status: str | None, status: str | None) -> PaymentStatus:
    """Collapse Stripe's session and payment status into a transaction state."""
    if payment_status == "paid":
        return PaymentStatus.PAID
    if status == "expired":
        return PaymentStatus.FAILED
    return PaymentStatus.PENDING


def _metadata_to_dict(metadata: stripe.StripeObject | None) -> dict[str, str]:
    """Flatten Stripe metadata; StripeObject is not a dict in current SDKs."""
    if metadata is None:
        return {}
    return {str(key): str(value) for key, value in metadata.to_dict().items()}
