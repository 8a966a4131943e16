"""Domain models for checkout transactions."""

from dataclasses import dataclass, field
from enum import StrEnum

CORRELATION_METADATA_KEY = "correlation_id"


class PaymentStatus(StrEnum):
    """Terminal or in-flight state of a checkout transaction."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


@dataclass(frozen=True)
class CheckoutTransaction:
    """A payment attempt as recorded by the payment processor."""

    id: str
    payment_status: PaymentStatus
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def correlation_id(self) -> str | None:
        return self.metadata.get(CORRELATION_METADATA_KEY)


@dataclass(frozen=True)
class HostedCheckout:
    """Hosted payment page created by the processor."""

    id: str
    url: str


@dataclass(frozen=True)
class CheckoutLink:
    """Everything the browser needs to start paying."""

    transaction_id: str
    url: str
    correlation_id: str
