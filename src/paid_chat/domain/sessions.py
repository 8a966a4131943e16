"""Domain models for paid chat sessions."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class IssuerState(StrEnum):
    """Lifecycle of a checkout transaction turning into a session."""

    AWAITING_PAYMENT = "awaiting_payment"
    VERIFYING = "verifying"
    ISSUED = "issued"
    REJECTED = "rejected"


class RejectionReason(StrEnum):
    """Why a session was not issued, valued by its redirect error code."""

    INVALID_SESSION = "invalid_session"
    PAYMENT_NOT_COMPLETED = "payment_failed"
    CORRELATION_MISMATCH = "invalid_token"
    VERIFICATION_FAILED = "verification_failed"


@dataclass(frozen=True)
class SessionClaims:
    """Signed claim set carried by the session credential."""

    correlation_id: str
    paid: bool
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class IssuedSession:
    """A freshly minted credential and the claims it carries."""

    token: str
    claims: SessionClaims


@dataclass(frozen=True)
class SessionDecision:
    """Outcome of verifying a presented credential."""

    valid: bool
    reason: str | None = None
    claims: SessionClaims | None = None
