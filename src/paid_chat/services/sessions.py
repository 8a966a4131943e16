"""Session issuance after payment and credential verification."""

import hmac
import logging
from dataclasses import dataclass

from paid_chat.domain.checkout import CheckoutTransaction, PaymentStatus
from paid_chat.domain.errors import (
    CredentialError,
    CredentialExpiredError,
    GatewayUnavailableError,
    SessionRejectedError,
    TransactionNotFoundError,
)
from paid_chat.domain.sessions import (
    IssuedSession,
    IssuerState,
    RejectionReason,
    SessionDecision,
)
from paid_chat.services.credentials import CredentialCodec
from paid_chat.services.payments import PaymentService

logger = logging.getLogger(__name__)


@dataclass
class SessionIssuer:
    """Turn a verified checkout transaction into a session credential.

    Each call walks AWAITING_PAYMENT -> VERIFYING -> ISSUED, or ends in
    REJECTED with a ``RejectionReason``. Nothing is retried; a rejected
    user has to start a new checkout.
    """

    payment_service: PaymentService
    codec: CredentialCodec

    async def complete_session(
        self, transaction_id: str | None, presented_correlation_id: str | None
    ) -> IssuedSession:
        """Verify payment for a transaction and mint a credential for it."""
        if not transaction_id or not presented_correlation_id:
            raise _rejected(RejectionReason.INVALID_SESSION, transaction_id)

        _log_transition(transaction_id, IssuerState.VERIFYING)
        try:
            transaction = await self.payment_service.retrieve_status(transaction_id)
        except (TransactionNotFoundError, GatewayUnavailableError) as exc:
            logger.exception(
                "Checkout verification failed",
                extra={"transaction_id": transaction_id},
            )
            raise _rejected(
                RejectionReason.VERIFICATION_FAILED, transaction_id
            ) from exc

        if transaction.payment_status is not PaymentStatus.PAID:
            raise _rejected(
                RejectionReason.PAYMENT_NOT_COMPLETED,
                transaction_id,
                f"payment status is {transaction.payment_status.value}",
            )

        if not _correlation_matches(transaction, presented_correlation_id):
            raise _rejected(RejectionReason.CORRELATION_MISMATCH, transaction_id)

        issued = self.codec.issue(presented_correlation_id)
        _log_transition(transaction_id, IssuerState.ISSUED)
        return issued


def _log_transition(transaction_id: str, state: IssuerState) -> None:
    logger.info(
        "Checkout %s", state.value, extra={"transaction_id": transaction_id}
    )


def _rejected(
    reason: RejectionReason, transaction_id: str | None, detail: str | None = None
) -> SessionRejectedError:
    logger.warning(
        "Checkout %s: %s",
        IssuerState.REJECTED.value,
        reason.value,
        extra={"transaction_id": transaction_id},
    )
    return SessionRejectedError(reason, detail)


def _correlation_matches(transaction: CheckoutTransaction, presented: str) -> bool:
    stored = transaction.correlation_id
    if not stored:
        return False
    return hmac.compare_digest(stored.encode(), presented.encode())


@dataclass
class SessionVerifier:
    """Local admission check for the paid chat surface."""

    codec: CredentialCodec

    def check(self, token: str | None) -> SessionDecision:
        """Return whether the token is a valid paid session, with a reason."""
        if not token:
            return SessionDecision(valid=False, reason="no_token")
        try:
            claims = self.codec.decode(token)
        except CredentialExpiredError:
            return SessionDecision(valid=False, reason="expired")
        except CredentialError:
            return SessionDecision(valid=False, reason="invalid_token")
        if claims.paid is not True:
            return SessionDecision(valid=False, reason="not_paid", claims=claims)
        return SessionDecision(valid=True, claims=claims)

    def is_valid(self, token: str | None) -> bool:
        return self.check(token).valid
