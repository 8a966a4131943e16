"""Signed, expiring session credentials."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from paid_chat.domain.errors import (
    CredentialExpiredError,
    InvalidSignatureError,
    MalformedCredentialError,
)
from paid_chat.domain.sessions import IssuedSession, SessionClaims

ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(hours=24)


@dataclass
class CredentialCodec:
    """Encode and decode session claims as HS256 JWTs.

    The token carries ``correlationId`` and ``paid`` alongside the registered
    ``iat`` and ``exp`` claims. Decoding verifies the signature and expiry;
    every failure is mapped onto a ``CredentialError`` subclass so callers
    never see PyJWT exceptions.
    """

    secret: str
    ttl: timedelta = DEFAULT_TTL

    def issue(
        self,
        correlation_id: str,
        *,
        ttl: timedelta | None = None,
        now: datetime | None = None,
    ) -> IssuedSession:
        """Build paid claims starting at ``now`` and sign them."""
        issued_at = (now or datetime.now(tz=UTC)).replace(microsecond=0)
        claims = SessionClaims(
            correlation_id=correlation_id,
            paid=True,
            issued_at=issued_at,
            expires_at=issued_at + (ttl if ttl is not None else self.ttl),
        )
        return IssuedSession(token=self.encode(claims), claims=claims)

    def encode(self, claims: SessionClaims) -> str:
        """Return a signed token for the given claims."""
        payload = {
            "correlationId": claims.correlation_id,
            "paid": claims.paid,
            "iat": int(claims.issued_at.timestamp()),
            "exp": int(claims.expires_at.timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def decode(self, token: str) -> SessionClaims:
        """Verify a token and return its claims."""
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise CredentialExpiredError("Session credential expired") from exc
        except jwt.InvalidSignatureError as exc:
            raise InvalidSignatureError("Session credential signature mismatch") from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedCredentialError(str(exc)) from exc

        correlation_id = payload.get("correlationId")
        paid = payload.get("paid")
        if not isinstance(correlation_id, str) or not isinstance(paid, bool):
            raise MalformedCredentialError("Session credential is missing claims")
        return SessionClaims(
            correlation_id=correlation_id,
            paid=paid,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
        )
