"""Error taxonomy shared across services and adapters."""

from paid_chat.domain.sessions import RejectionReason


class PaidChatError(Exception):
    """Base class for application errors."""


class MissingConfigurationError(PaidChatError):
    """Raised when required settings are absent or unusable."""


class GatewayUnavailableError(PaidChatError):
    """Raised when the payment processor call fails."""


class TransactionNotFoundError(PaidChatError):
    """Raised when the payment processor has no such checkout transaction."""


class CredentialError(PaidChatError):
    """Base class for session credential decode failures."""


class InvalidSignatureError(CredentialError):
    """Raised when the credential signature does not verify."""


class CredentialExpiredError(CredentialError):
    """Raised when the credential is past its expiry."""


class MalformedCredentialError(CredentialError):
    """Raised when the credential cannot be parsed into session claims."""


class ModerationUnavailableError(PaidChatError):
    """Raised when the moderation API call fails."""


class InferenceUnavailableError(PaidChatError):
    """Raised when the completion API fails or returns no reply."""


class SessionRejectedError(PaidChatError):
    """Raised when a checkout transaction cannot be turned into a session."""

    def __init__(self, reason: RejectionReason, detail: str | None = None) -> None:
        super().__init__(detail or reason.value)
        self.reason = reason
