"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import timedelta

import pytest

from paid_chat.config import Settings
from paid_chat.containers import AppContainer
from paid_chat.domain.checkout import (
    CheckoutTransaction,
    HostedCheckout,
    PaymentStatus,
)
from paid_chat.domain.errors import (
    GatewayUnavailableError,
    InferenceUnavailableError,
    ModerationUnavailableError,
    TransactionNotFoundError,
)
from paid_chat.services.conversation import (
    PERSONA_INSTRUCTION,
    CompletionClient,
    ConversationRelay,
)
from paid_chat.services.credentials import CredentialCodec
from paid_chat.services.moderation import ContentGate, ModerationClient
from paid_chat.services.payments import CheckoutClient, PaymentService
from paid_chat.services.sessions import SessionIssuer, SessionVerifier

SESSION_SECRET = "test-session-secret-0123456789abcdef"


@dataclass
class FakeCheckoutClient(CheckoutClient):
    """In-memory stand-in for the payment processor."""

    transactions: dict[str, CheckoutTransaction] = field(default_factory=dict)
    created: list[dict[str, object]] = field(default_factory=list)
    fail_create: bool = False
    fail_retrieve: bool = False

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
        if self.fail_create:
            raise GatewayUnavailableError("processor down")
        transaction_id = f"cs_test_{len(self.created) + 1}"
        self.created.append(
            {
                "product_name": product_name,
                "product_description": product_description,
                "unit_amount_cents": unit_amount_cents,
                "currency": currency,
                "success_url": success_url,
                "cancel_url": cancel_url,
                "metadata": metadata,
            }
        )
        self.transactions[transaction_id] = CheckoutTransaction(
            id=transaction_id,
            payment_status=PaymentStatus.PENDING,
            metadata=dict(metadata),
        )
        return HostedCheckout(
            id=transaction_id,
            url=f"https://checkout.stripe.test/pay/{transaction_id}",
        )

    async def retrieve_checkout_session(
        self, transaction_id: str
    ) -> CheckoutTransaction:
        if self.fail_retrieve:
            raise GatewayUnavailableError("processor down")
        transaction = self.transactions.get(transaction_id)
        if transaction is None:
            raise TransactionNotFoundError(transaction_id)
        return transaction

    def add_transaction(
        self,
        transaction_id: str,
        status: PaymentStatus,
        correlation_id: str | None,
    ) -> CheckoutTransaction:
        metadata = {"correlation_id": correlation_id} if correlation_id else {}
        transaction = CheckoutTransaction(
            id=transaction_id, payment_status=status, metadata=metadata
        )
        self.transactions[transaction_id] = transaction
        return transaction

    def mark(self, transaction_id: str, status: PaymentStatus) -> None:
        current = self.transactions[transaction_id]
        self.transactions[transaction_id] = CheckoutTransaction(
            id=current.id, payment_status=status, metadata=current.metadata
        )


@dataclass
class FakeModerationClient(ModerationClient):
    """Moderation client with a fixed answer."""

    flagged: bool = False
    unavailable: bool = False
    inputs: list[str] = field(default_factory=list)

    async def is_flagged(self, text: str) -> bool:
        self.inputs.append(text)
        if self.unavailable:
            raise ModerationUnavailableError("moderation down")
        return self.flagged


@dataclass
class FakeCompletionClient(CompletionClient):
    """Completion client returning a canned reply."""

    reply: str | None = "Hey! So glad you're here."
    unavailable: bool = False
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        self.calls.append(
            {
                "model": model,
                "messages": messages,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )
        if self.unavailable:
            raise InferenceUnavailableError("inference down")
        return self.reply


@pytest.fixture
def settings() -> Settings:
    return Settings(
        stripe_secret_key="sk_test_123",
        openai_api_key="openai-key",
        xai_api_key="xai-key",
        session_secret=SESSION_SECRET,
        base_url="https://chat.example.com/",
    )


@pytest.fixture
def codec() -> CredentialCodec:
    return CredentialCodec(secret=SESSION_SECRET, ttl=timedelta(hours=24))


@pytest.fixture
def checkout_client() -> FakeCheckoutClient:
    return FakeCheckoutClient()


@pytest.fixture
def moderation_client() -> FakeModerationClient:
    return FakeModerationClient()


@pytest.fixture
def completion_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def payment_service(
    settings: Settings, checkout_client: FakeCheckoutClient
) -> PaymentService:
    return PaymentService(
        client=checkout_client,
        base_url=settings.base_url,
        product_name=settings.checkout_product_name,
        currency=settings.checkout_currency,
    )


@pytest.fixture
def container(
    settings: Settings,
    codec: CredentialCodec,
    payment_service: PaymentService,
    moderation_client: FakeModerationClient,
    completion_client: FakeCompletionClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        payment_service=payment_service,
        credential_codec=codec,
        session_issuer=SessionIssuer(payment_service=payment_service, codec=codec),
        session_verifier=SessionVerifier(codec),
        content_gate=ContentGate(
            client=moderation_client, fail_open=settings.moderation_fail_open
        ),
        conversation_relay=ConversationRelay(
            client=completion_client,
            persona=PERSONA_INSTRUCTION,
            model=settings.chat_model,
            max_tokens=settings.chat_max_tokens,
            temperature=settings.chat_temperature,
        ),
        close_resources=close_resources,
    )
