"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from paid_chat.adapters.openai_chat_client import OpenAIChatClient
from paid_chat.adapters.openai_moderation_client import OpenAIModerationClient
from paid_chat.adapters.stripe_checkout_client import StripeCheckoutClient
from paid_chat.config import Settings, load_settings
from paid_chat.services.conversation import PERSONA_INSTRUCTION, ConversationRelay
from paid_chat.services.credentials import CredentialCodec
from paid_chat.services.moderation import ContentGate
from paid_chat.services.payments import PaymentService
from paid_chat.services.sessions import SessionIssuer, SessionVerifier


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    payment_service: PaymentService
    credential_codec: CredentialCodec
    session_issuer: SessionIssuer
    session_verifier: SessionVerifier
    content_gate: ContentGate
    conversation_relay: ConversationRelay
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or load_settings()
    checkout_client = StripeCheckoutClient.create(
        resolved_settings.stripe_secret_key,
        timeout=resolved_settings.stripe_timeout_seconds,
    )
    moderation_client = OpenAIModerationClient.create(
        api_key=resolved_settings.openai_api_key,
        model=resolved_settings.moderation_model,
        timeout=resolved_settings.openai_timeout_seconds,
    )
    chat_client = OpenAIChatClient.create(
        api_key=resolved_settings.xai_api_key,
        base_url=resolved_settings.xai_base_url,
        timeout=resolved_settings.openai_timeout_seconds,
    )
    payment_service = PaymentService(
        client=checkout_client,
        base_url=resolved_settings.base_url,
        product_name=resolved_settings.checkout_product_name,
        currency=resolved_settings.checkout_currency,
    )
    codec = CredentialCodec(
        secret=resolved_settings.session_secret,
        ttl=timedelta(hours=resolved_settings.session_ttl_hours),
    )
    content_gate = ContentGate(
        client=moderation_client,
        fail_open=resolved_settings.moderation_fail_open,
    )
    conversation_relay = ConversationRelay(
        client=chat_client,
        persona=PERSONA_INSTRUCTION,
        model=resolved_settings.chat_model,
        max_tokens=resolved_settings.chat_max_tokens,
        temperature=resolved_settings.chat_temperature,
    )

    async def close_resources() -> None:
        await checkout_client.close()
        await moderation_client.close()
        await chat_client.close()

    return AppContainer(
        settings=resolved_settings,
        payment_service=payment_service,
        credential_codec=codec,
        session_issuer=SessionIssuer(payment_service=payment_service, codec=codec),
        session_verifier=SessionVerifier(codec),
        content_gate=content_gate,
        conversation_relay=conversation_relay,
        close_resources=close_resources,
    )
