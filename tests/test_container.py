"""Tests for container wiring."""

import asyncio

from paid_chat.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.session_issuer is not None
    assert container.content_gate.fail_open is True
    assert container.conversation_relay.model == "grok-3"
    asyncio.run(container.close_resources())
