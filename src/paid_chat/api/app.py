"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from urllib.parse import urlencode

from fastapi import Cookie, Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse

from paid_chat.api.chat_models import ChatRequestError, parse_chat_messages
from paid_chat.app_logging import configure_logging
from paid_chat.containers import AppContainer
from paid_chat.domain.chat import ModerationVerdict
from paid_chat.domain.errors import (
    GatewayUnavailableError,
    InferenceUnavailableError,
    SessionRejectedError,
)
from paid_chat.domain.sessions import RejectionReason, SessionClaims
from paid_chat.services.conversation import FALLBACK_REPLY

SESSION_COOKIE = "session_token"


class UnauthorizedError(Exception):
    """Raised by the session dependency when no paid session is presented."""


def _get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_paid_session(
    session_token: str | None = Cookie(default=None),
    container: AppContainer = Depends(_get_container),
) -> SessionClaims:
    """Admit only requests carrying a valid, paid session credential."""
    decision = container.session_verifier.check(session_token)
    if not decision.valid or decision.claims is None:
        raise UnauthorizedError(decision.reason)
    return decision.claims


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(UnauthorizedError)
    async def unauthorized_handler(
        request: Request, exc: UnauthorizedError
    ) -> JSONResponse:
        return JSONResponse({"error": "unauthorized"}, status_code=401)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/checkout")
    async def create_checkout(request: Request) -> JSONResponse:
        """Create a hosted checkout and return its payment URL."""
        state_container: AppContainer = request.app.state.container
        settings = state_container.settings
        try:
            link = await state_container.payment_service.create_checkout(
                settings.checkout_product_description,
                settings.checkout_unit_amount_cents,
            )
        except GatewayUnavailableError:
            logger.exception("Checkout creation failed")
            return JSONResponse({"error": "checkout_unavailable"}, status_code=500)
        except Exception:
            logger.exception("Unexpected checkout creation failure")
            return JSONResponse({"error": "checkout_unavailable"}, status_code=500)
        return JSONResponse({"url": link.url})

    @app.get("/checkout/callback")
    async def checkout_callback(
        request: Request,
        transaction_id: str | None = Query(default=None, alias="transactionId"),
        correlation_id: str | None = Query(default=None, alias="correlationId"),
    ) -> RedirectResponse:
        """Verify a completed payment and hand the browser its session cookie."""
        state_container: AppContainer = request.app.state.container
        settings = state_container.settings
        try:
            issued = await state_container.session_issuer.complete_session(
                transaction_id, correlation_id
            )
        except SessionRejectedError as exc:
            return _error_redirect(settings.base_url, exc.reason)
        except Exception:
            logger.exception(
                "Unexpected checkout verification failure",
                extra={"transaction_id": transaction_id},
            )
            return _error_redirect(
                settings.base_url, RejectionReason.VERIFICATION_FAILED
            )

        response = RedirectResponse(f"{settings.base_url}/chat", status_code=302)
        response.set_cookie(
            SESSION_COOKIE,
            issued.token,
            max_age=int(state_container.credential_codec.ttl.total_seconds()),
            path="/",
            secure=settings.secure_cookies,
            httponly=True,
            samesite="lax",
        )
        return response

    @app.get("/session/verify")
    async def verify_session(
        request: Request, session_token: str | None = Cookie(default=None)
    ) -> dict[str, object]:
        """Report whether the presented session cookie is usable."""
        state_container: AppContainer = request.app.state.container
        decision = state_container.session_verifier.check(session_token)
        if decision.valid:
            return {"valid": True}
        return {"valid": False, "error": decision.reason}

    @app.post("/session/end")
    async def end_session(request: Request) -> JSONResponse:
        """Drop the session cookie; the credential itself is not revoked."""
        settings = request.app.state.container.settings
        response = JSONResponse({"status": "ok"})
        response.delete_cookie(
            SESSION_COOKIE,
            path="/",
            secure=settings.secure_cookies,
            httponly=True,
            samesite="lax",
        )
        return response

    @app.post("/chat")
    async def chat(
        request: Request, claims: SessionClaims = Depends(require_paid_session)
    ) -> JSONResponse:
        """Moderate the newest user message and return the assistant reply."""
        state_container: AppContainer = request.app.state.container
        try:
            try:
                body = await request.json()
            except ValueError:
                return JSONResponse({"error": "invalid_messages"}, status_code=400)
            try:
                messages = parse_chat_messages(body)
            except ChatRequestError as exc:
                return JSONResponse({"error": exc.code}, status_code=400)

            verdict = await state_container.content_gate.check(messages[-1].content)
            if verdict is ModerationVerdict.FLAGGED:
                return JSONResponse({"error": "moderation_flagged"}, status_code=400)

            try:
                reply = await state_container.conversation_relay.generate_reply(
                    messages
                )
            except InferenceUnavailableError:
                logger.exception(
                    "Completion failed, sending fallback reply",
                    extra={"correlation_id": claims.correlation_id},
                )
                reply = FALLBACK_REPLY
            return JSONResponse({"message": reply})
        except Exception:
            logger.exception(
                "Chat request failed", extra={"correlation_id": claims.correlation_id}
            )
            return JSONResponse({"error": "internal_error"}, status_code=500)

    return app


def _error_redirect(base_url: str, reason: RejectionReason) -> RedirectResponse:
    """Send the browser back to the landing page with an error code."""
    query = urlencode({"error": reason.value})
    return RedirectResponse(f"{base_url}/?{query}", status_code=302)
