"""FastAPI endpoints for Shopify webhooks and recovery-check status."""

import base64
import hashlib
import hmac
import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from cart_recovery.config import Settings, get_settings
from cart_recovery.domain.errors import AuthenticationError
from cart_recovery.domain.models import CartSnapshot
from cart_recovery.scheduler import RecoveryScheduler, connect

logger = logging.getLogger(__name__)

HMAC_HEADER = "X-Shopify-Hmac-Sha256"


def verify_signature(secret: str, body: bytes, signature: str | None) -> None:
    """Check a Shopify webhook signature (base64 HMAC-SHA256 of the raw body)."""
    if not signature:
        raise AuthenticationError("Missing webhook signature")
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    expected = base64.b64encode(digest)
    if not hmac.compare_digest(expected, signature.encode("utf-8")):
        raise AuthenticationError("Webhook signature mismatch")


async def _verified_payload(request: Request) -> dict:
    settings: Settings = request.app.state.settings
    body = await request.body()
    verify_signature(settings.SHOPIFY_SECRET, body, request.headers.get(HMAC_HEADER))
    try:
        payload = json.loads(body)
    except ValueError:
        raise HTTPException(status_code=400, detail="Malformed JSON body")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Expected a JSON object")
    return payload


def create_app(settings: Settings | None = None, scheduler: RecoveryScheduler | None = None) -> FastAPI:
    """Build the app. Pass a scheduler to skip connecting to Temporal."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.scheduler is None:
            client = await connect(settings)
            app.state.scheduler = RecoveryScheduler.from_settings(client, settings)
            logger.info("Connected to Temporal at %s, queue %r", settings.TEMPORAL_ADDRESS, settings.TASK_QUEUE)
        yield

    app = FastAPI(title="Cart Recovery", lifespan=lifespan)
    app.state.settings = settings
    app.state.scheduler = scheduler

    @app.exception_handler(AuthenticationError)
    async def authentication_failed(request: Request, exc: AuthenticationError):
        logger.warning("Rejected webhook on %s: %s", request.url.path, exc)
        return PlainTextResponse("Webhook verification failed", status_code=401)

    @app.post("/webhooks/cart/create")
    async def cart_created(request: Request):
        payload = await _verified_payload(request)
        try:
            snapshot = CartSnapshot.from_webhook(payload)
        except ValidationError:
            raise HTTPException(status_code=400, detail="Cart payload has no id")
        await request.app.state.scheduler.schedule_check(snapshot)
        return PlainTextResponse("Cart received", status_code=200)

    @app.post("/webhooks/orders/create")
    async def order_created(request: Request):
        payload = await _verified_payload(request)
        cart_token = payload.get("cart_token")
        cancelled = False
        if cart_token:
            cancelled = await request.app.state.scheduler.cancel_check(str(cart_token))
        return JSONResponse(status_code=200, content={"cancelled": cancelled})

    @app.get("/carts/{cart_id}/recovery")
    async def recovery_status(cart_id: str):
        status = await app.state.scheduler.get_status(cart_id)
        if status is None:
            raise HTTPException(status_code=404, detail="No recovery check for this cart")
        return JSONResponse(status_code=200, content=status)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
