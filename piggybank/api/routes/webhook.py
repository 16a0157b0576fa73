"""
Piggybank: WhatsApp Cloud API webhook router.
GET is the verify-token handshake, POST carries inbound messages.
"""
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request, Response
from fastapi.responses import PlainTextResponse
from loguru import logger

from piggybank.api.deps import get_dispatcher
from piggybank.config import Settings, get_settings
from piggybank.core.dispatcher import WebhookDispatcher

router = APIRouter(prefix="/webhook", tags=["webhook"])


@router.get("")
async def verify_webhook(
    mode: Optional[str] = Query(None, alias="hub.mode"),
    token: Optional[str] = Query(None, alias="hub.verify_token"),
    challenge: Optional[str] = Query(None, alias="hub.challenge"),
    settings: Settings = Depends(get_settings),
):
    """Echo the challenge back iff the provider presents our verify token."""
    expected = settings.VERIFY_TOKEN
    if mode == "subscribe" and token and expected and secrets.compare_digest(token, expected):
        logger.info("Webhook verified")
        return PlainTextResponse(challenge or "")
    logger.warning(f"Webhook verification rejected (mode={mode!r})")
    return Response(status_code=403)


@router.post("")
async def receive_webhook(
    request: Request,
    dispatcher: WebhookDispatcher = Depends(get_dispatcher),
):
    """
    Inbound message callback.
    Always acknowledges with 200 so the provider does not redeliver.
    """
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Webhook body is not valid JSON, ignoring")
        return Response(status_code=200)

    try:
        await dispatcher.handle_payload(payload)
    except Exception:
        logger.exception("Webhook handling failed")
    return Response(status_code=200)


@router.post("/simulate")
async def simulate_message(
    phone: str = Form("5511999999999"),
    message: str = Form(""),
    dispatcher: WebhookDispatcher = Depends(get_dispatcher),
):
    """
    Run a message through the dispatcher without sending the reply.
    Records are persisted exactly as for a real message.
    """
    reply = dispatcher.build_reply(message)
    return {"from": phone, "message": message, "reply": reply}
