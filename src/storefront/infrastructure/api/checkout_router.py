"""Checkout endpoints: customer details, hosted session, Stripe webhook."""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, Header, Request
from starlette.concurrency import run_in_threadpool

from storefront.infrastructure.api.cart_router import get_container
from storefront.infrastructure.api.schemas import CustomerRequest
from storefront.infrastructure.api.security import require_session
from storefront.infrastructure.bootstrap import Container

logger = logging.getLogger(__name__)

router = APIRouter(tags=["checkout"])


@router.post("/checkout/customer")
def save_customer(
    body: CustomerRequest,
    token: str = Depends(require_session),
    container: Container = Depends(get_container),
) -> dict:
    shipping = body.shipping.model_dump() if body.shipping is not None else None
    container.save_customer.handle(token, body.billing.model_dump(), shipping)
    return {"ok": True}


@router.post("/checkout")
def start_checkout(
    token: str = Depends(require_session),
    container: Container = Depends(get_container),
) -> dict:
    return asdict(container.start_checkout.handle(token))


@router.post("/webhook/stripe")
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(default=""),
    container: Container = Depends(get_container),
) -> dict:
    payload = await request.body()
    event = container.gateway.parse_event(payload, stripe_signature)
    logger.info("Webhook %s for session %s", event.type, event.session_id or "-")
    result = await run_in_threadpool(container.confirm_payment.handle, event)
    return asdict(result)
