"""Stripe implementation of the PaymentGateway port.

The whole cart is charged as one "Order Total" line for ``total_gross`` so
that Stripe never re-derives tax. The cart token travels in the session
metadata and comes back on the completion webhook.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import stripe

from storefront.domain.exceptions import PaymentProviderError, SignatureVerificationError
from storefront.domain.model.customer import Address, CustomerDetails
from storefront.domain.model.priced_cart import PricedCart
from storefront.domain.service.payment_gateway import (
    CheckoutSession,
    PaymentEvent,
    PaymentGateway,
)

logger = logging.getLogger(__name__)


class StripeCheckoutGateway(PaymentGateway):

    def __init__(
        self,
        secret_key: str,
        webhook_secret: str,
        success_url: str,
        cancel_url: str,
    ) -> None:
        self._secret_key = secret_key
        self._webhook_secret = webhook_secret
        self._success_url = success_url
        self._cancel_url = cancel_url

    # --- Checkout -------------------------------------------------------------

    def create_checkout_session(
        self,
        cart: PricedCart,
        cart_token: str,
        customer: CustomerDetails | None,
    ) -> CheckoutSession:
        self._require_key()
        params = self._session_params(cart, cart_token, customer)
        try:
            session = stripe.checkout.Session.create(api_key=self._secret_key, **params)
        except stripe.StripeError as exc:
            logger.error("Stripe refused checkout session for cart %s: %s", cart_token[:8], exc)
            raise PaymentProviderError("Unable to start payment.") from exc
        return CheckoutSession(id=session["id"], url=session["url"])

    def _session_params(
        self,
        cart: PricedCart,
        cart_token: str,
        customer: CustomerDetails | None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {
            "mode": "payment",
            "line_items": [
                {
                    "price_data": {
                        "currency": cart.currency.lower(),
                        "product_data": {"name": "Order Total"},
                        "unit_amount": cart.total_gross,
                    },
                    "quantity": 1,
                }
            ],
            "success_url": self._success_url + "?session_id={CHECKOUT_SESSION_ID}",
            "cancel_url": self._cancel_url,
            "metadata": {
                "cart_id": cart_token,
                "email": customer.email if customer else "",
                "currency": cart.currency,
                "total": str(cart.total_gross),
            },
        }
        if customer is not None and customer.provider_customer_id:
            params["customer"] = customer.provider_customer_id
        elif customer is not None:
            params["customer_email"] = customer.email
            params["customer_creation"] = "always"
        return params

    # --- Webhooks -------------------------------------------------------------

    def parse_event(self, payload: bytes, signature: str) -> PaymentEvent:
        if not self._webhook_secret:
            raise SignatureVerificationError("Webhook secret is not configured")
        if not signature:
            raise SignatureVerificationError("Missing signature")
        try:
            stripe.WebhookSignature.verify_header(
                payload.decode("utf-8"), signature, self._webhook_secret
            )
        except (stripe.SignatureVerificationError, UnicodeDecodeError) as exc:
            raise SignatureVerificationError("Invalid signature") from exc

        try:
            event = json.loads(payload)
        except ValueError as exc:
            raise SignatureVerificationError("Malformed event payload") from exc

        obj = event.get("data", {}).get("object", {}) or {}
        metadata = obj.get("metadata") or {}
        details = obj.get("customer_details") or {}
        return PaymentEvent(
            type=event.get("type", ""),
            session_id=obj.get("id", ""),
            cart_token=metadata.get("cart_id", ""),
            email=details.get("email") or metadata.get("email", ""),
            amount_total=int(obj.get("amount_total") or 0),
            currency=(obj.get("currency") or "").upper(),
            metadata=dict(metadata),
        )

    # --- Customers ------------------------------------------------------------

    def upsert_customer(self, customer: CustomerDetails) -> str:
        self._require_key()
        params = _customer_params(customer)
        try:
            if customer.provider_customer_id:
                result = stripe.Customer.modify(
                    customer.provider_customer_id, api_key=self._secret_key, **params
                )
            else:
                result = stripe.Customer.create(api_key=self._secret_key, **params)
        except stripe.StripeError as exc:
            raise PaymentProviderError(f"Stripe customer sync failed: {exc}") from exc
        return result["id"]

    def _require_key(self) -> None:
        if not self._secret_key:
            raise PaymentProviderError("Stripe secret key is not configured")


def _customer_params(customer: CustomerDetails) -> dict[str, Any]:
    billing = customer.billing
    params = _non_empty({
        "email": customer.email,
        "name": billing.full_name,
        "phone": billing.phone,
        "address": _address(billing),
    })
    if customer.shipping is not None:
        params["shipping"] = _non_empty({
            "name": customer.shipping.full_name or billing.full_name,
            "phone": customer.shipping.phone or billing.phone,
            "address": _address(customer.shipping),
        })
    return params


def _address(address: Address) -> dict[str, str]:
    return _non_empty({
        "line1": address.address_1,
        "line2": address.address_2,
        "postal_code": address.postcode,
        "city": address.city,
        "country": address.country,
    })


def _non_empty(params: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in params.items() if value}
