"""Application service: Confirm Payment use case (webhook).

Turns a verified "checkout completed" event into exactly one Order.

Providers redeliver webhooks, so the duplicate check runs first: once an
order references the session id, every later delivery short-circuits to
that order, even though the originating cart has already been deleted.
"""

from __future__ import annotations

import logging

from storefront.application.cart_pricer import CartPricer
from storefront.application.dto import WebhookResultDTO
from storefront.domain.exceptions import EmptyCartError, ValidationError
from storefront.domain.model.order import Order
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.payment_gateway import PaymentEvent

logger = logging.getLogger(__name__)


class ConfirmPaymentHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        pricer: CartPricer,
    ) -> None:
        self._order_repo = order_repo
        self._cart_repo = cart_repo
        self._pricer = pricer

    def handle(self, event: PaymentEvent) -> WebhookResultDTO:
        if not event.is_checkout_completed:
            logger.info("Ignoring payment event of type %s", event.type)
            return WebhookResultDTO(ignored=True)

        if not event.session_id:
            raise ValidationError("Payment event carries no session id", field="session_id")

        existing = self._order_repo.get_by_payment_session(event.session_id)
        if existing is not None:
            logger.info("Session %s already recorded as %s", event.session_id, existing.title)
            return WebhookResultDTO(order_id=existing.id, already_processed=True)

        cart = self._cart_repo.get(event.cart_token) if event.cart_token else None
        if cart is None or cart.is_empty:
            logger.error("Empty or missing cart for session %s", event.session_id)
            raise EmptyCartError("Cart not found or empty.")

        priced = self._pricer.price(cart)
        order = Order.create(
            number=self._order_repo.next_number(),
            priced_cart=priced,
            payment_session_id=event.session_id,
            customer=cart.customer,
            email=event.email,
            payment_amount_total=event.amount_total,
            payment_currency=event.currency,
            payment_metadata=event.metadata,
        )
        order = self._order_repo.add(order)

        if event.amount_total and event.amount_total != priced.total_gross:
            logger.warning(
                "%s: provider charged %s but cart re-priced to %s",
                order.title, event.amount_total, priced.total_gross,
            )

        self._cart_repo.delete(cart.token)
        logger.info("%s recorded for session %s", order.title, event.session_id)
        return WebhookResultDTO(order_id=order.id)
