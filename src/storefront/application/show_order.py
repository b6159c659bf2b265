"""Application service: Show Order and List Orders use cases (queries)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO, OrderLineDTO, OrderSummaryDTO
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        currency_position: str = "before",
        prices_include_tax: bool = True,
    ) -> None:
        self._order_repo = order_repo
        self._position = currency_position
        self._include_tax = prices_include_tax

    def handle(self, order_id: int) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return self._to_dto(order)

    def _to_dto(self, order: Order) -> OrderDTO:
        cart = order.priced_cart
        fmt = _formatter(cart.currency, self._position)
        customer = order.customer
        return OrderDTO(
            id=order.id,  # type: ignore[arg-type]
            title=order.title,
            payment_session_id=order.payment_session_id,
            paid=order.paid,
            customer_name=customer.billing.full_name if customer else "",
            email=order.email,
            lines=[
                OrderLineDTO(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit=fmt(line.unit_gross if self._include_tax else line.unit_net),
                    total=fmt(line.line_gross if self._include_tax else line.line_net),
                )
                for line in cart.lines
            ],
            subtotal=fmt(cart.subtotal_net),
            shipping=fmt(cart.shipping_net),
            tax_lines=[
                f"VAT ({rate}%): {fmt(b.tax_amount)} on {fmt(b.base_net)}"
                for rate, b in cart.tax_breakdown.items()
            ],
            total=fmt(cart.total_gross),
            created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository, currency_position: str = "before") -> None:
        self._order_repo = order_repo
        self._position = currency_position

    def handle(self) -> list[OrderSummaryDTO]:
        result = []
        for order in self._order_repo.list_all():
            billing = order.customer.billing if order.customer else None
            result.append(
                OrderSummaryDTO(
                    id=order.id,  # type: ignore[arg-type]
                    title=order.title,
                    customer_name=billing.full_name if billing else "",
                    location=", ".join(p for p in (billing.city, billing.country) if p) if billing else "",
                    total=Money(order.total_gross, order.priced_cart.currency).format(self._position),
                    paid=order.paid,
                    created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
                )
            )
        return result


def _formatter(currency: str, position: str):
    return lambda cents: Money(cents, currency).format(position)
