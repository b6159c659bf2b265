"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import cached_property

from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.cart_pricer import CartPricer
from storefront.application.clear_cart import ClearCartHandler
from storefront.application.confirm_payment import ConfirmPaymentHandler
from storefront.application.save_customer import SaveCustomerHandler
from storefront.application.set_cart_quantity import RemoveFromCartHandler, SetCartQuantityHandler
from storefront.application.show_cart import ShowCartHandler
from storefront.application.start_checkout import StartCheckoutHandler
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.payment_gateway import PaymentGateway
from storefront.domain.service.pricing_engine import PricingEngine
from storefront.domain.service.vat import TaxRateTable
from storefront.infrastructure.config.settings import Settings
from storefront.infrastructure.payments.stripe_gateway import StripeCheckoutGateway
from storefront.infrastructure.persistence.json_cart_repository import JsonCartRepository
from storefront.infrastructure.persistence.json_order_repository import JsonOrderRepository
from storefront.infrastructure.persistence.json_product_repository import JsonProductRepository


class Container:
    """Builds every collaborator lazily, once, from a ``Settings`` object.

    Tests swap in fakes by passing repositories or a gateway explicitly.
    """

    def __init__(
        self,
        settings: Settings,
        product_repo: ProductRepository | None = None,
        order_repo: OrderRepository | None = None,
        cart_repo: CartRepository | None = None,
        gateway: PaymentGateway | None = None,
    ) -> None:
        self.settings = settings
        data_dir = settings.data_dir
        self.product_repo = product_repo or JsonProductRepository(data_dir / "products.json")
        self.order_repo = order_repo or JsonOrderRepository(data_dir / "orders.json")
        self.cart_repo = cart_repo or JsonCartRepository(data_dir / "carts.json")
        self._sync_customers = gateway is not None or bool(settings.stripe_secret_key())
        self.gateway = gateway or StripeCheckoutGateway(
            secret_key=settings.stripe_secret_key(),
            webhook_secret=(
                settings.stripe_webhook_secret.get_secret_value()
                if settings.stripe_webhook_secret is not None
                else ""
            ),
            success_url=settings.checkout_success_url,
            cancel_url=settings.checkout_cancel_url,
        )

    # --- Pricing --------------------------------------------------------------

    @cached_property
    def pricer(self) -> CartPricer:
        config = self.settings.store_config()
        rates = TaxRateTable(custom_rates=config.custom_vat_rates)
        engine = PricingEngine(catalog=self.product_repo, rates=rates)
        return CartPricer(engine, self.product_repo, config)

    # --- Cart use cases -------------------------------------------------------

    @cached_property
    def show_cart(self) -> ShowCartHandler:
        return ShowCartHandler(self.cart_repo, self.pricer)

    @cached_property
    def add_to_cart(self) -> AddToCartHandler:
        return AddToCartHandler(self.cart_repo, self.product_repo, self.pricer)

    @cached_property
    def set_quantity(self) -> SetCartQuantityHandler:
        return SetCartQuantityHandler(self.cart_repo, self.product_repo, self.pricer)

    @cached_property
    def remove_from_cart(self) -> RemoveFromCartHandler:
        return RemoveFromCartHandler(self.set_quantity)

    @cached_property
    def clear_cart(self) -> ClearCartHandler:
        return ClearCartHandler(self.cart_repo, self.pricer)

    # --- Checkout use cases ---------------------------------------------------

    @cached_property
    def save_customer(self) -> SaveCustomerHandler:
        # Without a provider key the snapshot is stored locally only
        gateway = self.gateway if self._sync_customers else None
        return SaveCustomerHandler(self.cart_repo, gateway)

    @cached_property
    def start_checkout(self) -> StartCheckoutHandler:
        return StartCheckoutHandler(self.cart_repo, self.pricer, self.gateway)

    @cached_property
    def confirm_payment(self) -> ConfirmPaymentHandler:
        return ConfirmPaymentHandler(self.order_repo, self.cart_repo, self.pricer)


def build_container(settings: Settings | None = None) -> Container:
    return Container(settings or Settings())
