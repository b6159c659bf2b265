"""JSON-file-backed implementation of CartRepository.

The file maps each session token to ``{"cart": ..., "expires_at": ...}``.
Expired entries are invisible to ``get`` and are purged on every write.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path

from storefront.domain.model.cart import Cart, CartItem
from storefront.domain.model.customer import CustomerDetails
from storefront.domain.repository.cart_repository import CART_RETENTION, CartRepository
from storefront.infrastructure.persistence.json_file import ensure_file, read_json, write_json

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JsonCartRepository(CartRepository):

    def __init__(
        self,
        file_path: Path,
        retention: timedelta = CART_RETENTION,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._file_path = file_path
        self._retention = retention
        self._clock = clock
        ensure_file(self._file_path, {})

    # --- CartRepository interface ---------------------------------------------

    def get(self, token: str) -> Cart | None:
        entry = self._load_raw().get(token)
        if entry is None or self._is_expired(entry):
            return None
        return self._to_domain(token, entry["cart"])

    def save(self, cart: Cart) -> None:
        carts = self._live_entries()
        carts[cart.token] = {
            "cart": self._to_raw(cart),
            "expires_at": (self._clock() + self._retention).isoformat(),
        }
        write_json(self._file_path, carts)

    def delete(self, token: str) -> None:
        carts = self._live_entries()
        if carts.pop(token, None) is not None:
            logger.debug("Cart %s deleted", token[:8])
        write_json(self._file_path, carts)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "items": [
                {"product_id": item.product_id, "quantity": item.quantity}
                for item in cart.items
            ],
            "customer": cart.customer.to_dict() if cart.customer else None,
        }

    @staticmethod
    def _to_domain(token: str, raw: dict) -> Cart:
        customer = raw.get("customer")
        return Cart(
            token=token,
            items=[CartItem(int(i["product_id"]), int(i["quantity"])) for i in raw["items"]],
            customer=CustomerDetails.from_dict(customer) if customer else None,
        )

    # --- File helpers ---------------------------------------------------------

    def _is_expired(self, entry: dict) -> bool:
        expires_at = datetime.fromisoformat(entry["expires_at"])
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at <= self._clock()

    def _live_entries(self) -> dict[str, dict]:
        carts = self._load_raw()
        live = {token: e for token, e in carts.items() if not self._is_expired(e)}
        if len(live) < len(carts):
            logger.info("Purged %d expired cart(s)", len(carts) - len(live))
        return live

    def _load_raw(self) -> dict[str, dict]:
        return read_json(self._file_path)
