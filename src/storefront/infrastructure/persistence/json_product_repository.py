"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from storefront.domain.model.product import Product
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.persistence.json_file import ensure_file, read_json, write_json


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        ensure_file(self._file_path, [])

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: int) -> Product | None:
        return self._load().get(product_id)

    def list_all(self) -> list[Product]:
        return sorted(self._load().values(), key=lambda p: p.id)

    def save(self, product: Product) -> None:
        products = self._load()
        products[product.id] = product
        write_json(self._file_path, [self._to_raw(p) for p in products.values()])

    # --- Serialization --------------------------------------------------------

    def _load(self) -> dict[int, Product]:
        products = (self._to_domain(raw) for raw in read_json(self._file_path))
        return {p.id: p for p in products}

    @staticmethod
    def _to_raw(p: Product) -> dict:
        return {
            "id": p.id,
            "name": p.name,
            "sku": p.sku,
            "price_cents": p.price_cents,
            "currency": p.currency,
            "vat_rate_percent": str(p.vat_rate_percent),
            "sale_price_cents": p.sale_price_cents,
            "sale_start": p.sale_start.isoformat() if p.sale_start else None,
            "sale_end": p.sale_end.isoformat() if p.sale_end else None,
            "requires_shipping": p.requires_shipping,
            "weight_grams": p.weight_grams,
            "manage_stock": p.manage_stock,
            "stock_qty": p.stock_qty,
            "stock_status": p.stock_status,
            "published": p.published,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=int(raw["id"]),
            name=raw["name"],
            sku=raw.get("sku", ""),
            price_cents=int(raw.get("price_cents", 0)),
            currency=raw.get("currency", "EUR"),
            vat_rate_percent=Decimal(str(raw.get("vat_rate_percent", "0"))),
            sale_price_cents=int(raw.get("sale_price_cents", 0)),
            sale_start=_parse_dt(raw.get("sale_start")),
            sale_end=_parse_dt(raw.get("sale_end")),
            requires_shipping=raw.get("requires_shipping", True),
            weight_grams=int(raw.get("weight_grams", 0)),
            manage_stock=raw.get("manage_stock", False),
            stock_qty=int(raw.get("stock_qty", 0)),
            stock_status=raw.get("stock_status", "in_stock"),
            published=raw.get("published", True),
        )


def _parse_dt(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    # Naive timestamps are stored in UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
