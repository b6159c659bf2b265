"""Runtime settings, read from ``STOREFRONT_*`` environment variables or ``.env``.

Only the edges (CLI, HTTP app, bootstrap) read settings. The domain receives
an immutable ``StoreConfig`` built by ``Settings.store_config()``.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from storefront.domain.model.store_config import StoreConfig, VatMode


class PaymentMode(str, Enum):
    TEST = "test"
    LIVE = "live"


class Settings(BaseSettings):
    # Store
    currency: str = Field(default="EUR", description="ISO 4217 store currency")
    currency_position: str = Field(default="before", pattern="^(before|after)$")

    # Tax
    vat_mode: VatMode = VatMode.ENABLED
    prices_include_tax: bool = True
    tax_jurisdiction: str = "FR"
    custom_vat_rates: str = Field(default="", description="Comma-separated, e.g. '20,10,5.5'")

    # Shipping, minor units
    flat_shipping_rate: int = Field(default=0, ge=0)
    free_shipping_threshold: int = Field(default=0, ge=0)

    # Payments
    payment_mode: PaymentMode = PaymentMode.TEST
    stripe_test_secret_key: SecretStr | None = None
    stripe_live_secret_key: SecretStr | None = None
    stripe_webhook_secret: SecretStr | None = None
    checkout_success_url: str = "http://localhost:8000/checkout/success"
    checkout_cancel_url: str = "http://localhost:8000/cart"

    # HTTP sessions
    csrf_secret: SecretStr = SecretStr("change-me")
    cookie_secure: bool = False

    # Runtime
    data_dir: Path = Path("./data")
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("currency", "tax_jurisdiction")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.strip().upper()

    def store_config(self) -> StoreConfig:
        return StoreConfig(
            currency=self.currency,
            vat_mode=self.vat_mode,
            prices_include_tax=self.prices_include_tax,
            flat_shipping_rate=self.flat_shipping_rate,
            free_shipping_threshold=self.free_shipping_threshold,
            tax_jurisdiction=self.tax_jurisdiction,
            custom_vat_rates=self.custom_vat_rates,
            currency_position=self.currency_position,
        )

    def stripe_secret_key(self) -> str:
        """Secret key for the active payment mode, or '' when unset."""
        key = (
            self.stripe_live_secret_key
            if self.payment_mode is PaymentMode.LIVE
            else self.stripe_test_secret_key
        )
        return key.get_secret_value() if key is not None else ""
