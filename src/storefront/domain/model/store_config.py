"""Store-wide configuration consumed by the pricing engine.

The engine receives this as an explicit immutable value on every call;
nothing in the domain reads settings from the environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class VatMode(Enum):
    ENABLED = "enabled"
    NONE = "none"


@dataclass(frozen=True)
class StoreConfig:
    currency: str = "EUR"
    vat_mode: VatMode = VatMode.ENABLED
    prices_include_tax: bool = True
    flat_shipping_rate: int = 0  # minor units
    free_shipping_threshold: int = 0  # minor units, 0 disables
    tax_jurisdiction: str = "FR"
    custom_vat_rates: str = ""  # only read when tax_jurisdiction == "CUSTOM"
    currency_position: str = "before"

    @property
    def vat_enabled(self) -> bool:
        return self.vat_mode is VatMode.ENABLED
