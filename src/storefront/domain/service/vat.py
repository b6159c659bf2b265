"""VAT arithmetic and the jurisdiction rate table.

All amounts are integer minor units. Rates are ``Decimal`` percentages so
that rates such as 5.5% stay exact; every division or multiplication by a
rate happens in ``Decimal`` and is rounded half away from zero back to an
integer before it leaves this module.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_HUNDRED = Decimal(100)
_RATE_PLACES = Decimal("0.01")

DEFAULT_RATES: dict[str, tuple[Decimal, ...]] = {
    "FR": (Decimal("20"), Decimal("10"), Decimal("5.5"), Decimal("2.1"), Decimal("0")),
    "NL": (Decimal("21"), Decimal("9"), Decimal("0")),
}

CUSTOM_JURISDICTION = "CUSTOM"


def round_half_away(value: Decimal) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def normalise_rate(rate: object) -> Decimal:
    """Coerce a rate to a non-negative Decimal with two places.

    Anything unparseable counts as 0%.
    """
    try:
        value = Decimal(str(rate))
    except (InvalidOperation, ValueError):
        return Decimal("0.00")
    if not value.is_finite() or value < 0:
        return Decimal("0.00")
    return value.quantize(_RATE_PLACES)


@dataclass(frozen=True)
class UnitTax:
    net: int
    tax: int
    gross: int


def compute_line(amount: int, rate_percent: Decimal, prices_include_tax: bool) -> UnitTax:
    """Split one unit amount into net, tax and gross.

    Tax-inclusive: *amount* is gross; net is derived by division and tax is
    the remainder, so ``net + tax == gross`` exactly.
    Tax-exclusive: *amount* is net; tax is rounded from it and added.
    """
    rate = max(Decimal(0), rate_percent)
    if prices_include_tax:
        net = round_half_away(Decimal(amount) * _HUNDRED / (_HUNDRED + rate))
        return UnitTax(net=net, tax=amount - net, gross=amount)
    tax = tax_on(amount, rate)
    return UnitTax(net=amount, tax=tax, gross=amount + tax)


def tax_on(net: int, rate_percent: Decimal) -> int:
    """Tax due on a net base at *rate_percent*."""
    return round_half_away(Decimal(net) * rate_percent / _HUNDRED)


def parse_custom_rates(raw: str) -> tuple[Decimal, ...]:
    """Parse ``"20, 10,5.5,0"``; non-numeric parts are skipped."""
    rates = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            value = Decimal(part)
        except InvalidOperation:
            continue
        if value.is_finite():
            rates.append(value)
    return tuple(rates)


class TaxRateTable:
    """Maps a jurisdiction code to its set of legal VAT percentages."""

    def __init__(
        self,
        rates: dict[str, tuple[Decimal, ...]] | None = None,
        custom_rates: str = "",
    ) -> None:
        self._rates = dict(DEFAULT_RATES if rates is None else rates)
        self._custom = parse_custom_rates(custom_rates)

    def available_rates(self, jurisdiction: str) -> tuple[Decimal, ...]:
        code = jurisdiction.strip().upper()
        if code == CUSTOM_JURISDICTION:
            return self._custom
        return self._rates.get(code, ())

    def highest_rate(self, jurisdiction: str) -> Decimal:
        """Highest legal rate, or 0 when the jurisdiction has none."""
        rates = self.available_rates(jurisdiction)
        return normalise_rate(max(rates)) if rates else Decimal("0.00")
