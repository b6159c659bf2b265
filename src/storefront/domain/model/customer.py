"""Customer snapshot captured during checkout.

Written onto the cart once the shopper submits their billing details and
copied verbatim into the order. Pricing never reads it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any

from pydantic.networks import validate_email

from storefront.domain.exceptions import ValidationError

REQUIRED_BILLING_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "address_1",
    "postcode",
    "city",
    "country",
    "phone",
)


@dataclass(frozen=True)
class Address:
    first_name: str = ""
    last_name: str = ""
    company: str = ""
    address_1: str = ""
    address_2: str = ""
    postcode: str = ""
    city: str = ""
    country: str = ""
    phone: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class CustomerDetails:
    billing: Address
    email: str
    shipping: Address | None = None
    provider_customer_id: str = ""

    @staticmethod
    def create(
        billing: dict[str, Any],
        shipping: dict[str, Any] | None = None,
    ) -> CustomerDetails:
        """Normalise raw form input and enforce the required billing fields.

        Raises ValidationError naming the first missing field.
        """
        clean = {key: _clean(billing.get(key)) for key in (*Address.__dataclass_fields__, "email")}
        clean["country"] = clean["country"].upper()
        clean["email"] = clean["email"].lower()

        for key in REQUIRED_BILLING_FIELDS:
            if not clean[key]:
                raise ValidationError("Please complete all required fields.", field=key)
        try:
            _, clean["email"] = validate_email(clean["email"])
        except ValueError:
            raise ValidationError("Please enter a valid email address.", field="email")

        email = clean.pop("email")
        ship_address = None
        if shipping and any(_clean(v) for v in shipping.values()):
            ship = {key: _clean(shipping.get(key)) for key in Address.__dataclass_fields__}
            ship["country"] = ship["country"].upper()
            ship_address = Address(**ship)

        return CustomerDetails(
            billing=Address(**clean),
            email=email,
            shipping=ship_address,
        )

    def with_provider_customer(self, provider_customer_id: str) -> CustomerDetails:
        return replace(self, provider_customer_id=provider_customer_id)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> CustomerDetails:
        shipping = raw.get("shipping")
        return CustomerDetails(
            billing=Address(**raw["billing"]),
            email=raw["email"],
            shipping=Address(**shipping) if shipping else None,
            provider_customer_id=raw.get("provider_customer_id", ""),
        )


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return " ".join(str(value).split())
