"""Request bodies accepted by the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class AddItemRequest(BaseModel):
    product_id: int
    qty: int = 1


class SetQuantityRequest(BaseModel):
    product_id: int
    qty: int


class RemoveItemRequest(BaseModel):
    product_id: int


class AddressRequest(BaseModel):
    first_name: str = ""
    last_name: str = ""
    company: str = ""
    address_1: str = ""
    address_2: str = ""
    postcode: str = ""
    city: str = ""
    country: str = ""
    phone: str = ""


class BillingRequest(AddressRequest):
    email: str = ""


class CustomerRequest(BaseModel):
    billing: BillingRequest = Field(default_factory=BillingRequest)
    shipping: AddressRequest | None = None
