"""Cart endpoints. Every response is the freshly priced cart."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Request

from storefront.infrastructure.api.schemas import (
    AddItemRequest,
    RemoveItemRequest,
    SetQuantityRequest,
)
from storefront.infrastructure.api.security import require_session
from storefront.infrastructure.bootstrap import Container

router = APIRouter(prefix="/cart", tags=["cart"])


def get_container(request: Request) -> Container:
    return request.app.state.container


@router.get("")
def show_cart(
    token: str = Depends(require_session),
    container: Container = Depends(get_container),
) -> dict:
    return asdict(container.show_cart.handle(token))


@router.post("/add")
def add_item(
    body: AddItemRequest,
    token: str = Depends(require_session),
    container: Container = Depends(get_container),
) -> dict:
    return asdict(container.add_to_cart.handle(token, body.product_id, body.qty))


@router.post("/set-qty")
def set_quantity(
    body: SetQuantityRequest,
    token: str = Depends(require_session),
    container: Container = Depends(get_container),
) -> dict:
    return asdict(container.set_quantity.handle(token, body.product_id, body.qty))


@router.post("/remove")
def remove_item(
    body: RemoveItemRequest,
    token: str = Depends(require_session),
    container: Container = Depends(get_container),
) -> dict:
    return asdict(container.remove_from_cart.handle(token, body.product_id))


@router.post("/clear")
def clear_cart(
    token: str = Depends(require_session),
    container: Container = Depends(get_container),
) -> dict:
    return asdict(container.clear_cart.handle(token))
