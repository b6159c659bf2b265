"""Session cookie and CSRF checks for the cart and checkout endpoints.

The session token is an opaque uuid4 held in an HttpOnly cookie. Every
mutating or reading cart request must also echo
``HMAC-SHA256(csrf_secret, token)`` in the ``X-CSRF-Token`` header.
"""

from __future__ import annotations

import hashlib
import hmac
import uuid

from fastapi import Request, Response, Security
from fastapi.security import APIKeyCookie, APIKeyHeader

from storefront.domain.exceptions import AuthorizationError
from storefront.domain.repository.cart_repository import CART_RETENTION

SESSION_COOKIE = "storefront_cart"
CSRF_HEADER = "X-CSRF-Token"

session_cookie = APIKeyCookie(name=SESSION_COOKIE, auto_error=False)
csrf_header = APIKeyHeader(name=CSRF_HEADER, auto_error=False)


def new_session_token() -> str:
    return str(uuid.uuid4())


def csrf_token_for(secret: str, session_token: str) -> str:
    return hmac.new(secret.encode(), session_token.encode(), hashlib.sha256).hexdigest()


def set_session_cookie(response: Response, token: str, secure: bool = False) -> None:
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=int(CART_RETENTION.total_seconds()),
        httponly=True,
        secure=secure,
        samesite="lax",
    )


def require_session(
    request: Request,
    token: str | None = Security(session_cookie),
    csrf: str | None = Security(csrf_header),
) -> str:
    """Return the caller's session token once its CSRF token checks out."""
    if not token:
        raise AuthorizationError("No cart session.")
    secret = request.app.state.container.settings.csrf_secret.get_secret_value()
    expected = csrf_token_for(secret, token)
    if not csrf or not hmac.compare_digest(csrf, expected):
        raise AuthorizationError("Security check failed.")
    return token
