"""FastAPI application factory.

Domain exceptions are mapped to HTTP responses here and nowhere else.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.domain.exceptions import (
    AuthorizationError,
    DomainException,
    PaymentProviderError,
    SignatureVerificationError,
    ValidationError,
)
from storefront.infrastructure.api.cart_router import router as cart_router
from storefront.infrastructure.api.checkout_router import router as checkout_router
from storefront.infrastructure.api.security import (
    SESSION_COOKIE,
    csrf_token_for,
    new_session_token,
    set_session_cookie,
)
from storefront.infrastructure.bootstrap import Container
from storefront.infrastructure.config.settings import Settings
from storefront.infrastructure.logging_setup import configure_logging

logger = logging.getLogger(__name__)

session_router = APIRouter(tags=["session"])


@session_router.get("/session")
def open_session(request: Request, response: Response) -> dict:
    """Issue (or keep) the cart cookie and return the matching CSRF token."""
    settings = request.app.state.container.settings
    token = request.cookies.get(SESSION_COOKIE) or new_session_token()
    set_session_cookie(response, token, secure=settings.cookie_secure)
    return {"csrf_token": csrf_token_for(settings.csrf_secret.get_secret_value(), token)}


def create_app(settings: Settings | None = None, container: Container | None = None) -> FastAPI:
    settings = settings or (container.settings if container else Settings())
    configure_logging(settings.log_level)
    logger.info(
        "Storefront starting: currency=%s vat=%s include_tax=%s payment_mode=%s",
        settings.currency,
        settings.vat_mode.value,
        settings.prices_include_tax,
        settings.payment_mode.value,
    )

    app = FastAPI(title="Storefront")
    app.state.container = container or Container(settings)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error for request %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request.", "detail": _error_details(exc)},
        )

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, str(exc), field=exc.field)

    @app.exception_handler(AuthorizationError)
    async def authorization_handler(request: Request, exc: AuthorizationError):
        return _error(status.HTTP_403_FORBIDDEN, str(exc))

    @app.exception_handler(SignatureVerificationError)
    async def signature_handler(request: Request, exc: SignatureVerificationError):
        logger.warning("Rejected webhook: %s", exc)
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid signature.")

    @app.exception_handler(PaymentProviderError)
    async def provider_handler(request: Request, exc: PaymentProviderError):
        logger.error("Payment provider failure on %s: %s", request.url.path, exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Payment provider error.")

    @app.exception_handler(DomainException)
    async def domain_handler(request: Request, exc: DomainException):
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.get("/health", tags=["health"])
    def health() -> dict:
        return {"status": "ok"}

    app.include_router(session_router, prefix="/api/v1")
    app.include_router(cart_router, prefix="/api/v1")
    app.include_router(checkout_router, prefix="/api/v1")
    return app


def _error_details(exc: RequestValidationError) -> list[dict]:
    return [
        {"field": ".".join(str(p) for p in err.get("loc", ())[1:]), "message": err.get("msg", "")}
        for err in exc.errors()
    ]


def _error(status_code: int, message: str, field: str | None = None) -> JSONResponse:
    content: dict = {"error": message}
    if field:
        content["field"] = field
    return JSONResponse(status_code=status_code, content=content)
