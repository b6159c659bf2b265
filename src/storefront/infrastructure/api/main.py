"""ASGI entry point: ``uvicorn storefront.infrastructure.api.main:app``."""

from __future__ import annotations

import uvicorn

from storefront.infrastructure.api.app_factory import create_app
from storefront.infrastructure.config.settings import Settings

settings = Settings()
app = create_app(settings)


def run(host: str = "127.0.0.1", port: int = 8000, reload: bool = False) -> None:
    uvicorn.run(
        "storefront.infrastructure.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
