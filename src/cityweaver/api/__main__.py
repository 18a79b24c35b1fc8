"""
cityweaver.api.__main__

Entrypoint for running the FastAPI application via `python -m cityweaver.api`.
"""

from __future__ import annotations

import uvicorn

from cityweaver.api.app import create_app
from cityweaver.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
        log_level=settings.log_level.lower(),
        access_log=False,  # `http.request` events come from RequestContextMiddleware
    )


if __name__ == "__main__":
    main()
