"""
service_portal.api.__main__

Entrypoint for `python -m service_portal.api` and the `service-portal` script.
"""

from __future__ import annotations

import uvicorn

from service_portal.api.app import create_app
from service_portal.settings import get_settings


def main() -> None:
    settings = get_settings()

    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        # Runs behind the identity provider's reverse proxy.
        proxy_headers=True,
        forwarded_allow_ips=settings.forwarded_allow_ips,
        log_config=None,  # structlog
        access_log=False,  # RequestContextMiddleware emits request_completed
    )


if __name__ == "__main__":
    main()
