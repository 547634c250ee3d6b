from __future__ import annotations

import logging
import sys

import uvicorn

from chat_gateway.domain.exceptions import ConfigurationError
from chat_gateway.infrastructure.config import get_settings, resolve_api_key


def main() -> None:
    """Start the uvicorn ASGI server."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    try:
        resolve_api_key(settings)
    except ConfigurationError as exc:
        logging.getLogger(__name__).critical("%s", exc)
        sys.exit(1)

    uvicorn.run(
        "chat_gateway.interface.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
