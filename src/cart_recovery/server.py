"""
HTTP server entry point.

Run with:
    python -m cart_recovery.server
"""

import logging

import uvicorn

from cart_recovery.api import create_app
from cart_recovery.config import LOG_FORMAT, get_settings


def main() -> None:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    settings = get_settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()
