"""
astroblog.api.__main__

Entrypoint for `python -m astroblog.api`.
"""

from __future__ import annotations

import uvicorn

from astroblog.api.app import create_app
from astroblog.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
