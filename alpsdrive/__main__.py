from __future__ import annotations

import uvicorn

from .config import settings
from .logging_setup import configure_logging


def main() -> None:
    configure_logging(settings.log_level)
    uvicorn.run(
        'alpsdrive.main:create_app',
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        log_level=settings.log_level,
    )


if __name__ == '__main__':
    main()
