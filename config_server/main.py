"""
Main entry point for the config server

Builds the app from environment settings and runs it under uvicorn.

    DATA_DIR=/data python -m config_server.main
"""

import sys

from config_server.app import create_app
from config_server.config.settings import get_settings


def main() -> None:
    import uvicorn

    settings = get_settings()

    try:
        app = create_app(settings)
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    uvicorn.run(
        app,
        host=settings.server.bind_host,
        port=settings.server.bind_port,
        log_config=None
    )


if __name__ == "__main__":
    main()
