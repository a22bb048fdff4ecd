"""Entry point for the ig-follow-diff API server."""

import logging
import sys
from pathlib import Path

from .config import ConfigLoader
from .logging import setup_logging


def main() -> int:
    """Load configuration and serve the API."""
    try:
        config = ConfigLoader().load()

        setup_logging(
            level=config.logging.level,
            format=config.logging.format,
            log_file=Path(config.logging.file) if config.logging.file else None,
        )
        logger = logging.getLogger(__name__)

        from .api.server import create_app
        import uvicorn

        app = create_app(config)

        logger.info(
            "Starting API server",
            extra={"extra_fields": {"host": config.api.host, "port": config.api.port}},
        )

        uvicorn.run(
            app,
            host=config.api.host,
            port=config.api.port,
            log_config=None,  # Use our custom logging
        )

        return 0

    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Server interrupted by user")
        return 0

    except Exception:
        logging.getLogger(__name__).error("Server failed to start", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
