"""Process entry point: validate configuration, then serve with uvicorn."""

from __future__ import annotations

import logging

import uvicorn
from pydantic import ValidationError

from . import __version__
from .app import create_app
from .config import AppConfig, load_config
from .logging import configure_logging

logger = logging.getLogger(__name__)


def load_config_or_exit() -> AppConfig:
    """Return configuration or terminate with status 1 when it is invalid."""
    try:
        return load_config()
    except ValidationError as exc:
        missing = ", ".join(
            ".".join(str(part) for part in error["loc"]) for error in exc.errors()
        )
        logger.error(
            "Invalid configuration (%s): SCENARIO_API_KEY and SCENARIO_SECRET_KEY must be set",
            missing,
        )
        raise SystemExit(1) from exc


def main() -> None:
    configure_logging()
    config = load_config_or_exit()
    configure_logging(config.log_level)
    app = create_app(config)
    logger.info("Scenario MCP Server v%s running on port %s", __version__, config.port)
    logger.info("MCP endpoint: http://localhost:%s/mcp", config.port)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
