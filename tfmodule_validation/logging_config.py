import logging

import colorlog
import structlog

from .config_manager import LoggingConfig

# HTTP loggers that flood the console at INFO level during ARM reads
_HTTP_LOGGERS = [
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.core.pipeline",
    "azure.identity",
    "azure.mgmt",
    "azure",
    "msrest",
    "urllib3",
    "urllib3.connectionpool",
    "http.client",
]

logger = logging.getLogger(__name__)


def _set_azure_http_log_level(log_level: str) -> None:
    """Set log levels for HTTP-related loggers to reduce noise."""
    target_level = logging.DEBUG if log_level == "DEBUG" else logging.WARNING
    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(target_level)


def _configure_structlog(json_output: bool) -> None:
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
            if json_output
            else structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def setup_logging(config: LoggingConfig, json_output: bool = False) -> None:
    """
    Setup logging configuration based on config.

    Installs a colorlog console handler (and a file handler when LOG_FILE is
    set) on the root logger and routes structlog events through it.
    """
    _set_azure_http_log_level(config.level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(config.get_log_level())

    console_handler = colorlog.StreamHandler()
    console_handler.setFormatter(colorlog.ColoredFormatter(config.format))
    root_logger.addHandler(console_handler)

    if config.file_output:
        file_handler = logging.FileHandler(config.file_output)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s:%(name)s:%(message)s")
        )
        root_logger.addHandler(file_handler)

    _configure_structlog(json_output)

    logger.info(
        f"Logging configured: level={config.level}, file={config.file_output or 'console'}"
    )
