"""Logging configuration for docs-pipeline-core.

@public

Loggers come from Prefect's logging system so pipeline messages share its formatting and
level controls. Configuration is read from a YAML file in ``logging.config.dictConfig``
format, or built from defaults when no file is given.

Usage:
    >>> from docs_pipeline_core.logging import get_pipeline_logger
    >>> logger = get_pipeline_logger(__name__)
    >>> logger.info("Build started")

Environment variables:
    DOCS_PIPELINE_LOGGING_CONFIG: Path to custom logging.yml
    DOCS_PIPELINE_LOG_LEVEL: Default level of the docs_pipeline_core loggers
    PREFECT_LOGGING_SETTINGS_PATH: Alternative config path
"""

import logging
import logging.config
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol

import yaml
from prefect.logging import get_logger

# Loggers whose level follows the --log-level override
PIPELINE_LOGGERS = (
    "docs_pipeline_core",
    "docs_pipeline_core.scoping",
    "docs_pipeline_core.document_store",
    "docs_pipeline_core.validation",
    "docs_pipeline_core.build",
)

# Third-party loggers that are noisy below WARNING
QUIET_LOGGERS = ("watchdog",)

LOG_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


class LoggingConfig:
    """Loads and applies one logging configuration.

    @public

    Configuration precedence:
        1. Explicit config_path parameter
        2. DOCS_PIPELINE_LOGGING_CONFIG environment variable
        3. PREFECT_LOGGING_SETTINGS_PATH environment variable
        4. Built-in defaults

    The loaded configuration is cached on the instance.
    """

    def __init__(self, config_path: Path | None = None):
        self.config_path = config_path or self._config_path_from_env()
        self._config: dict[str, Any] | None = None

    @staticmethod
    def _config_path_from_env() -> Path | None:
        for variable in ("DOCS_PIPELINE_LOGGING_CONFIG", "PREFECT_LOGGING_SETTINGS_PATH"):
            if value := os.environ.get(variable):
                return Path(value)
        return None

    def load_config(self) -> dict[str, Any]:
        """Configuration in ``dictConfig`` format, from the YAML file when it exists."""
        if self._config is None:
            if self.config_path is not None and self.config_path.exists():
                self._config = yaml.safe_load(self.config_path.read_text(encoding="utf-8"))
            else:
                self._config = self.default_config()
        assert self._config is not None
        return self._config

    @staticmethod
    def default_config() -> dict[str, Any]:
        """Console logging to stderr: ``HH:MM:SS.mmm | LEVEL | logger.name - message``."""
        pipeline_level = os.environ.get("DOCS_PIPELINE_LOG_LEVEL", "INFO")
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"standard": {"format": LOG_FORMAT, "datefmt": LOG_DATE_FORMAT}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "docs_pipeline_core": {"level": pipeline_level, "handlers": ["console"], "propagate": False},
                **{name: {"level": "WARNING"} for name in QUIET_LOGGERS},
            },
            "root": {"level": "WARNING", "handlers": ["console"]},
        }

    def apply(self) -> None:
        """Apply the configuration; a ``prefect`` logger entry also seeds PREFECT_LOGGING_LEVEL."""
        config = self.load_config()
        logging.config.dictConfig(config)

        if prefect_logger := config.get("loggers", {}).get("prefect"):
            os.environ.setdefault("PREFECT_LOGGING_LEVEL", prefect_logger.get("level", "INFO"))


_logging_config: LoggingConfig | None = None


def setup_logging(config_path: Path | None = None, level: str | None = None):
    """Configure logging for the pipeline.

    @public

    Args:
        config_path: Optional YAML logging configuration.
        level: Optional level applied to every pipeline logger (DEBUG, INFO, ...).
    """
    global _logging_config

    _logging_config = LoggingConfig(config_path)
    _logging_config.apply()

    if level:
        for name in PIPELINE_LOGGERS:
            get_logger(name).setLevel(level.upper())
        os.environ["PREFECT_LOGGING_LEVEL"] = level.upper()


def get_pipeline_logger(name: str):
    """Logger for a pipeline module, configuring logging on first use.

    @public
    """
    if _logging_config is None:
        setup_logging()

    return get_logger(name)


class _Reportable(Protocol):
    @property
    def is_failure(self) -> bool: ...

    def format(self) -> str: ...


def log_diagnostics(logger: logging.Logger | logging.LoggerAdapter, diagnostics: Iterable[_Reportable]) -> int:
    """Log each diagnostic at ERROR (hard failures) or WARNING. Returns how many were logged."""
    count = 0
    for diagnostic in diagnostics:
        logger.log(logging.ERROR if diagnostic.is_failure else logging.WARNING, diagnostic.format())
        count += 1
    return count
