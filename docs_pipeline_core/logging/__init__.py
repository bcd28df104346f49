"""Logging infrastructure for docs-pipeline-core.

@public

Provides Prefect-integrated loggers configured from YAML or built-in defaults.

Example:
    >>> from docs_pipeline_core.logging import get_pipeline_logger
    >>>
    >>> logger = get_pipeline_logger(__name__)
    >>> logger.info("Resolved %d navigation nodes", 42)

Note:
    Pipeline modules get their loggers from get_pipeline_logger(), never from
    logging.getLogger(), so configuration is applied before the first message.
"""

from .logging_config import LoggingConfig, get_pipeline_logger, log_diagnostics, setup_logging

__all__ = [
    "LoggingConfig",
    "get_pipeline_logger",
    "log_diagnostics",
    "setup_logging",
]
