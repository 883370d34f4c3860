"""Centralized logging configuration for Canarinho.

This module provides a consistent way to configure logging across the application.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "canarinho": logging.INFO,
    "canarinho.cli": logging.INFO,
    "canarinho.core": logging.INFO,
    # Signal path, set to DEBUG for per-frame detail
    "canarinho.audio": logging.INFO,
    "canarinho.detection": logging.INFO,
    "canarinho.services": logging.INFO,
    "canarinho.ui": logging.WARNING,  # Display runs once per frame, keep it quiet
    "canarinho.logger": logging.WARNING,
    # Libraries/third-party
    "sounddevice": logging.ERROR,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'canarinho' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # Create a single, shared console handler if it doesn't exist
    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _console_handler.setFormatter(formatter)
    else:
        # stdout may have been replaced since the handler was created
        _console_handler.setStream(sys.stdout)

    # Determine log levels
    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("canarinho"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Apply module-specific levels
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name)
        logger.setLevel(module_level)

        # Package loggers share the handler through propagation to "canarinho"
        if module_name in ("canarinho", ""):
            for handler in logger.handlers[:]:
                logger.removeHandler(handler)
            logger.addHandler(_console_handler)
            logger.propagate = False

    logging.getLogger("canarinho").info("Logging configuration complete")
