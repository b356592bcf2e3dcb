from .logging import LOGGER_NAME, configure_logging, get_logger

__all__ = ["LOGGER_NAME", "configure_logging", "get_logger"]
