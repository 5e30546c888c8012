"""Observability – structlog configuration and logger access."""
from mp_persistence.observability.logging.factory import JsonLoggerFactory
from mp_persistence.observability.logging.processors import get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]
