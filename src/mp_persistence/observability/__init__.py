"""Observability – structured logging helpers."""
from mp_persistence.observability.logging import JsonLoggerFactory, get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]
