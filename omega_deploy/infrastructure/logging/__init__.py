"""Structured logging setup."""
from omega_deploy.infrastructure.logging.logger import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
