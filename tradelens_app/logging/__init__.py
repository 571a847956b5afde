"""
Logging configuration and utilities for the TradeLens pipeline.
"""
from .config import configure_logging, get_logger, get_pipeline_logger, log_correction

__all__ = ["configure_logging", "get_logger", "get_pipeline_logger", "log_correction"]
