"""Utility modules for the slide converter."""

from .config import ConfigManager, ConversionSettings, resolve_settings
from .logging import LoggerFactory, log_with_context, StructuredLogFormatter

__all__ = [
    'ConfigManager',
    'ConversionSettings',
    'resolve_settings',
    'LoggerFactory',
    'log_with_context',
    'StructuredLogFormatter'
]
