"""
Shared utilities module.
"""
from .logging_utils import get_logger
from .timer import Timer
from .exceptions import (
    DashboardException,
    IngestionError,
    SizeExceededError,
    UnsupportedFormatError,
    MalformedSourceError,
    EmptyResultError,
    ColumnComputationError,
    DataError,
    ChartConfigError,
)

__all__ = [
    'get_logger',
    'Timer',
    'DashboardException',
    'IngestionError',
    'SizeExceededError',
    'UnsupportedFormatError',
    'MalformedSourceError',
    'EmptyResultError',
    'ColumnComputationError',
    'DataError',
    'ChartConfigError',
]
