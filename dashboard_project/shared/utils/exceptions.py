"""
Custom exceptions for the analytics dashboard.
"""


class DashboardException(Exception):
    """Base exception for the analytics dashboard."""
    pass


class IngestionError(DashboardException):
    """Exception raised while turning an uploaded file into a dataset."""
    pass


class SizeExceededError(IngestionError):
    """Exception raised when a file or dataset is over the size limits."""
    pass


class UnsupportedFormatError(IngestionError):
    """Exception raised for file extensions that cannot be ingested."""

    def __init__(self, extension: str, message: str = None):
        self.extension = extension
        if message is None:
            message = (
                f"Unsupported file format: .{extension}. "
                "Please use .xlsx, .xls, or .csv files."
            )
        super().__init__(message)


class MalformedSourceError(IngestionError):
    """Exception raised for structurally unreadable files."""
    pass


class EmptyResultError(IngestionError):
    """Exception raised when a file parses but yields no rows or columns."""
    pass


class ColumnComputationError(DashboardException):
    """Exception raised when statistics for a single column fail."""
    pass


class DataError(DashboardException):
    """Exception raised during data store operations."""
    pass


class ChartConfigError(DashboardException):
    """Exception raised for chart configurations that don't fit the data."""
    pass
