"""
Logging helpers.

Handlers and levels are configured once through Django's ``LOGGING``
setting; modules only ask for a named logger.
"""
import logging


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.
    
    Args:
        name: Logger name, usually ``__name__``
    
    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
