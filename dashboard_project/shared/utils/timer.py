"""
Timer utility for measuring how long ingestion and analysis steps take.
"""
import logging
import time
from typing import Optional
from .logging_utils import get_logger

logger = get_logger(__name__)


class Timer:
    """
    Context manager for timing a pipeline step.
    
    Usage:
        with Timer("parse sales.csv") as timer:
            dataset = processor.process(upload)
        timer.elapsed_ms
    """
    
    def __init__(
        self,
        name: Optional[str] = None,
        log: bool = True,
        level: int = logging.INFO,
    ):
        """
        Initialize timer.
        
        Args:
            name: Name for the timed step
            log: Whether to log the elapsed time on exit
            level: Log level used for the elapsed-time message
        """
        self.name = name or "operation"
        self.log = log
        self.level = level
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.elapsed: Optional[float] = None
    
    @property
    def elapsed_ms(self) -> Optional[float]:
        """Elapsed time in milliseconds, or None while still running."""
        if self.elapsed is None:
            return None
        return self.elapsed * 1000.0
    
    def __enter__(self) -> 'Timer':
        self.start_time = time.perf_counter()
        return self
    
    def __exit__(self, exc_type, exc, tb) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        if self.log:
            status = "failed" if exc_type is not None else "completed"
            logger.log(self.level, f"{self.name} {status} in {self.elapsed:.4f} seconds")
