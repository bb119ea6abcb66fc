"""
Descriptive statistics for column summaries.
"""
import math
from collections import Counter
from typing import Any, Hashable, Iterable, Optional, Sequence

import numpy as np

MODE_PLACEHOLDER = 'N/A'


def round_half_up(value: float, digits: int = 2) -> float:
    """
    Round to a fixed number of decimals, halves going up.
    
    Args:
        value: Number to round
        digits: Number of decimal places
    
    Returns:
        Rounded value
    """
    factor = 10 ** digits
    scaled = value * factor
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / factor


def mean(values: Sequence[float]) -> float:
    """
    Calculate the arithmetic mean.
    
    Args:
        values: Non-empty numbers
    
    Returns:
        Mean of the values
    """
    return float(np.mean(np.asarray(values, dtype=float)))


def median(values: Sequence[float]) -> float:
    """
    Calculate the median, averaging the two central values for even counts.
    
    Args:
        values: Non-empty numbers
    
    Returns:
        Median of the values
    """
    return float(np.median(np.asarray(values, dtype=float)))


def population_std(values: Sequence[float]) -> float:
    """
    Calculate the population standard deviation (divides by N).
    
    Args:
        values: Non-empty numbers
    
    Returns:
        Standard deviation of the values
    """
    array = np.asarray(values, dtype=float)
    with np.errstate(over='ignore', invalid='ignore'):
        std = float(np.std(array, ddof=0))
    if math.isfinite(std):
        return std
    # Squared deviations overflowed; compute on values scaled into [-1, 1]
    scale = float(np.max(np.abs(array)))
    return scale * float(np.std(array / scale, ddof=0))


def unique_count(values: Iterable[Hashable]) -> int:
    """Count distinct values."""
    return len(set(values))


def mode(values: Iterable[Any], placeholder: Optional[str] = MODE_PLACEHOLDER) -> Optional[str]:
    """
    Most frequent text form among the values.
    
    Ties go to the value seen first.
    
    Args:
        values: Values to count, compared by their ``str`` form
        placeholder: Returned when there are no values
    
    Returns:
        The most frequent value, or the placeholder
    """
    counts = Counter(str(value) for value in values)
    if not counts:
        return placeholder
    return counts.most_common(1)[0][0]
