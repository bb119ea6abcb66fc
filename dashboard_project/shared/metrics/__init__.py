"""
Metrics module for the analytics dashboard.
"""
from .descriptive import (
    MODE_PLACEHOLDER,
    round_half_up,
    mean,
    median,
    population_std,
    unique_count,
    mode,
)

__all__ = [
    'MODE_PLACEHOLDER',
    'round_half_up',
    'mean',
    'median',
    'population_std',
    'unique_count',
    'mode',
]
