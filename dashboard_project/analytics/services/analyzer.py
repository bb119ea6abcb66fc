"""
Column analysis service: type inference and descriptive statistics.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

from shared.metrics import (
    MODE_PLACEHOLDER,
    mean,
    median,
    mode,
    population_std,
    round_half_up,
    unique_count,
)
from shared.tabular import CellValue, Dataset, format_value, is_absent, parse_number
from shared.utils import get_logger, Timer
from shared.utils.exceptions import ColumnComputationError

logger = get_logger(__name__)

TEXT = 'string'
NUMBER = 'number'
DATE = 'date'

# Share of non-absent values that must pass a test for the column to take that type
TYPE_THRESHOLD = 0.7
MIN_DATE_LENGTH = 4

Number = Union[int, float]


@dataclass(frozen=True)
class ColumnInfo:
    """A column projected out of a dataset with its inferred type."""

    name: str
    type: str
    values: List[CellValue]


@dataclass
class ColumnSummary:
    """
    Statistics for one column.

    Numeric columns fill mean, median, min, max and std_dev; text and date
    columns fill mode and unique_values. Unset fields are left out of
    ``to_dict``.
    """

    mean: Optional[float] = None
    median: Optional[float] = None
    min: Optional[Number] = None
    max: Optional[Number] = None
    std_dev: Optional[float] = None
    mode: Optional[str] = None
    unique_values: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        fields = [
            ('mean', self.mean),
            ('median', self.median),
            ('mode', self.mode),
            ('min', self.min),
            ('max', self.max),
            ('stdDev', self.std_dev),
            ('uniqueValues', self.unique_values),
        ]
        return {key: value for key, value in fields if value is not None}


@dataclass
class AnalyticsSummary:
    """Dataset-wide statistics consumed by the dashboard views."""

    total_rows: int = 0
    total_columns: int = 0
    numeric_columns: List[str] = field(default_factory=list)
    string_columns: List[str] = field(default_factory=list)
    summary: Dict[str, ColumnSummary] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalRows': self.total_rows,
            'totalColumns': self.total_columns,
            'numericColumns': list(self.numeric_columns),
            'stringColumns': list(self.string_columns),
            'summary': {name: s.to_dict() for name, s in self.summary.items()},
        }


def _non_absent(values: Sequence[CellValue]) -> List[CellValue]:
    return [value for value in values if not is_absent(value)]


def _count_dates(values: Sequence[CellValue]) -> int:
    """Count strings longer than four characters that parse as dates."""
    candidates = [
        value for value in values
        if isinstance(value, str) and len(value) > MIN_DATE_LENGTH
    ]
    if not candidates:
        return 0
    parsed = pd.to_datetime(
        pd.Series(candidates, dtype=object),
        errors='coerce',
        format='mixed',
        utc=True,
    )
    return int(parsed.notna().sum())


def detect_column_type(values: Sequence[CellValue]) -> str:
    """
    Infer the type of a column.

    Numbers are tested before dates; each needs at least 70% of the
    non-absent values.

    Args:
        values: Column values, absent ones included or not

    Returns:
        'number', 'date' or 'string'
    """
    present = _non_absent(values)
    if not present:
        return TEXT

    numeric = sum(1 for value in present if parse_number(value) is not None)
    if numeric / len(present) >= TYPE_THRESHOLD:
        return NUMBER

    if _count_dates(present) / len(present) >= TYPE_THRESHOLD:
        return DATE

    return TEXT


def analyze_columns(dataset: Dataset) -> List[ColumnInfo]:
    """
    Project every column of a dataset and infer its type.

    Args:
        dataset: Dataset to analyze

    Returns:
        ColumnInfo per column in source order, holding non-absent values
    """
    if dataset.row_count == 0:
        return []

    columns = []
    for name in dataset.columns:
        values = _non_absent(dataset.column_values(name))
        columns.append(ColumnInfo(name=name, type=detect_column_type(values), values=values))
    return columns


def summarize_numeric(values: Sequence[CellValue]) -> ColumnSummary:
    """
    Mean, median, min, max and population standard deviation.

    Only values that coerce to finite numbers take part. Mean, median and
    standard deviation are rounded to two decimals.
    """
    numbers = sorted(n for n in (parse_number(v) for v in values) if n is not None)
    if not numbers:
        return ColumnSummary()

    return ColumnSummary(
        mean=round_half_up(mean(numbers)),
        median=round_half_up(median(numbers)),
        min=numbers[0],
        max=numbers[-1],
        std_dev=round_half_up(population_std(numbers)),
    )


def summarize_text(values: Sequence[CellValue]) -> ColumnSummary:
    """Most frequent value and number of distinct values."""
    present = _non_absent(values)
    if not present:
        return ColumnSummary(mode=MODE_PLACEHOLDER, unique_values=0)

    return ColumnSummary(
        mode=mode(format_value(value) for value in present),
        unique_values=unique_count(present),
    )


def summarize_column(column: ColumnInfo) -> ColumnSummary:
    """
    Summarize one column according to its type.

    Raises:
        ColumnComputationError: The statistics could not be computed
    """
    try:
        if column.type == NUMBER:
            return summarize_numeric(column.values)
        return summarize_text(column.values)
    except Exception as e:
        raise ColumnComputationError(
            f"Error calculating statistics for column {column.name}: {str(e)}"
        ) from e


def calculate_statistics(dataset: Dataset) -> AnalyticsSummary:
    """
    Build the analytics summary of a dataset.

    Never raises for bad column data: a column that fails is logged and
    reported as ``{"uniqueValues": 0}``.

    Args:
        dataset: Dataset to summarize, possibly empty

    Returns:
        AnalyticsSummary
    """
    if dataset is None or dataset.row_count == 0:
        return AnalyticsSummary()

    types: Dict[str, str] = {}
    summary: Dict[str, ColumnSummary] = {}
    with Timer(f"Analyzing {dataset.column_count} columns", level=logging.DEBUG):
        for name in dataset.columns:
            try:
                values = _non_absent(dataset.column_values(name))
                column = ColumnInfo(name=name, type=detect_column_type(values), values=values)
                types[name] = column.type
                summary[name] = summarize_column(column)
            except Exception:
                logger.exception(f"Falling back to an empty summary for column {name}")
                types.setdefault(name, TEXT)
                summary[name] = ColumnSummary(unique_values=0)

    return AnalyticsSummary(
        total_rows=dataset.row_count,
        total_columns=dataset.column_count,
        numeric_columns=[name for name in dataset.columns if types[name] == NUMBER],
        string_columns=[name for name in dataset.columns if types[name] == TEXT],
        summary=summary,
    )
