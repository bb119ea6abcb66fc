"""
Typed tabular model shared by ingestion and analysis.

A dataset is an immutable, ordered collection of rows over a fixed tuple of
column names. Every cell holds text, a number or nothing (``None``).
"""
import math
import numbers
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

CellValue = Union[str, int, float, None]
Record = Dict[str, CellValue]

# Full base-10 literal: optional sign, digits with optional fraction, optional exponent.
NUMBER_PATTERN = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$')


def is_absent(value: Any) -> bool:
    """Check whether a cell value counts as missing."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ''
    if isinstance(value, float):
        return math.isnan(value)
    return False


def parse_number(value: Any) -> Optional[Union[int, float]]:
    """
    Coerce a cell value to a finite number.

    Numbers pass through when finite. Strings must be a complete base-10
    literal after trimming; integer literals stay ``int``.

    Args:
        value: Cell value

    Returns:
        The number, or None when the value is not a finite number
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        try:
            number = float(value)
        except OverflowError:
            return None
        if not math.isfinite(number):
            return None
        if isinstance(value, numbers.Integral):
            return int(value)
        return number
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not NUMBER_PATTERN.match(text):
        return None
    if '.' in text or 'e' in text or 'E' in text:
        number = float(text)
        return number if math.isfinite(number) else None
    # Integers must fit in a float
    try:
        integer = int(text)
        float(integer)
    except (OverflowError, ValueError):
        return None
    return integer


def format_value(value: CellValue) -> str:
    """Text form of a cell value, with integral floats shown without a fraction."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Dataset:
    """
    Immutable ordered rows sharing one column set.

    Attributes:
        columns: Column names in source order
        rows: One tuple of cell values per row, aligned with ``columns``
    """

    columns: Tuple[str, ...]
    rows: Tuple[Tuple[CellValue, ...], ...]

    def __post_init__(self):
        if len(set(self.columns)) != len(self.columns):
            raise ValueError("Column names must be unique")
        width = len(self.columns)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {index} has {len(row)} values, expected {width}"
                )

    @classmethod
    def from_rows(
        cls,
        columns: Sequence[str],
        rows: Iterable[Sequence[CellValue]],
    ) -> 'Dataset':
        """Build a dataset from positional rows."""
        return cls(
            columns=tuple(columns),
            rows=tuple(tuple(row) for row in rows),
        )

    @classmethod
    def from_records(
        cls,
        records: Sequence[Mapping[str, CellValue]],
        columns: Optional[Sequence[str]] = None,
    ) -> 'Dataset':
        """
        Build a dataset from mappings.

        Args:
            records: Row mappings
            columns: Column names; taken from the first record when omitted

        Returns:
            New Dataset where keys missing from a record are None
        """
        if columns is None:
            columns = list(records[0].keys()) if records else []
        rows = [
            tuple(
                None if is_absent(record.get(name)) else record.get(name)
                for name in columns
            )
            for record in records
        ]
        return cls.from_rows(columns, rows)

    @classmethod
    def empty(cls) -> 'Dataset':
        return cls(columns=(), rows=())

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.columns)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Record]:
        return self.records()

    def records(self) -> Iterator[Record]:
        """Iterate rows as column-name mappings."""
        for row in self.rows:
            yield dict(zip(self.columns, row))

    def column_values(self, name: str) -> List[CellValue]:
        """All values of one column in row order."""
        try:
            position = self.columns.index(name)
        except ValueError:
            raise KeyError(name)
        return [row[position] for row in self.rows]

    def head(self, n: int = 100) -> List[Record]:
        """First ``n`` rows as mappings."""
        return [dict(zip(self.columns, row)) for row in self.rows[:n]]

    def to_records(self) -> List[Record]:
        return list(self.records())

    def to_frame(self) -> pd.DataFrame:
        """Convert to a pandas DataFrame with object columns."""
        return pd.DataFrame(list(self.rows), columns=list(self.columns), dtype=object)
