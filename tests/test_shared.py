"""
Tests for the shared module.
"""
import pytest
import math
import os
import sys
import time

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'dashboard_project'))

from shared.metrics.descriptive import (
    round_half_up,
    mean,
    median,
    population_std,
    unique_count,
    mode,
)
from shared.tabular import Dataset, is_absent, parse_number, format_value
from shared.utils.timer import Timer
from shared.utils.exceptions import (
    IngestionError,
    SizeExceededError,
    UnsupportedFormatError,
    MalformedSourceError,
    EmptyResultError,
    DashboardException,
)


class TestParseNumber:
    """Tests for numeric coercion of cell values."""

    def test_integer_literal_stays_int(self):
        """Test that integer text becomes an int."""
        assert parse_number('42') == 42
        assert isinstance(parse_number('42'), int)

    def test_decimal_and_exponent(self):
        """Test decimal and exponent literals."""
        assert parse_number('3.5') == 3.5
        assert parse_number('-.25') == -0.25
        assert parse_number('1e3') == 1000.0

    def test_whitespace_is_trimmed(self):
        """Test that surrounding whitespace is ignored."""
        assert parse_number('  7 ') == 7

    def test_partial_numbers_rejected(self):
        """Test that partial or non base-10 literals are rejected."""
        assert parse_number('12abc') is None
        assert parse_number('0x10') is None
        assert parse_number('1_000') is None
        assert parse_number('') is None
        assert parse_number('nan') is None
        assert parse_number('Infinity') is None

    def test_numbers_pass_through(self):
        """Test that numeric values pass through when finite."""
        assert parse_number(5) == 5
        assert parse_number(2.5) == 2.5
        assert parse_number(float('inf')) is None
        assert parse_number(float('nan')) is None
        assert parse_number(True) is None
        assert parse_number(None) is None

    def test_integers_too_large_for_float(self):
        """Test that integers beyond float range are not numbers."""
        assert parse_number('9' * 400) is None
        assert parse_number(10 ** 400) is None
        assert parse_number('9' * 300) == int('9' * 300)


class TestTabular:
    """Tests for the Dataset model."""

    def test_from_records_fills_missing_keys(self):
        """Test that every record gets the full column set."""
        dataset = Dataset.from_records([
            {'a': 1, 'b': 'x'},
            {'a': 2},
        ])

        assert dataset.columns == ('a', 'b')
        assert dataset.to_records() == [
            {'a': 1, 'b': 'x'},
            {'a': 2, 'b': None},
        ]

    def test_absent_values_normalized(self):
        """Test that empty strings and NaN become None."""
        dataset = Dataset.from_records([{'a': '', 'b': float('nan')}])

        assert dataset.rows == ((None, None),)

    def test_ragged_rows_rejected(self):
        """Test that rows must match the column count."""
        with pytest.raises(ValueError):
            Dataset.from_rows(['a', 'b'], [(1,)])

    def test_duplicate_columns_rejected(self):
        """Test that column names must be unique."""
        with pytest.raises(ValueError):
            Dataset.from_rows(['a', 'a'], [(1, 2)])

    def test_column_values_and_head(self):
        """Test column projection and row sampling."""
        dataset = Dataset.from_rows(['a', 'b'], [(1, 'x'), (2, 'y'), (3, 'z')])

        assert dataset.column_values('b') == ['x', 'y', 'z']
        assert dataset.head(2) == [{'a': 1, 'b': 'x'}, {'a': 2, 'b': 'y'}]
        assert len(dataset) == 3
        with pytest.raises(KeyError):
            dataset.column_values('missing')

    def test_to_frame(self):
        """Test conversion to a DataFrame."""
        dataset = Dataset.from_rows(['a', 'b'], [(1, 'x'), (None, 'y')])
        frame = dataset.to_frame()

        assert list(frame.columns) == ['a', 'b']
        assert frame.shape == (2, 2)

    def test_is_absent_and_format_value(self):
        """Test helpers for missing values and text forms."""
        assert is_absent(None)
        assert is_absent('')
        assert not is_absent(0)
        assert format_value(90.0) == '90'
        assert format_value(2.5) == '2.5'


class TestDescriptiveMetrics:
    """Tests for descriptive statistics."""

    def test_mean_and_median(self):
        """Test mean and median, including an even count."""
        assert mean([1, 2, 3, 4]) == 2.5
        assert median([1, 3, 2]) == 2
        assert median([1, 2, 3, 4]) == 2.5

    def test_population_std(self):
        """Test that the standard deviation divides by N."""
        assert population_std([85, 90, 95]) == pytest.approx(math.sqrt(50 / 3))
        assert population_std([5, 5, 5]) == 0

    def test_round_half_up(self):
        """Test two-decimal rounding with halves going up."""
        assert round_half_up(4.0824829) == 4.08
        assert round_half_up(2.675 + 1e-9) == 2.68
        assert round_half_up(0.125) == 0.13
        assert round_half_up(-0.125) == -0.12

    def test_huge_values(self):
        """Test rounding and spread near the float limit."""
        assert round_half_up(1e307) == 1e307
        assert round_half_up(-1.7e308) == -1.7e308
        assert population_std([1e307, 2e307]) == pytest.approx(5e306)

    def test_mode_first_seen_wins_ties(self):
        """Test that ties go to the first value seen."""
        assert mode(['b', 'a', 'a', 'b']) == 'b'
        assert mode(['x', 'y', 'y']) == 'y'

    def test_mode_placeholder(self):
        """Test the placeholder for no values."""
        assert mode([]) == 'N/A'

    def test_unique_count(self):
        """Test distinct value counting."""
        assert unique_count(['a', 'b', 'a']) == 2
        assert unique_count([]) == 0


class TestUtils:
    """Tests for utility classes."""

    def test_timer(self):
        """Test Timer context manager."""
        with Timer("test", log=False) as t:
            time.sleep(0.1)

        assert t.elapsed is not None
        assert t.elapsed >= 0.1
        assert t.elapsed_ms >= 100

    def test_timer_records_failures(self):
        """Test that Timer still measures when the block raises."""
        timer = Timer("failing", log=False)
        with pytest.raises(RuntimeError):
            with timer:
                raise RuntimeError("boom")

        assert timer.elapsed is not None

    def test_exceptions(self):
        """Test the ingestion error hierarchy."""
        for error_class in (SizeExceededError, MalformedSourceError, EmptyResultError):
            with pytest.raises(IngestionError):
                raise error_class("Test error")

        with pytest.raises(DashboardException):
            raise UnsupportedFormatError('txt')

    def test_unsupported_format_names_extension(self):
        """Test that the unsupported format message names the extension."""
        error = UnsupportedFormatError('txt')

        assert error.extension == 'txt'
        assert '.txt' in str(error)
