"""
File processing service that turns uploaded spreadsheets into datasets.
"""
import csv
import datetime
import io
import re
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
from asgiref.sync import sync_to_async
from django.conf import settings

from shared.tabular import CellValue, Dataset, is_absent, parse_number
from shared.utils import get_logger, Timer
from shared.utils.exceptions import (
    EmptyResultError,
    MalformedSourceError,
    SizeExceededError,
    UnsupportedFormatError,
)

logger = get_logger(__name__)

MAX_FILE_SIZE = 100 * 1024 * 1024
MAX_ROWS = 100_000
MAX_COLUMNS = 100

SUPPORTED_EXTENSIONS = ('xlsx', 'xls', 'csv')
CANDIDATE_DELIMITERS = ',;\t|'
SNIFF_SAMPLE_SIZE = 64 * 1024
EXCEL_DATE_FORMAT = '%Y-%m-%d'


def get_extension(file_name: str) -> str:
    """Lower-cased text after the last dot, or the whole name when there is none."""
    return (file_name or '').rsplit('.', 1)[-1].lower()


def validate_file_type(file_name: str) -> bool:
    return get_extension(file_name) in SUPPORTED_EXTENSIONS


def validate_file_size(size: int, max_size_mb: int = 100) -> bool:
    return size <= max_size_mb * 1024 * 1024


def format_file_size(size: int) -> str:
    """Human readable byte count, e.g. ``1.5 KB``."""
    if not size:
        return '0 Bytes'
    units = ['Bytes', 'KB', 'MB', 'GB']
    exponent = 0
    while size >= 1024 ** (exponent + 1) and exponent < len(units) - 1:
        exponent += 1
    scaled = round(size / (1024 ** exponent), 2)
    return f"{scaled:g} {units[exponent]}"


def get_file_info(file) -> Dict[str, Any]:
    """Name, size and extension of an uploaded file."""
    return {
        'name': file.name,
        'size': file.size,
        'type': getattr(file, 'content_type', '') or '',
        'extension': get_extension(file.name),
    }


def normalize_header(name: Any) -> str:
    """
    Clean up a CSV header name.

    Trims whitespace, removes characters other than word characters,
    whitespace and hyphens, then replaces whitespace runs with ``_``.
    """
    cleaned = re.sub(r'[^\w\s-]', '', str(name).strip())
    return re.sub(r'\s+', '_', cleaned)


def unique_names(names: Sequence[str]) -> List[str]:
    """Suffix repeated names with ``_1``, ``_2``... in order of appearance."""
    columns: List[str] = []
    seen = set()
    for name in names:
        candidate = name
        suffix = 1
        while candidate in seen:
            candidate = f"{name}_{suffix}"
            suffix += 1
        seen.add(candidate)
        columns.append(candidate)
    return columns


def normalize_headers(names: Sequence[Any]) -> List[str]:
    """
    Normalize a header row into unique column names.

    Names that clean up to nothing become ``column_<position>``.
    """
    return unique_names([
        normalize_header(raw) or f"column_{position}"
        for position, raw in enumerate(names, start=1)
    ])


def coerce_cell(value: Any) -> CellValue:
    """
    Transform a raw CSV cell.

    Strings are trimmed; empty becomes None and complete base-10
    numbers become numbers.
    """
    if not isinstance(value, str):
        return None if is_absent(value) else coerce_cell(str(value))
    trimmed = value.strip()
    if trimmed == '':
        return None
    number = parse_number(trimmed)
    return trimmed if number is None else number


def coerce_excel_cell(value: Any) -> CellValue:
    """Convert a cell read from a worksheet into a dataset value."""
    if value is None:
        return None
    if isinstance(value, str):
        return None if value == '' else value
    if pd.isna(value):
        return None
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.strftime(EXCEL_DATE_FORMAT)
    if isinstance(value, datetime.time):
        return value.isoformat()
    if hasattr(value, 'item'):
        value = value.item()
    if isinstance(value, bool):
        return 'TRUE' if value else 'FALSE'
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, (int, float)):
        return value
    return str(value)


class FileProcessor:
    """
    Service for decoding uploaded CSV and Excel files.

    Decoding is all-or-nothing: either a validated Dataset is returned or
    an IngestionError subclass is raised.
    """

    def __init__(
        self,
        max_file_size: Optional[int] = None,
        max_rows: Optional[int] = None,
        max_columns: Optional[int] = None,
    ):
        """
        Initialize the file processor.

        Args:
            max_file_size: Upload size cap in bytes
            max_rows: Maximum number of data rows
            max_columns: Maximum number of columns
        """
        self.max_file_size = max_file_size or getattr(
            settings, 'DATASET_MAX_FILE_SIZE', MAX_FILE_SIZE
        )
        self.max_rows = max_rows or getattr(settings, 'DATASET_MAX_ROWS', MAX_ROWS)
        self.max_columns = max_columns or getattr(
            settings, 'DATASET_MAX_COLUMNS', MAX_COLUMNS
        )

    def _check_upload(self, file) -> str:
        """Validate name and declared size before any content is read."""
        if file is None:
            raise EmptyResultError('No file provided')

        extension = get_extension(file.name)
        if not extension:
            raise UnsupportedFormatError('', 'Unable to determine file type')
        if extension not in SUPPORTED_EXTENSIONS:
            raise UnsupportedFormatError(extension)

        if file.size is not None and file.size > self.max_file_size:
            limit_mb = self.max_file_size // (1024 * 1024)
            raise SizeExceededError(f"File too large. Maximum size is {limit_mb}MB.")
        return extension

    def process(self, file) -> Dataset:
        """
        Decode an uploaded file.

        Args:
            file: Object with ``name``, ``size`` and ``read()``

        Returns:
            Validated Dataset
        """
        extension = self._check_upload(file)
        content = file.read()
        return self.process_bytes(content, file.name, extension)

    async def aprocess(self, file) -> Dataset:
        """
        Decode an uploaded file, suspending only while its bytes are read.

        Args:
            file: Object with ``name``, ``size`` and ``read()``

        Returns:
            Validated Dataset
        """
        extension = self._check_upload(file)
        content = await sync_to_async(file.read)()
        return self.process_bytes(content, file.name, extension)

    def process_bytes(
        self,
        content: bytes,
        file_name: str,
        extension: Optional[str] = None,
    ) -> Dataset:
        """
        Decode raw file content.

        Args:
            content: File bytes
            file_name: Declared file name, used for the extension
            extension: Already validated extension

        Returns:
            Validated Dataset
        """
        if extension is None:
            extension = get_extension(file_name)
            if extension not in SUPPORTED_EXTENSIONS:
                raise UnsupportedFormatError(extension)
        if len(content) > self.max_file_size:
            limit_mb = self.max_file_size // (1024 * 1024)
            raise SizeExceededError(f"File too large. Maximum size is {limit_mb}MB.")

        logger.info(f"Processing file: {file_name} ({len(content) / 1024 / 1024:.2f} MB)")
        with Timer(f"Parsing {file_name}"):
            if extension == 'csv':
                dataset = self.parse_csv(content)
            else:
                dataset = self.parse_excel(content)
            self.validate(dataset)

        logger.info(
            f"Successfully processed {dataset.row_count} rows "
            f"and {dataset.column_count} columns from {file_name}"
        )
        return dataset

    def validate(self, dataset: Dataset) -> None:
        """
        Check the shape limits of a decoded dataset.

        Raises:
            EmptyResultError: No rows or no columns
            SizeExceededError: Too many rows or columns
        """
        if dataset.row_count == 0:
            raise EmptyResultError('Data validation failed: Data array is empty')
        if dataset.row_count > self.max_rows:
            raise SizeExceededError(
                f"Data validation failed: Dataset too large (max {self.max_rows:,} rows)"
            )
        if dataset.column_count == 0:
            raise EmptyResultError('Data validation failed: No columns found in data')
        if dataset.column_count > self.max_columns:
            raise SizeExceededError(
                f"Data validation failed: Too many columns (max {self.max_columns})"
            )

    def _decode(self, content: bytes) -> str:
        try:
            return content.decode('utf-8-sig')
        except UnicodeDecodeError:
            logger.warning('File is not valid UTF-8, decoding as Latin-1')
            return content.decode('latin-1')

    def _detect_delimiter(self, text: str) -> str:
        """Pick the field delimiter from a sample of the text."""
        sample = text[:SNIFF_SAMPLE_SIZE]
        if '\x00' in sample:
            raise MalformedSourceError('CSV parsing failed: Invalid delimiter or format')
        if len(text) > SNIFF_SAMPLE_SIZE and '\n' in sample:
            sample = sample[:sample.rindex('\n')]

        header_line = next((line for line in sample.splitlines() if line.strip()), '')
        counts = {d: header_line.count(d) for d in CANDIDATE_DELIMITERS}
        if not any(counts.values()):
            return ','

        try:
            return csv.Sniffer().sniff(sample, delimiters=CANDIDATE_DELIMITERS).delimiter
        except csv.Error:
            # Ragged rows confuse the sniffer; trust the header line instead
            return max(CANDIDATE_DELIMITERS, key=lambda d: counts[d])

    def _read_header(self, text: str, delimiter: str) -> List[str]:
        # Same blank-line rule as pandas' skip_blank_lines
        for row in csv.reader(io.StringIO(text), delimiter=delimiter):
            if len(row) > 1 or (row and row[0].strip()):
                return row
        return []

    def parse_csv(self, content: bytes) -> Dataset:
        """
        Parse delimited text with a header row.

        Args:
            content: Raw CSV bytes

        Returns:
            Dataset with normalized column names and coerced cells
        """
        text = self._decode(content)
        delimiter = self._detect_delimiter(text)

        try:
            header = self._read_header(text, delimiter)
        except csv.Error as e:
            raise MalformedSourceError(f"CSV parsing failed: {str(e)}") from e
        if not header:
            raise EmptyResultError('No data found in CSV file')

        columns = normalize_headers(header)
        if len(columns) > self.max_columns:
            raise SizeExceededError(
                f"Data validation failed: Too many columns (max {self.max_columns})"
            )

        width = len(columns)
        skipped = []

        def truncate_row(bad_line: List[str]) -> List[str]:
            skipped.append(len(bad_line))
            return bad_line[:width]

        try:
            frame = pd.read_csv(
                io.StringIO(text),
                sep=delimiter,
                header=0,
                names=columns,
                index_col=False,
                dtype=object,
                na_filter=False,
                skip_blank_lines=True,
                engine='python',
                on_bad_lines=truncate_row,
            )
        except (pd.errors.ParserError, csv.Error) as e:
            raise MalformedSourceError(f"Failed to parse CSV file: {str(e)}") from e
        except pd.errors.EmptyDataError as e:
            raise EmptyResultError('No data found in CSV file') from e

        if skipped:
            logger.warning(f"Truncated {len(skipped)} CSV rows with more than {width} fields")
        if len(frame) > self.max_rows:
            raise SizeExceededError(
                f"Data validation failed: Dataset too large (max {self.max_rows:,} rows)"
            )

        values = [[coerce_cell(v) for v in frame[column].tolist()] for column in columns]
        return Dataset.from_rows(columns, zip(*values))

    def parse_excel(self, content: bytes) -> Dataset:
        """
        Parse the first sheet of an Excel workbook.

        Args:
            content: Raw .xlsx or .xls bytes

        Returns:
            Dataset built from the sheet's header row and data rows
        """
        try:
            workbook = pd.ExcelFile(io.BytesIO(content))
        except Exception as e:
            logger.error(f"Excel processing error: {str(e)}")
            raise MalformedSourceError(
                "Failed to process Excel file. Please ensure it's a valid .xlsx or .xls file."
            ) from e

        with workbook:
            if not workbook.sheet_names:
                raise MalformedSourceError('No sheets found in Excel file')
            try:
                frame = workbook.parse(workbook.sheet_names[0], dtype=object)
            except Exception as e:
                logger.error(f"Worksheet read error: {str(e)}")
                raise MalformedSourceError('Unable to read worksheet') from e

        frame = frame.dropna(how='all')
        columns = unique_names([str(column) for column in frame.columns])
        if len(columns) > self.max_columns:
            raise SizeExceededError(
                f"Data validation failed: Too many columns (max {self.max_columns})"
            )

        values = [[coerce_excel_cell(v) for v in frame.iloc[:, i].tolist()] for i in range(len(columns))]
        return Dataset.from_rows(columns, zip(*values))
