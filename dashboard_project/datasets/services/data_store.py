"""
Per-session store for the dataset currently loaded in the dashboard.
"""
import dataclasses
import datetime
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from django.conf import settings
from django.core.cache import caches
from django.utils import timezone

from analytics.services import AnalyticsSummary, calculate_statistics
from datasets.models import DatasetUpload
from shared.tabular import CellValue, Dataset, is_absent
from shared.utils import get_logger
from shared.utils.exceptions import DataError

from .file_processor import FileProcessor, get_extension

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 24 * 60 * 60
HISTORY_LIMIT = 10


@dataclass(frozen=True)
class DatasetInfo:
    """Metadata about an ingested file."""

    id: str
    name: str
    rows: int
    columns: int
    size: int
    upload_date: datetime.datetime
    user_id: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'rows': self.rows,
            'columns': self.columns,
            'size': self.size,
            'uploadDate': self.upload_date.isoformat(),
            'userId': self.user_id,
        }


@dataclass(frozen=True)
class LoadedDataset:
    """A dataset together with its metadata and analytics, replaced as a unit."""

    dataset: Dataset
    info: DatasetInfo
    analytics: AnalyticsSummary


class DataStore:
    """
    Holds at most one loaded dataset per key.

    Entries live in a Django cache backend so each browser session gets its
    own dataset. Every change replaces the whole entry; nothing is patched
    in place.
    """

    def __init__(
        self,
        key: str,
        cache=None,
        processor: Optional[FileProcessor] = None,
        timeout: Optional[int] = None,
    ):
        """
        Initialize the data store.

        Args:
            key: Session identifier the entry is stored under
            cache: Cache backend, the default cache if not provided
            processor: File processor used for ingestion
            timeout: Seconds an entry is kept
        """
        self.key = f"datasets:current:{key}"
        self.cache = cache if cache is not None else caches['default']
        self.processor = processor or FileProcessor()
        if timeout is None:
            timeout = getattr(settings, 'DATASET_CACHE_TIMEOUT', DEFAULT_TIMEOUT)
        self.timeout = timeout

    def _save(self, loaded: LoadedDataset) -> None:
        self.cache.set(self.key, loaded, self.timeout)

    def get_current(self) -> Optional[LoadedDataset]:
        """Return the loaded dataset, or None."""
        return self.cache.get(self.key)

    def require_current(self) -> LoadedDataset:
        """
        Return the loaded dataset.

        Raises:
            DataError: No dataset is loaded
        """
        loaded = self.get_current()
        if loaded is None:
            raise DataError('No dataset loaded')
        return loaded

    @property
    def has_data(self) -> bool:
        loaded = self.get_current()
        return loaded is not None and loaded.dataset.row_count > 0

    def load_file(self, file, user_id: str = '') -> LoadedDataset:
        """
        Ingest and analyze an uploaded file, replacing the current dataset.

        On failure the previous dataset stays in place and the error
        propagates.

        Args:
            file: Uploaded file with ``name``, ``size`` and ``read()``
            user_id: Username of the uploader

        Returns:
            The newly loaded dataset
        """
        dataset = self.processor.process(file)

        info = DatasetInfo(
            id=f"dataset_{uuid.uuid4().hex}",
            name=file.name,
            rows=dataset.row_count,
            columns=dataset.column_count,
            size=file.size or 0,
            upload_date=timezone.now(),
            user_id=user_id or '',
        )

        logger.info('Calculating analytics...')
        analytics = calculate_statistics(dataset)

        DatasetUpload.objects.create(
            dataset_id=info.id,
            name=info.name,
            file_type=get_extension(info.name),
            file_size=info.size,
            row_count=info.rows,
            column_count=info.columns,
            numeric_columns=analytics.numeric_columns,
            string_columns=analytics.string_columns,
            statistics=analytics.to_dict()['summary'],
            uploaded_by=info.user_id,
        )

        loaded = LoadedDataset(dataset=dataset, info=info, analytics=analytics)
        self._save(loaded)
        logger.info(f"Loaded dataset '{info.name}' with {info.rows} rows")
        return loaded

    def update_data(
        self,
        records: Union[Dataset, Sequence[Mapping[str, CellValue]]],
    ) -> LoadedDataset:
        """
        Replace the rows of the current dataset and recompute analytics.

        Args:
            records: New dataset or row mappings

        Returns:
            The updated dataset
        """
        current = self.require_current()
        if isinstance(records, Dataset):
            dataset = records
        else:
            dataset = Dataset.from_records(list(records))
        self.processor.validate(dataset)

        info = dataclasses.replace(
            current.info,
            rows=dataset.row_count,
            columns=dataset.column_count,
        )
        loaded = LoadedDataset(
            dataset=dataset,
            info=info,
            analytics=calculate_statistics(dataset),
        )
        self._save(loaded)
        logger.info(f"Updated dataset '{info.name}' to {info.rows} rows")
        return loaded

    def clear(self) -> None:
        """Drop the current dataset."""
        self.cache.delete(self.key)
        logger.info('Data store cleared')

    def get_data_sample(self, sample_size: int = 100) -> List[Dict[str, CellValue]]:
        """First rows of the current dataset, empty when nothing is loaded."""
        loaded = self.get_current()
        if loaded is None:
            return []
        return loaded.dataset.head(sample_size)

    def get_column_data(self, column: str) -> List[CellValue]:
        """
        Non-absent values of one column.

        Raises:
            DataError: No dataset is loaded or the column does not exist
        """
        loaded = self.require_current()
        if column not in loaded.dataset.columns:
            raise DataError(f"Column '{column}' not found")
        return [v for v in loaded.dataset.column_values(column) if not is_absent(v)]

    def get_data_context(self) -> Dict[str, Any]:
        """
        File name, rows and analytics handed to the AI assistant as-is.

        Raises:
            DataError: No dataset is loaded
        """
        loaded = self.require_current()
        return {
            'fileName': loaded.info.name,
            'data': loaded.dataset.to_records(),
            'analytics': loaded.analytics.to_dict(),
        }

    def get_dataset_summaries(
        self,
        limit: int = HISTORY_LIMIT,
        user_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Most recent uploads, newest first.

        Args:
            limit: Maximum number of entries
            user_id: Only uploads by this user when given

        Returns:
            List of upload summaries
        """
        uploads = DatasetUpload.objects.all()
        if user_id is not None:
            uploads = uploads.filter(uploaded_by=user_id)
        return [upload.to_summary() for upload in uploads[:limit]]
