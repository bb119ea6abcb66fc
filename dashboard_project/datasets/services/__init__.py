from .file_processor import FileProcessor
from .data_store import DataStore, DatasetInfo, LoadedDataset

__all__ = ['FileProcessor', 'DataStore', 'DatasetInfo', 'LoadedDataset']
