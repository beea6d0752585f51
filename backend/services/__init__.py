"""Services for the application."""

from .session import SessionManager
from .record_store import RecordStore, RecordStoreError, AuthenticationError
from .data_processor import DataProcessor
from .csv_codec import CsvCodec
from .importer import ActivityImporter
from .timer import TimerService

__all__ = [
    "SessionManager",
    "RecordStore",
    "RecordStoreError",
    "AuthenticationError",
    "DataProcessor",
    "CsvCodec",
    "ActivityImporter",
    "TimerService",
]
