"""Draft task services."""

from .bulk_ai import AIGenerationError, BulkAIGenerator
from .csv_import import ColumnMismatchError, CsvImporter, CsvImportError
from .draft_store import DraftTaskStore
from .fanout import FanOutPlanner, FanOutSettings
from .worker_filter import filter_workers

__all__ = [
    "AIGenerationError",
    "BulkAIGenerator",
    "ColumnMismatchError",
    "CsvImportError",
    "CsvImporter",
    "DraftTaskStore",
    "FanOutPlanner",
    "FanOutSettings",
    "filter_workers",
]
