"""Template resolution and bulk task fan-out for crowd-labeling projects."""

from .clients import PersistenceError
from .engine import CommitResult, ProvisioningSession
from .services import AIGenerationError, ColumnMismatchError, CsvImportError
from .template import TemplateParseError

__all__ = [
    "AIGenerationError",
    "ColumnMismatchError",
    "CommitResult",
    "CsvImportError",
    "PersistenceError",
    "ProvisioningSession",
    "TemplateParseError",
]
