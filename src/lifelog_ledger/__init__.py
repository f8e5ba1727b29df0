"""Public API for lifelog_ledger package."""

__version__ = "0.1.0"

from .api import ApiClient, LifelogQuery
from .errors import (
    ApiError,
    ConfigError,
    DuplicateEntryError,
    LifelogError,
    ProcessingError,
    StorageError,
    ValidationError,
)
from .ledger import Ledger, LedgerEntry
from .lifelogs import LifelogService
from .processor import LifelogProcessor, RunResult, Stats
from .schemas import ContentNode, Lifelog, Page

__all__ = [
    "ApiClient",
    "ApiError",
    "ConfigError",
    "ContentNode",
    "DuplicateEntryError",
    "Ledger",
    "LedgerEntry",
    "Lifelog",
    "LifelogError",
    "LifelogProcessor",
    "LifelogQuery",
    "LifelogService",
    "Page",
    "ProcessingError",
    "RunResult",
    "Stats",
    "StorageError",
    "ValidationError",
]
