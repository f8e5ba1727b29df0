# -*- coding: utf-8 -*-
"""
Error taxonomy.

Every error raised by this package derives from LifelogError and carries a
``kind`` tag so callers can branch on it without importing each class:

    api         - the HTTP call did not succeed (status + body)
    validation  - a payload did not match the expected shape
    storage     - the ledger is closed, unavailable, or rejected a write
    processing  - one record's handling failed (non-fatal to a run)
    config      - required configuration is missing
"""

from __future__ import annotations
from typing import Any, Optional


class LifelogError(Exception):
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ApiError(LifelogError):
    kind = "api"

    def __init__(self, message: str, status_code: Optional[int]=None, response_text: Optional[str]=None):
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text


class ValidationError(LifelogError):
    kind = "validation"

    def __init__(self, message: str, details: Any=None):
        super().__init__(message)
        self.details = details


class StorageError(LifelogError):
    kind = "storage"

    def __init__(self, message: str, cause: Optional[BaseException]=None):
        super().__init__(message)
        self.cause = cause


class DuplicateEntryError(StorageError):
    """The ledger already holds an entry for this lifelog id."""

    def __init__(self, lifelog_id: str, cause: Optional[BaseException]=None):
        super().__init__(f"Lifelog {lifelog_id} is already in the ledger", cause)
        self.lifelog_id = lifelog_id


class ProcessingError(LifelogError):
    kind = "processing"

    def __init__(self, message: str, lifelog_id: str, cause: Optional[BaseException]=None):
        super().__init__(message)
        self.lifelog_id = lifelog_id
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} ({self.lifelog_id}): {self.cause}"
        return f"{self.message} ({self.lifelog_id})"


class ConfigError(LifelogError):
    kind = "config"
