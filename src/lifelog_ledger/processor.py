# -*- coding: utf-8 -*-
"""
Run orchestration: fetch lifelogs, hand each new one to a handler, ledger it.

A run fetches the whole eligible set first; an ApiError or ValidationError
there aborts the run. After that, records are handled one at a time in
fetch order. A record whose handler fails (raises or returns False), or
whose ledger write is refused (a duplicate id, a locked database), is
reported as a ProcessingError and left out of the ledger so the next run
retries it. A closed ledger is not a per-record problem and propagates.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from .api import ApiClient, LifelogQuery
from .config import Settings
from .errors import ProcessingError, StorageError
from .ledger import Ledger, LedgerEntry
from .lifelogs import DEFAULT_MAX_ITEMS, LifelogService
from .schemas import Lifelog
from .utils import eprint, progress_print

LifelogHandler = Callable[[Lifelog], Optional[bool]]


def noop_handler(lifelog: Lifelog, verbose: bool=False) -> None:
    """Placeholder handler; only reports what it was given."""
    eprint(f"[Processor] Handling lifelog \"{lifelog.title}\" ({lifelog.id})", verbose)
    eprint(f"  Start: {lifelog.start_time}", verbose)
    eprint(f"  End: {lifelog.end_time}", verbose)
    eprint(f"  Content nodes: {len(lifelog.contents)}", verbose)


@dataclass
class RunResult:
    fetched: int = 0
    processed_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    new_records: List[Lifelog] = field(default_factory=list)
    errors: List[ProcessingError] = field(default_factory=list)


@dataclass(frozen=True)
class Stats:
    total_processed: int
    last_processed_at: Optional[datetime]


class LifelogProcessor:
    def __init__(self, service: LifelogService, ledger: Ledger, handler: Optional[LifelogHandler]=None,
                 query: Optional[LifelogQuery]=None, max_items: int=DEFAULT_MAX_ITEMS,
                 verbose: bool=False, quiet: bool=False):
        self.service = service
        self.ledger = ledger
        self.handler = handler or (lambda lifelog: noop_handler(lifelog, verbose))
        self.query = query
        self.max_items = max_items
        self.verbose = verbose
        self.quiet = quiet
        self._owned_client: Optional[ApiClient] = None

    @classmethod
    def from_settings(cls, settings: Settings, handler: Optional[LifelogHandler]=None,
                      query: Optional[LifelogQuery]=None, max_items: int=DEFAULT_MAX_ITEMS,
                      verbose: bool=False, quiet: bool=False) -> LifelogProcessor:
        ledger = Ledger(settings.database_path, verbose=verbose)
        client = ApiClient(api_key=settings.api_key, base_url=settings.base_url, verbose=verbose)
        processor = cls(LifelogService(client, verbose=verbose), ledger, handler=handler, query=query,
                        max_items=max_items, verbose=verbose, quiet=quiet)
        processor._owned_client = client
        return processor

    def _handle(self, lifelog: Lifelog) -> Optional[ProcessingError]:
        try:
            outcome = self.handler(lifelog)
        except Exception as e:
            return ProcessingError(f"Failed to process lifelog: {lifelog.title}", lifelog.id, e)
        if outcome is False:
            return ProcessingError(f"Handler rejected lifelog: {lifelog.title}", lifelog.id)
        try:
            self.ledger.mark_as_processed(LedgerEntry.from_lifelog(lifelog))
        except StorageError as e:
            if self.ledger.closed:
                raise
            return ProcessingError(f"Failed to record lifelog: {lifelog.title}", lifelog.id, e)
        return None

    def run(self) -> RunResult:
        progress_print("Fetching lifelogs...", self.quiet)
        lifelogs = self.service.fetch_all(self.query, max_items=self.max_items)
        progress_print(f"Found {len(lifelogs)} lifelogs", self.quiet)

        result = RunResult(fetched=len(lifelogs))
        for lifelog in lifelogs:
            if self.ledger.is_processed(lifelog.id):
                eprint(f"[Processor] Skipping already processed lifelog: {lifelog.title}", self.verbose)
                result.skipped_count += 1
                continue

            progress_print(f"Processing new lifelog: {lifelog.title}", self.quiet)
            error = self._handle(lifelog)
            if error is not None:
                progress_print(f"Failed to process lifelog {lifelog.id}: {error}", self.quiet)
                result.errors.append(error)
                result.failed_count += 1
                continue
            result.new_records.append(lifelog)
            result.processed_count += 1

        return result

    def get_stats(self) -> Stats:
        return Stats(
            total_processed=self.ledger.count(),
            last_processed_at=self.ledger.last_processed_at(),
        )

    def close(self):
        self.ledger.close()
        if self._owned_client is not None:
            self._owned_client.close()
            self._owned_client = None

    def __enter__(self) -> LifelogProcessor:
        return self

    def __exit__(self, *exc):
        self.close()
