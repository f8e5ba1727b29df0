# -*- coding: utf-8 -*-
"""Cursor pagination over the lifelogs endpoint."""

from __future__ import annotations
from dataclasses import replace
from typing import List, Optional

from .api import ApiClient, LifelogQuery
from .schemas import Lifelog, Page
from .utils import eprint

PAGE_LIMIT        = 10   # the API never returns more than this per request
DEFAULT_MAX_ITEMS = 10

DEFAULT_QUERY = LifelogQuery(include_markdown=True, include_headings=True, direction="desc")


class LifelogService:
    def __init__(self, client: ApiClient, verbose: bool=False):
        self.client = client
        self.verbose = verbose

    def _log(self, msg: str):
        eprint(f"[API] {msg}", self.verbose)

    def fetch_all(self, query: Optional[LifelogQuery]=None, max_items: int=DEFAULT_MAX_ITEMS,
                  page_size: int=PAGE_LIMIT) -> List[Lifelog]:
        """
        Follows ``nextCursor`` until ``max_items`` lifelogs have been collected
        or the API runs out of pages. Lifelogs keep the order the pages
        delivered them in.

        Each request asks for at most ``min(page_size, PAGE_LIMIT, remaining)``
        items. An empty page that still carries a cursor is followed, since
        server-side filters can leave a page blank; the loop only gives up
        early if the server hands back the cursor it was just sent.
        """
        base = query or DEFAULT_QUERY
        per_page = min(page_size, PAGE_LIMIT)
        collected: List[Lifelog] = []
        cursor = base.cursor
        requests_made = 0

        while True:
            remaining = max_items - len(collected)
            limit = min(per_page, remaining)
            if limit <= 0:
                break
            page = self.client.fetch_page(replace(base, cursor=cursor, limit=limit))
            requests_made += 1
            collected.extend(page.lifelogs)
            self._log(f"Page {requests_made}: {len(page.lifelogs)} lifelogs, total so far {len(collected)}")
            if page.next_cursor == cursor:
                self._log(f"Server repeated cursor {cursor!r}; stopping")
                break
            cursor = page.next_cursor
            if not cursor or len(collected) >= max_items:
                break

        return collected[:max(max_items, 0)]

    def fetch_page(self, cursor: Optional[str]=None) -> Page:
        return self.client.fetch_page(LifelogQuery(cursor=cursor, include_markdown=True, include_headings=True))

    def fetch_starred(self, max_items: int=DEFAULT_MAX_ITEMS) -> List[Lifelog]:
        return self.fetch_all(replace(DEFAULT_QUERY, is_starred=True), max_items=max_items)
