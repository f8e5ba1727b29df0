# -*- coding: utf-8 -*-
"""HTTP client for the Limitless lifelogs endpoint."""

from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

import requests

from .config import API_BASE_URL, get_api_key
from .errors import ApiError, ValidationError
from .schemas import Page, parse_page
from .utils import eprint

API_VERSION = "v1"

_WIRE_NAMES = {
    "include_markdown": "includeMarkdown",
    "include_headings": "includeHeadings",
    "is_starred": "isStarred",
}


@dataclass(frozen=True)
class LifelogQuery:
    timezone: Optional[str] = None
    date: Optional[str] = None          # YYYY-MM-DD
    start: Optional[str] = None
    end: Optional[str] = None
    cursor: Optional[str] = None
    direction: Optional[str] = None     # "asc" | "desc"
    include_markdown: Optional[bool] = None
    include_headings: Optional[bool] = None
    limit: Optional[int] = None
    is_starred: Optional[bool] = None

    def __post_init__(self):
        if self.direction not in (None, "asc", "desc"):
            raise ValueError(f"direction must be 'asc' or 'desc', not {self.direction!r}")

    def to_params(self) -> Dict[str, str]:
        params: Dict[str, str] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            params[_WIRE_NAMES.get(f.name, f.name)] = str(value)
        return params


class ApiClient:
    def __init__(self, api_key: Optional[str]=None, base_url: str=API_BASE_URL, verbose: bool=False,
                 session: Optional[requests.Session]=None, timeout: Optional[float]=None):
        self.key = api_key or get_api_key()
        self.base_url = base_url.rstrip("/")
        self.verbose = verbose
        self.timeout = timeout
        self.session = session or requests.Session()

    def _log(self, msg: str):
        eprint(f"[API] {msg}", self.verbose)

    def request(self, endpoint: str, params: Dict[str,Any]) -> Any:
        url = f"{self.base_url}/{API_VERSION}/{endpoint.lstrip('/')}"
        headers = {"X-API-Key": self.key, "Accept": "application/json"}
        self._log(f"GET {url} params={params}")
        try:
            resp = self.session.get(url, headers=headers, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(f"API request failed: {e}") from e
        if not resp.ok:
            self._log(f"{resp.status_code} {resp.reason}: {resp.text}")
            raise ApiError(f"API request failed: {resp.status_code} {resp.reason}", resp.status_code, resp.text)
        try:
            return resp.json()
        except ValueError as e:
            raise ValidationError(f"API response is not valid JSON: {e}", resp.text) from e

    def fetch_page(self, query: Optional[LifelogQuery]=None) -> Page:
        data = self.request("lifelogs", (query or LifelogQuery()).to_params())
        page = parse_page(data)
        self._log(f"Fetched page: {page.count} items, next cursor {page.next_cursor!r}")
        return page

    def close(self):
        self.session.close()
