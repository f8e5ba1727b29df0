import itertools
from typing import Any, Dict, List, Optional

import pytest

from lifelog_ledger.api import LifelogQuery
from lifelog_ledger.ledger import Ledger
from lifelog_ledger.schemas import Page, parse_page

_ids = itertools.count(1)


def lifelog_dict(**overrides) -> Dict[str, Any]:
    data = {
        "id": f"lifelog-{next(_ids)}",
        "title": "Test Lifelog",
        "markdown": "# Test Content\n\nThis is a test lifelog.",
        "contents": [
            {
                "type": "heading1",
                "content": "Test Content",
                "startTime": "2025-01-01T10:00:00Z",
                "endTime": "2025-01-01T10:00:05Z",
                "startOffsetMs": 0,
                "endOffsetMs": 5000,
                "children": [],
            },
            {
                "type": "paragraph",
                "content": "This is a test lifelog.",
                "startTime": "2025-01-01T10:00:05Z",
                "endTime": "2025-01-01T10:00:10Z",
                "startOffsetMs": 5000,
                "endOffsetMs": 10000,
                "children": [],
            },
        ],
        "startTime": "2025-01-01T10:00:00Z",
        "endTime": "2025-01-01T10:05:00Z",
        "isStarred": True,
        "updatedAt": "2025-01-01T10:05:00Z",
    }
    data.update(overrides)
    return data


def response_dict(lifelogs: List[Dict[str, Any]], next_cursor: Optional[str]=None) -> Dict[str, Any]:
    meta: Dict[str, Any] = {"count": len(lifelogs)}
    if next_cursor:
        meta["nextCursor"] = next_cursor
    return {"data": {"lifelogs": lifelogs}, "meta": {"lifelogs": meta}}


class FakeClient:
    """Stands in for ApiClient: replays queued pages and records every query."""

    def __init__(self):
        self.pages: List[Page] = []
        self.calls: List[LifelogQuery] = []
        self.failure: Optional[Exception] = None

    def add_page(self, lifelogs: List[Dict[str, Any]], next_cursor: Optional[str]=None):
        self.pages.append(parse_page(response_dict(lifelogs, next_cursor)))

    def fetch_page(self, query: Optional[LifelogQuery]=None) -> Page:
        self.calls.append(query or LifelogQuery())
        if self.failure is not None:
            raise self.failure
        if not self.pages:
            raise RuntimeError("FakeClient: no more pages configured")
        return self.pages.pop(0)

    def close(self):
        pass


class FakeResponse:
    def __init__(self, status_code: int=200, payload: Any=None, text: Optional[str]=None, reason: str="OK"):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        self.text = text if text is not None else ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    """Stands in for requests.Session.get."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def get(self, url, headers=None, params=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "params": params, "timeout": timeout})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        self.closed = True


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def ledger():
    ledger = Ledger(":memory:")
    yield ledger
    ledger.close()


@pytest.fixture
def make_lifelog():
    return lifelog_dict


@pytest.fixture
def make_response():
    return response_dict
