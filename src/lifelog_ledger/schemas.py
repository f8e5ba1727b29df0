# -*- coding: utf-8 -*-
"""
Typed shapes of the /v1/lifelogs payload.

The API speaks camelCase; the models expose snake_case attributes and keep
the wire names as aliases, so ``Lifelog.model_validate(raw)`` accepts the
JSON as delivered and ``to_dict()`` gives it back in the same form.
Validation is structural: primitive types are strict (a numeric id or a
string "true" is rejected) and the only cross-field checks are the
ordering of offsets and of a lifelog's start/end times.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, field_validator, model_validator

from .errors import ValidationError


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class ContentNode(_WireModel):
    type: StrictStr
    content: StrictStr
    start_time: Optional[StrictStr] = Field(None, alias="startTime")
    end_time: Optional[StrictStr] = Field(None, alias="endTime")
    start_offset_ms: Optional[StrictInt] = Field(None, alias="startOffsetMs")
    end_offset_ms: Optional[StrictInt] = Field(None, alias="endOffsetMs")
    children: List[ContentNode] = Field(default_factory=list)
    speaker_name: Optional[StrictStr] = Field(None, alias="speakerName")
    speaker_identifier: Optional[Literal["user"]] = Field(None, alias="speakerIdentifier")

    @field_validator("children", mode="before")
    @classmethod
    def _null_children(cls, v):
        return [] if v is None else v

    @model_validator(mode="after")
    def _check_offsets(self):
        if self.start_offset_ms is not None and self.end_offset_ms is not None:
            if self.start_offset_ms > self.end_offset_ms:
                raise ValueError(f"startOffsetMs {self.start_offset_ms} is after endOffsetMs {self.end_offset_ms}")
        return self

    def walk(self):
        """Yields this node and all of its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


ContentNode.model_rebuild()


def _parse_timestamp(s: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(s[:-1] + "+00:00" if s.endswith("Z") else s)
    except ValueError:
        return None


class Lifelog(_WireModel):
    id: StrictStr
    title: StrictStr
    markdown: Optional[StrictStr] = None
    contents: List[ContentNode]
    start_time: StrictStr = Field(..., alias="startTime")
    end_time: StrictStr = Field(..., alias="endTime")
    is_starred: StrictBool = Field(..., alias="isStarred")
    updated_at: StrictStr = Field(..., alias="updatedAt")

    @model_validator(mode="after")
    def _check_times(self):
        start, end = _parse_timestamp(self.start_time), _parse_timestamp(self.end_time)
        # Only compare when both are parseable and both naive or both aware.
        if start is not None and end is not None and (start.tzinfo is None) == (end.tzinfo is None):
            if start > end:
                raise ValueError(f"startTime {self.start_time} is after endTime {self.end_time}")
        return self

    def nodes(self):
        for node in self.contents:
            yield from node.walk()


class MetaLifelogs(_WireModel):
    next_cursor: Optional[StrictStr] = Field(None, alias="nextCursor")
    count: StrictInt


class Meta(_WireModel):
    lifelogs: MetaLifelogs


class LifelogsResponseData(_WireModel):
    lifelogs: List[Lifelog]


class LifelogsResponse(_WireModel):
    data: LifelogsResponseData
    meta: Meta


@dataclass(frozen=True)
class Page:
    lifelogs: List[Lifelog] = field(default_factory=list)
    next_cursor: Optional[str] = None
    count: int = 0

    @classmethod
    def from_response(cls, response: LifelogsResponse) -> Page:
        return cls(
            lifelogs=list(response.data.lifelogs),
            next_cursor=response.meta.lifelogs.next_cursor or None,
            count=response.meta.lifelogs.count,
        )


def _describe(err: pydantic.ValidationError) -> str:
    first = err.errors()[0]
    loc = ".".join(str(p) for p in first.get("loc", ())) or "<root>"
    extra = f" (+{err.error_count() - 1} more)" if err.error_count() > 1 else ""
    return f"{loc}: {first.get('msg')}{extra}"

def parse_response(raw: Any) -> LifelogsResponse:
    try:
        return LifelogsResponse.model_validate(raw)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid lifelogs response at {_describe(e)}", e.errors()) from e

def parse_page(raw: Any) -> Page:
    return Page.from_response(parse_response(raw))

def parse_lifelog(raw: Any) -> Lifelog:
    try:
        return Lifelog.model_validate(raw)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid lifelog at {_describe(e)}", e.errors()) from e
