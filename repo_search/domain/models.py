"""Pydantic models shared by the search services and the pipeline."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, StrictBool, StrictInt, StrictStr


class RequestDescriptor(BaseModel):
    """Validated search request; only ``build_request`` creates these."""

    model_config = ConfigDict(frozen=True)

    query: str
    url: str


class SearchResultItem(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: StrictStr
    full_name: StrictStr


class SearchResult(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    total_count: StrictInt
    incomplete_results: StrictBool
    items: tuple[SearchResultItem, ...]

    def full_names(self) -> tuple[str, ...]:
        return tuple(item.full_name for item in self.items)


class ErrorMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str

    @classmethod
    def from_text(cls, text: str) -> "ErrorMessage":
        digest = hashlib.sha1(text.encode("utf-8")).hexdigest()[:12]
        return cls(id=digest, text=text)


class PipelineStatus(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    FETCHING = "fetching"


@dataclass(frozen=True, slots=True)
class PipelineState:
    """Point-in-time copy of what the controller publishes.

    Holds the query exactly as typed, including text that cannot be encoded.
    """

    query: str = ""
    results: tuple[str, ...] = ()
    error: ErrorMessage | None = None
    status: PipelineStatus = PipelineStatus.IDLE
    active_token: int = 0


__all__ = [
    "RequestDescriptor",
    "SearchResultItem",
    "SearchResult",
    "ErrorMessage",
    "PipelineStatus",
    "PipelineState",
]
