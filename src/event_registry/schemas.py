from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel


class EventSummary(BaseModel):
    name: str
    payload_types: List[str]
    subscriber_count: int
    history_size: int


class SubscriberInfo(BaseModel):
    id: str
    callback: str


class HistoryRecord(BaseModel):
    payload: Any
    payload_type: str
    timestamp: float
    duration_ms: float


class HistoryResponse(BaseModel):
    events: Dict[str, List[HistoryRecord]]
