"""Pure event occurrence engine for gameWiki.

This package computes event status, current occurrences and predicted future
occurrences from in-memory `GameEvent` records. It must not import Django or
perform any file I/O; callers supply the reference time explicitly.
"""

from .calculator import get_current_occurrence, get_event_status, is_event_active
from .predictor import predict_future_occurrences
from .types import (
    EventOccurrence,
    EventStatus,
    EventType,
    GameEvent,
    PredictedOccurrence,
    RecurrenceConfig,
    RecurrenceType,
)

__all__ = [
    "EventOccurrence",
    "EventStatus",
    "EventType",
    "GameEvent",
    "PredictedOccurrence",
    "RecurrenceConfig",
    "RecurrenceType",
    "get_current_occurrence",
    "get_event_status",
    "is_event_active",
    "predict_future_occurrences",
]
