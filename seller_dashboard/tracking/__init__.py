"""
Event Tracking Module
"""
from .events import EventType, event_increments, record_event

__all__ = [
    "EventType",
    "event_increments",
    "record_event",
]
