"""
Event system for the durakcore engine.

This package provides the event bus that state transitions publish to and
that transports and adapters subscribe to.
"""

from durakcore.events.emitter import (
    EventEmitter,
    EventBus,
    EventPriority,
    EngineEventType,
)

__all__ = ["EventEmitter", "EventBus", "EventPriority", "EngineEventType"]
