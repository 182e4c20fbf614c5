"""
Platform adapters for the durakcore engine.

This package provides the adapter interface that transports implement to
receive per-player views and events from the engine.
"""

from durakcore.adapters.base import PlatformAdapter
from durakcore.adapters.dummy import DummyAdapter

__all__ = ["PlatformAdapter", "DummyAdapter"]
