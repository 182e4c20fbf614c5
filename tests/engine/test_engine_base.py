"""
Tests for the base GameEngine class.

This module contains tests for the GameEngine base class
to ensure it provides the expected interface and behavior.
"""

import pytest
from unittest.mock import patch
import time

from durakcore.engine.base import GameEngine
from durakcore.adapters import DummyAdapter
from durakcore.events import EventEmitter, EngineEventType


class MockEngine(GameEngine):
    """Mock implementation of GameEngine for testing."""

    async def initialize(self):
        """Initialize the engine."""
        await super().initialize()

    async def shutdown(self):
        """Shut down the engine."""
        await super().shutdown()

    async def start_game(self):
        """Start a new game."""
        self.event_bus.emit(
            EngineEventType.GAME_CREATED,
            {"game_id": "test_game", "timestamp": time.time()},
        )

    async def execute_player_action(self, player_id, action, **kwargs):
        """Execute a player action."""
        return True

    async def render_state(self):
        """Render the current game state."""
        pass


@pytest.fixture
def engine():
    """Create a MockEngine instance for testing."""
    return MockEngine(DummyAdapter())


def test_initialization(engine):
    """Test that the engine initializes correctly."""
    assert engine is not None
    assert isinstance(engine.adapter, DummyAdapter)
    assert engine.config == {}
    assert engine.event_bus is not None
    assert engine.state is None


def test_config():
    """Test that the engine uses the provided config."""
    config = {"test_key": "test_value"}
    engine = MockEngine(DummyAdapter(), config)
    assert engine.config == config


def test_cannot_instantiate_abstract_engine():
    with pytest.raises(TypeError):
        GameEngine(DummyAdapter())


@pytest.mark.asyncio
@patch.object(DummyAdapter, "initialize")
async def test_initialize(mock_initialize, engine):
    """Test that initialize calls the adapter's initialize method."""
    await engine.initialize()
    mock_initialize.assert_called_once()


@pytest.mark.asyncio
@patch.object(DummyAdapter, "shutdown")
async def test_shutdown(mock_shutdown, engine):
    """Test that shutdown calls the adapter's shutdown method."""
    await engine.shutdown()
    mock_shutdown.assert_called_once()


@pytest.mark.asyncio
@patch.object(EventEmitter, "emit")
async def test_start_game(mock_emit, engine):
    """Test that start_game emits the expected event."""
    await engine.start_game()

    mock_emit.assert_called()
    args = mock_emit.call_args[0]
    assert args[0] == EngineEventType.GAME_CREATED


@pytest.mark.asyncio
async def test_abstract_methods(engine):
    """Test that the abstract methods are implemented by the mock engine."""
    await engine.initialize()
    await engine.shutdown()
    await engine.start_game()
    assert await engine.execute_player_action("test_player_id", "test_action")
    await engine.render_state()
