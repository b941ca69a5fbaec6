"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from chuk_mcp_tuning.notation.context import EvaluationContext
from chuk_mcp_tuning.core.quantity import Quantity


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_midi_path(temp_dir: Path) -> Path:
    """Path for a temporary MIDI file."""
    return temp_dir / "test.mid"


@pytest.fixture
def library_path() -> Path:
    """Path to the built-in scale library."""
    return Path(__file__).parent.parent / "src" / "chuk_mcp_tuning" / "library" / "scales"


@pytest.fixture
def context() -> EvaluationContext:
    """Evaluation context with A4 = 440 Hz as the base frequency."""
    return EvaluationContext(25, Quantity.hertz(440, 25))
