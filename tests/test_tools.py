"""
Tests for MCP tools.

Tests the MCP tool implementations for notation evaluation, respelling,
scale discovery and MIDI tuning export.
"""

import json
from pathlib import Path

import mido
import pytest

from chuk_mcp_tuning.library import ScaleLibrary
from chuk_mcp_tuning.models import FormattingOptions, NotationSettings


# Mock MCP server for testing tools
class MockMCPServer:
    """Mock MCP server that just stores registered tools."""

    def __init__(self, name: str):
        self.name = name
        self.tools: dict = {}

    def tool(self, func):
        """Decorator to register a tool."""
        self.tools[func.__name__] = func
        return func


@pytest.fixture
def notation_tools():
    """Registered notation tools with default settings."""
    from chuk_mcp_tuning.tools.notation import register_notation_tools

    mcp = MockMCPServer("test")
    return register_notation_tools(mcp, NotationSettings(), FormattingOptions())


@pytest.fixture
def library_tools(library_path: Path, temp_dir: Path):
    """Registered library tools writing into a temporary project."""
    from chuk_mcp_tuning.tools.library import register_library_tools

    mcp = MockMCPServer("test")
    library = ScaleLibrary(library_path=library_path, project_path=temp_dir / "scales")
    return register_library_tools(mcp, library, temp_dir / "output")


class TestRegistration:
    """Tests for tool registration."""

    def test_notation_tools_registered(self):
        """All notation tools reach the server."""
        from chuk_mcp_tuning.tools.notation import register_notation_tools

        mcp = MockMCPServer("test")
        tools = register_notation_tools(mcp, NotationSettings())
        assert set(mcp.tools) == set(tools) == {
            "tuning_evaluate_expression",
            "tuning_evaluate_scale",
            "tuning_format_interval",
        }

    def test_library_tools_registered(self, library_path: Path, temp_dir: Path):
        """All library tools reach the server."""
        from chuk_mcp_tuning.tools.library import register_library_tools

        mcp = MockMCPServer("test")
        tools = register_library_tools(mcp, ScaleLibrary(library_path=library_path), temp_dir)
        assert set(mcp.tools) == set(tools) == {
            "tuning_list_scales",
            "tuning_describe_scale",
            "tuning_copy_scale_to_project",
            "tuning_scale_to_mts",
        }


class TestEvaluateExpression:
    """Tests for tuning_evaluate_expression."""

    @pytest.mark.asyncio
    async def test_fjs_interval(self, notation_tools):
        """FJS names evaluate to just intervals."""
        result = await notation_tools["tuning_evaluate_expression"](expression="M3^5")
        data = json.loads(result)
        assert data["status"] == "success"
        assert data["result"]["text"] == "5/4"
        assert data["result"]["domain"] == "pitch"
        assert data["result"]["exponent"] == "1"
        assert data["result"]["fraction"] == "5/4"
        assert data["result"]["cents"] == pytest.approx(386.3137, abs=1e-3)

    @pytest.mark.asyncio
    async def test_frequency_ratio(self, notation_tools):
        """Frequencies are measured against the configured base."""
        result = await notation_tools["tuning_evaluate_expression"](expression="ratio(660 Hz)")
        data = json.loads(result)
        assert data["status"] == "success"
        assert data["result"]["text"] == "3/2"
        assert data["result"]["domain"] == "scalar"

    @pytest.mark.asyncio
    async def test_val(self, notation_tools):
        """Warts evaluate to vals."""
        result = await notation_tools["tuning_evaluate_expression"](expression="12@")
        data = json.loads(result)
        assert data["status"] == "success"
        assert data["result"]["text"].startswith("<12 19 28 34")
        assert data["result"]["exponent"] == "-1"

    @pytest.mark.asyncio
    async def test_syntax_error_position(self, notation_tools):
        """Syntax errors report where they happened."""
        result = await notation_tools["tuning_evaluate_expression"](expression="3/2 +")
        data = json.loads(result)
        assert data["status"] == "error"
        assert data["line"] == 1
        assert data["column"] == 6

    @pytest.mark.asyncio
    async def test_statement_rejected(self, notation_tools):
        """Statements have no value to show."""
        result = await notation_tools["tuning_evaluate_expression"](expression="$x = 1")
        data = json.loads(result)
        assert data["status"] == "error"

    @pytest.mark.asyncio
    async def test_domain_error(self, notation_tools):
        """Arithmetic errors are reported."""
        result = await notation_tools["tuning_evaluate_expression"](expression="3/2 + P5")
        data = json.loads(result)
        assert data["status"] == "error"
        assert "line" not in data


class TestEvaluateScale:
    """Tests for tuning_evaluate_scale."""

    @pytest.mark.asyncio
    async def test_just_tetrachord(self, notation_tools):
        """Every degree is spelled and sized."""
        result = await notation_tools["tuning_evaluate_scale"](lines=["9/8", "5/4", "3/2", "2"])
        data = json.loads(result)
        assert data["status"] == "success"
        assert data["count"] == 4
        assert data["base_frequency"] == pytest.approx(440.0)
        assert [d["text"] for d in data["degrees"]] == ["9/8", "5/4", "3/2", "2/1"]
        assert data["degrees"][0]["index"] == 1
        assert data["degrees"][2]["frequency"] == pytest.approx(660.0)

    @pytest.mark.asyncio
    async def test_base_frequency_override(self, notation_tools):
        """A base frequency argument re-anchors the scale."""
        result = await notation_tools["tuning_evaluate_scale"](lines=["3/2"], base_frequency=220.0)
        data = json.loads(result)
        assert data["degrees"][0]["frequency"] == pytest.approx(330.0)

    @pytest.mark.asyncio
    async def test_pitch_assignment(self, notation_tools):
        """A pitch assignment sets the reported base frequency."""
        result = await notation_tools["tuning_evaluate_scale"](lines=["A4 = 432 Hz", "E5", "A5"])
        data = json.loads(result)
        assert data["base_frequency"] == pytest.approx(432.0)
        assert [d["text"] for d in data["degrees"]] == ["3/2", "2/1"]

    @pytest.mark.asyncio
    async def test_tempered(self, notation_tools):
        """Tempered degrees are spelled as equal divisions."""
        result = await notation_tools["tuning_evaluate_scale"](lines=["5/4", "3/2", "2", "12@"])
        data = json.loads(result)
        assert [d["text"] for d in data["degrees"]] == ["1\\3", "7\\12", "2/1"]

    @pytest.mark.asyncio
    async def test_misplaced_assignment(self, notation_tools):
        """Sequencing errors are reported."""
        result = await notation_tools["tuning_evaluate_scale"](lines=["3/2", "A4 = 440 Hz"])
        data = json.loads(result)
        assert data["status"] == "error"


class TestFormatInterval:
    """Tests for tuning_format_interval."""

    @pytest.mark.asyncio
    async def test_preferred_denominator(self, notation_tools):
        """Ratios expand to the preferred denominator."""
        result = await notation_tools["tuning_format_interval"](
            expression="3/2", preferred_denominator=4
        )
        data = json.loads(result)
        assert data["status"] == "success"
        assert data["text"] == "6/4"
        assert data["exact"] is True

    @pytest.mark.asyncio
    async def test_preferred_et_denominator(self, notation_tools):
        """Equal divisions expand to the preferred step count."""
        result = await notation_tools["tuning_format_interval"](
            expression="7\\12", preferred_et_denominator=24
        )
        data = json.loads(result)
        assert data["text"] == "14\\24"
        assert data["exact"] is True

    @pytest.mark.asyncio
    async def test_preferred_equave(self, notation_tools):
        """Tritave divisions can be written against 9."""
        result = await notation_tools["tuning_format_interval"](
            expression="1\\13<3>", preferred_et_equave="9"
        )
        data = json.loads(result)
        assert data["text"] == "1\\26<9>"
        assert data["exact"] is True

    @pytest.mark.asyncio
    async def test_forbid_composite_is_lossy(self, notation_tools):
        """Falling back to cents loses exactness."""
        result = await notation_tools["tuning_format_interval"](
            expression="P5 + 1.955c!", forbid_composite=True
        )
        data = json.loads(result)
        assert data["text"] == "703.91c"
        assert data["exact"] is False

    @pytest.mark.asyncio
    async def test_invalid_preference(self, notation_tools):
        """Invalid preferences are reported."""
        result = await notation_tools["tuning_format_interval"](
            expression="3/2", preferred_et_equave="1"
        )
        data = json.loads(result)
        assert data["status"] == "error"


class TestLibraryTools:
    """Tests for scale library tools."""

    @pytest.mark.asyncio
    async def test_list_scales(self, library_tools):
        """List scales tool."""
        result = await library_tools["tuning_list_scales"]()
        data = json.loads(result)
        assert data["status"] == "success"
        assert data["count"] == 7
        names = [s["name"] for s in data["scales"]]
        assert "just-major" in names
        assert "bohlen-pierce" in names

    @pytest.mark.asyncio
    async def test_describe_scale(self, library_tools):
        """Describe scale tool."""
        result = await library_tools["tuning_describe_scale"](name="just-major")
        data = json.loads(result)
        assert data["status"] == "success"
        scale = data["scale"]
        assert scale["size"] == 7
        assert scale["lines"][0] == "9/8"
        assert scale["ratios"][2] == pytest.approx(1.25)
        assert scale["equave_ratio"] == pytest.approx(2.0)
        assert scale["degree_names"][0] == "do"

    @pytest.mark.asyncio
    async def test_describe_scale_not_found(self, library_tools):
        """Describe scale returns error for missing scale."""
        result = await library_tools["tuning_describe_scale"](name="nonexistent")
        data = json.loads(result)
        assert data["status"] == "error"

    @pytest.mark.asyncio
    async def test_copy_scale_to_project(self, library_tools):
        """Copy scale tool."""
        result = await library_tools["tuning_copy_scale_to_project"](name="pythagorean")
        data = json.loads(result)
        assert data["status"] == "success"
        assert Path(data["path"]).exists()

        again = json.loads(
            await library_tools["tuning_copy_scale_to_project"](name="pythagorean")
        )
        assert again["status"] == "error"

    @pytest.mark.asyncio
    async def test_copy_missing_scale(self, library_tools):
        """Copy reports missing scales."""
        result = await library_tools["tuning_copy_scale_to_project"](name="nonexistent")
        data = json.loads(result)
        assert data["status"] == "error"

    @pytest.mark.asyncio
    async def test_scale_to_mts(self, library_tools, temp_dir: Path):
        """Export writes a MIDI file with one tuning dump."""
        result = await library_tools["tuning_scale_to_mts"](name="12-edo")
        data = json.loads(result)
        assert data["status"] == "success"
        assert data["sysex_bytes"] == 408
        path = Path(data["path"])
        assert path == temp_dir / "output" / "12-edo.mid"

        mid = mido.MidiFile(str(path))
        assert sum(1 for msg in mid.tracks[0] if msg.type == "sysex") == 1

    @pytest.mark.asyncio
    async def test_scale_to_mts_options(self, library_tools, temp_dir: Path):
        """Output name and note playback can be chosen."""
        result = await library_tools["tuning_scale_to_mts"](
            name="bohlen-pierce", output_name="bp", program=3, play_notes=False
        )
        data = json.loads(result)
        assert data["status"] == "success"
        mid = mido.MidiFile(str(temp_dir / "output" / "bp.mid"))
        assert not [msg for msg in mid.tracks[0] if msg.type == "note_on"]

    @pytest.mark.asyncio
    async def test_scale_to_mts_not_found(self, library_tools):
        """Export reports missing scales."""
        result = await library_tools["tuning_scale_to_mts"](name="nonexistent")
        data = json.loads(result)
        assert data["status"] == "error"
