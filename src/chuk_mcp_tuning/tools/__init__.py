"""
MCP tool implementations.

Tools are organized by domain:
- notation - Expression and scale evaluation, respelling
- library - Scale discovery and MIDI tuning export
"""

from chuk_mcp_tuning.tools.library import register_library_tools
from chuk_mcp_tuning.tools.notation import register_notation_tools

__all__ = [
    "register_library_tools",
    "register_notation_tools",
]
