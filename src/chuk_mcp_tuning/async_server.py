#!/usr/bin/env python3
"""
Async Tuning MCP Server using chuk-mcp-server

This server provides MCP tools for working with musical tunings written
in a rich interval notation: ratios, equal divisions, monzos, vals,
interval and note names, warts, frequencies and cents.

The server provides tools for:
- Evaluating expressions and whole scales exactly
- Respelling intervals with formatting preferences
- Scale discovery and customization
- Exporting scales as MIDI Tuning Standard dumps
"""

import logging
from pathlib import Path

from chuk_mcp_server import ChukMCPServer

from chuk_mcp_tuning.library import ScaleLibrary
from chuk_mcp_tuning.models import FormattingOptions, NotationSettings
from chuk_mcp_tuning.tools import register_library_tools, register_notation_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("chuk-mcp-tuning")

# Paths - use standard project structure
BASE_PATH = Path.cwd()
SCALES_DIR = BASE_PATH / "scales"
OUTPUT_DIR = BASE_PATH / "output"
LIBRARY_PATH = Path(__file__).parent / "library" / "scales"

# Shared configuration
settings = NotationSettings()
formatting_options = FormattingOptions()

scale_library = ScaleLibrary(
    library_path=LIBRARY_PATH,
    project_path=SCALES_DIR,
    settings=settings,
)

# Register all tools
notation_tools = register_notation_tools(mcp, settings, formatting_options)
library_tools = register_library_tools(mcp, scale_library, OUTPUT_DIR)

# Export tool functions for direct access
tuning_evaluate_expression = notation_tools["tuning_evaluate_expression"]
tuning_evaluate_scale = notation_tools["tuning_evaluate_scale"]
tuning_format_interval = notation_tools["tuning_format_interval"]

tuning_list_scales = library_tools["tuning_list_scales"]
tuning_describe_scale = library_tools["tuning_describe_scale"]
tuning_copy_scale_to_project = library_tools["tuning_copy_scale_to_project"]
tuning_scale_to_mts = library_tools["tuning_scale_to_mts"]

logger.info("CHUK Tuning MCP Server initialized")
logger.info(f"  Library path: {LIBRARY_PATH}")
logger.info(f"  Scales dir: {SCALES_DIR}")
logger.info(f"  Output dir: {OUTPUT_DIR}")
