"""
Library tools - MCP tools for scale discovery and MIDI tuning export.

Tools for listing scales, getting scale details, copying library scales
into the project and exporting scales as MIDI Tuning Standard dumps.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from chuk_mcp_tuning.compiler.mts import scale_to_midi_file
from chuk_mcp_tuning.library import ScaleLibrary

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_library_tools(
    mcp: ChukMCPServer,
    library: ScaleLibrary,
    output_dir: Path,
) -> dict[str, Any]:
    """
    Register scale library tools with the MCP server.

    Args:
        mcp: The MCP server instance
        library: The scale library
        output_dir: Directory for exported MIDI files

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def tuning_list_scales() -> str:
        """
        List available scales.

        Returns all scales from the library and project with
        basic metadata.

        Returns:
            JSON string with list of scale summaries

        Example:
            tuning_list_scales()
        """
        try:
            scales = library.list_scales()

            return json.dumps(
                {
                    "status": "success",
                    "scales": [
                        {
                            "name": s.name,
                            "description": s.description,
                            "size": s.size,
                            "tags": s.tags,
                        }
                        for s in scales
                    ],
                    "count": len(scales),
                }
            )
        except Exception as e:
            logger.exception("Failed to list scales")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tuning_list_scales"] = tuning_list_scales

    @mcp.tool  # type: ignore[arg-type]
    async def tuning_describe_scale(name: str) -> str:
        """
        Get detailed information about a scale.

        Returns the scale's source lines and the evaluated degrees.

        Args:
            name: Scale name

        Returns:
            JSON string with scale details

        Example:
            tuning_describe_scale(name="just-major")
        """
        try:
            definition = library.get_definition(name)
            if definition is None:
                return json.dumps({"status": "error", "message": f"Scale not found: {name}"})

            scale = library.build_scale(definition)

            return json.dumps(
                {
                    "status": "success",
                    "scale": {
                        "name": definition.name,
                        "description": definition.description,
                        "lines": definition.lines,
                        "tags": definition.tags,
                        "base_frequency": scale.base_frequency,
                        "base_index": scale.base_index,
                        "size": scale.size,
                        "ratios": list(scale.ratios),
                        "equave_ratio": scale.equave_ratio,
                        "degree_names": list(scale.names),
                    },
                }
            )
        except Exception as e:
            logger.exception(f"Failed to describe scale {name}")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tuning_describe_scale"] = tuning_describe_scale

    @mcp.tool  # type: ignore[arg-type]
    async def tuning_copy_scale_to_project(name: str) -> str:
        """
        Copy a library scale to the project for customization.

        The copy takes precedence over the library version.

        Args:
            name: Scale name

        Returns:
            JSON string with the path of the copy

        Example:
            tuning_copy_scale_to_project(name="bohlen-pierce")
        """
        try:
            path = library.copy_to_project(name)
            if path is None:
                return json.dumps(
                    {"status": "error", "message": f"Scale not found in library: {name}"}
                )

            return json.dumps(
                {
                    "status": "success",
                    "path": str(path),
                    "message": f"Copied {name} to project",
                }
            )
        except Exception as e:
            logger.exception(f"Failed to copy scale {name}")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tuning_copy_scale_to_project"] = tuning_copy_scale_to_project

    @mcp.tool  # type: ignore[arg-type]
    async def tuning_scale_to_mts(
        name: str,
        output_name: str | None = None,
        program: int = 0,
        play_notes: bool = True,
    ) -> str:
        """
        Export a scale as a MIDI Tuning Standard bulk dump.

        Writes a MIDI file whose first event retunes all 128 keys of the
        receiver; optionally the scale is played once after it.

        Args:
            name: Scale name
            output_name: Optional output filename (without .mid extension)
            program: Tuning program number (0-127)
            play_notes: Append one ascending pass through the scale

        Returns:
            JSON string with the file path and dump size

        Example:
            tuning_scale_to_mts(name="12-edo")
        """
        try:
            scale = library.load_scale(name)
            if scale is None:
                return json.dumps({"status": "error", "message": f"Scale not found: {name}"})

            midi_file = scale_to_midi_file(scale, name, program, play_notes)

            filename = f"{output_name or name}.mid"
            output_path = output_dir / filename
            output_dir.mkdir(parents=True, exist_ok=True)
            midi_file.save(str(output_path))

            sysex = next(msg for msg in midi_file.tracks[0] if msg.type == "sysex")
            return json.dumps(
                {
                    "status": "success",
                    "path": str(output_path),
                    "sysex_bytes": len(sysex.data) + 2,
                    "message": f"Exported {scale.size}-note tuning for all 128 keys",
                }
            )
        except Exception as e:
            logger.exception(f"Failed to export scale {name}")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tuning_scale_to_mts"] = tuning_scale_to_mts

    return tools
