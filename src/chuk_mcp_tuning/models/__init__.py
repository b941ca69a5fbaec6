"""
Pydantic models for the tuning system.

This module provides:
- FormattingOptions: Preferences for writing intervals as text
- ScaleDefinition: A scale file written in the notation
- ScaleMetadata: Lightweight listing entry for a scale
- NotationSettings: Evaluation settings (components, base frequency)
"""

from chuk_mcp_tuning.models.options import FormattingOptions
from chuk_mcp_tuning.models.scale_definition import ScaleDefinition, ScaleMetadata
from chuk_mcp_tuning.models.settings import NotationSettings

__all__ = [
    "FormattingOptions",
    "NotationSettings",
    "ScaleDefinition",
    "ScaleMetadata",
]
