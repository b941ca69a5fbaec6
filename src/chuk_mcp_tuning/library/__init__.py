"""
Scale library - named scales written in the notation.

Scales ship with the package and can be copied into the project's
scales/ directory for customization.
"""

from chuk_mcp_tuning.library.loader import ScaleLibrary

__all__ = [
    "ScaleLibrary",
]
