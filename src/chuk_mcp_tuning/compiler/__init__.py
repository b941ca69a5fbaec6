"""
MIDI export - scales to MIDI Tuning Standard messages and files.
"""

from chuk_mcp_tuning.compiler.mts import (
    TICKS_PER_BEAT,
    TuningEntry,
    checksum,
    frequency_to_entry,
    scale_to_entries,
    scale_to_midi_file,
    scale_to_sysex,
)

__all__ = [
    "TICKS_PER_BEAT",
    "TuningEntry",
    "checksum",
    "frequency_to_entry",
    "scale_to_entries",
    "scale_to_midi_file",
    "scale_to_sysex",
]
