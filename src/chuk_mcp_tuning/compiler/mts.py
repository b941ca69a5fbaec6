"""
MIDI Tuning Standard export - retune a synthesizer to a scale.

A scale becomes a bulk tuning dump: one system exclusive message giving
every one of the 128 MIDI keys an exact frequency. Each frequency is sent
as a semitone plus a 14-bit fraction of a semitone above it.

Operations are deterministic and nothing is written to disk.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from mido import Message, MetaMessage, MidiFile, MidiTrack

from chuk_mcp_tuning.constants import A4_FREQUENCY, A4_MIDI_INDEX
from chuk_mcp_tuning.core.scale import Scale

logger = logging.getLogger(__name__)

# Standard ticks per beat (quarter note)
TICKS_PER_BEAT = 480

# Universal non-real-time sysex id, MIDI tuning sub-id, bulk dump reply
NON_REAL_TIME = 0x7E
MIDI_TUNING = 0x08
BULK_DUMP_REPLY = 0x01

NAME_LENGTH = 16
KEY_COUNT = 128
FRACTION_STEPS = 1 << 14

# 7F 7F 7F means "no change", so the top key stops one step short
HIGHEST_FRACTION = FRACTION_STEPS - 2


@dataclass(frozen=True)
class TuningEntry:
    """
    Frequency of one key in MIDI tuning format.

    semitone is the MIDI note at or below the frequency; fraction is the
    remaining distance in 1/16384ths of a semitone.
    """

    semitone: int
    fraction: int

    def __post_init__(self) -> None:
        """Validate ranges."""
        if not 0 <= self.semitone <= 127:
            raise ValueError(f"Semitone must be 0-127, got {self.semitone}")
        if not 0 <= self.fraction < FRACTION_STEPS:
            raise ValueError(f"Fraction must be 0-{FRACTION_STEPS - 1}, got {self.fraction}")

    def to_bytes(self) -> tuple[int, int, int]:
        """Semitone, fraction MSB, fraction LSB."""
        return (self.semitone, self.fraction >> 7, self.fraction & 0x7F)

    @property
    def frequency(self) -> float:
        """Frequency the entry encodes."""
        note = self.semitone + self.fraction / FRACTION_STEPS
        return A4_FREQUENCY * 2 ** ((note - A4_MIDI_INDEX) / 12)


def frequency_to_entry(frequency: float) -> TuningEntry:
    """
    Encode a frequency, clamped to the range the format can express.

    Examples:
        frequency_to_entry(440.0) -> TuningEntry(69, 0)
        frequency_to_entry(450.0).to_bytes() -> (69, 49, 102)
    """
    if frequency <= 0:
        raise ValueError(f"Frequency must be positive, got {frequency}")
    note = A4_MIDI_INDEX + 12 * math.log2(frequency / A4_FREQUENCY)
    if note < 0:
        return TuningEntry(0, 0)
    semitone = math.floor(note)
    fraction = round((note - semitone) * FRACTION_STEPS)
    if fraction == FRACTION_STEPS:
        semitone, fraction = semitone + 1, 0
    if semitone > 127:
        return TuningEntry(127, HIGHEST_FRACTION)
    if semitone == 127:
        fraction = min(fraction, HIGHEST_FRACTION)
    return TuningEntry(semitone, fraction)


def checksum(data: list[int]) -> int:
    """XOR of the message bytes after F0, masked to seven bits."""
    result = 0
    for byte in data:
        result ^= byte
    return result & 0x7F


def _encode_name(name: str) -> list[int]:
    """Sixteen printable ASCII bytes, space padded."""
    encoded = [ord(c) if 32 <= ord(c) < 127 else ord("?") for c in name[:NAME_LENGTH]]
    return encoded + [ord(" ")] * (NAME_LENGTH - len(encoded))


def scale_to_entries(scale: Scale) -> list[TuningEntry]:
    """Tuning entries for all 128 keys; scale.base_index is the unison key."""
    return [frequency_to_entry(scale.get_frequency(key)) for key in range(KEY_COUNT)]


def scale_to_sysex(
    scale: Scale,
    name: str = "",
    program: int = 0,
    device_id: int = 0x7F,
) -> Message:
    """
    Bulk tuning dump for a scale.

    Args:
        scale: Scale to send
        name: Tuning name (truncated to 16 characters)
        program: Tuning program number (0-127)
        device_id: Target device (0x7F addresses all devices)

    Returns:
        A mido sysex Message (data excludes F0 and F7)
    """
    if not 0 <= program <= 127:
        raise ValueError(f"Program must be 0-127, got {program}")
    if not 0 <= device_id <= 127:
        raise ValueError(f"Device id must be 0-127, got {device_id}")

    data = [NON_REAL_TIME, device_id, MIDI_TUNING, BULK_DUMP_REPLY, program]
    data.extend(_encode_name(name))
    for entry in scale_to_entries(scale):
        data.extend(entry.to_bytes())
    data.append(checksum(data))

    logger.debug(f"Encoded tuning '{name}' ({len(data)} bytes)")
    return Message("sysex", data=data)


def scale_to_midi_file(
    scale: Scale,
    name: str = "",
    program: int = 0,
    play_notes: bool = True,
    note_ticks: int = TICKS_PER_BEAT,
    velocity: int = 100,
) -> MidiFile:
    """
    MIDI file that retunes the receiver and optionally plays one equave.

    The tuning dump is the first event; the ascending scale follows so
    the file can be auditioned directly.
    """
    mid = MidiFile(ticks_per_beat=TICKS_PER_BEAT)
    track = MidiTrack()
    mid.tracks.append(track)

    track.append(MetaMessage("track_name", name=name or "tuning", time=0))
    sysex = scale_to_sysex(scale, name, program)
    track.append(sysex.copy(time=0))

    if play_notes:
        last_key = min(scale.base_index + scale.size, KEY_COUNT - 1)
        for key in range(scale.base_index, last_key + 1):
            track.append(Message("note_on", note=key, velocity=velocity, time=0))
            track.append(Message("note_off", note=key, velocity=0, time=note_ticks))

    track.append(MetaMessage("end_of_track", time=0))
    return mid
