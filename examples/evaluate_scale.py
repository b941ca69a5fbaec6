#!/usr/bin/env python3
"""
Example: Evaluating Interval Notation.

This walks through the notation from single expressions to whole scales:
intervals are exact values, scales are lines of intervals, and any scale
can be exported as a MIDI Tuning Standard dump.

Usage:
    python examples/evaluate_scale.py
"""

import tempfile
from pathlib import Path

from chuk_mcp_tuning.compiler import scale_to_midi_file
from chuk_mcp_tuning.library import ScaleLibrary
from chuk_mcp_tuning.models import FormattingOptions
from chuk_mcp_tuning.notation import (
    derive_scale,
    evaluate_interval,
    format_quantity,
)


def main() -> None:
    """Demonstrate the notation."""
    print("CHUK Tuning Notation Demo")
    print("=" * 40)
    print()

    # Single expressions
    print("Expressions:")
    for text in ["M3^5", "P5 + m3_5", "7\\12", "1\\13<3>", "12@ * pitch(3/2)", "Bb4"]:
        result = evaluate_interval(text)
        print(f"  {text:<18} -> {format_quantity(result):<12} {result.value.total_cents():9.3f}c")
    print()

    # Respelling with preferences
    fifth = evaluate_interval("3/2")
    options = FormattingOptions(preferred_denominator=4)
    print(f"3/2 over a denominator of 4: {format_quantity(fifth, options)}")
    print()

    # A scale written one interval per line
    lines = ["9/8", "5/4", "4/3", "3/2", "5/3", "15/8", "2"]
    scale = derive_scale(lines, base_frequency=261.6255653005986, base_index=60)
    print("Just major from middle C:")
    for index in range(60, 60 + scale.size + 1):
        print(f"  key {index}: {scale.get_frequency(index):8.3f} Hz")
    print()

    # Library scales and export
    library_path = Path(__file__).parent.parent / "src/chuk_mcp_tuning/library/scales"
    with tempfile.TemporaryDirectory() as tmp:
        library = ScaleLibrary(library_path=library_path, project_path=Path(tmp))

        print("Available scales:")
        for meta in library.list_scales():
            print(f"  {meta.name} ({meta.size} degrees): {meta.description[:50]}")
        print()

        bohlen_pierce = library.load_scale("bohlen-pierce")
        if not bohlen_pierce:
            print("Failed to load scale")
            return

        output = Path(tmp) / "bohlen-pierce.mid"
        scale_to_midi_file(bohlen_pierce, name="Bohlen-Pierce").save(str(output))
        print(f"Wrote tuning dump to {output} ({output.stat().st_size} bytes)")


if __name__ == "__main__":
    main()
