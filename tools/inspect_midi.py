#!/usr/bin/env python3
"""Check that a MIDI file can drive a slideshow and report its timing.

Examples
--------
    python tools/inspect_midi.py song.mid
    python tools/inspect_midi.py song.mid --debug
    python tools/inspect_midi.py song.mid --json
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from midisync.chunks import read_midi_file  # noqa: E402
from midisync.notes import extract_notes  # noqa: E402
from midisync.report import describe, describe_notes, summarize  # noqa: E402


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect the note timing of a MIDI file")
    parser.add_argument("midi", type=Path, help="Path to a format 0 or 1 .mid file")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Also print the header, tracks and every decoded event",
    )
    parser.add_argument("--notes", action="store_true", help="Also list every extracted note")
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON")
    return parser


def main() -> int:
    args = _build_arg_parser().parse_args()

    if not args.midi.is_file():
        raise SystemExit(f"error: {args.midi} is not a file")

    try:
        midi = read_midi_file(args.midi)
        summary = summarize(midi)
    except ValueError as exc:
        raise SystemExit(f"error: {exc}") from exc

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
        return 0

    print(f"The time base in seconds per midi tick is {summary.timebase}")
    print(f"There are {summary.note_count} midi notes in this midi file")
    print("  Note: the last note is a zero-length marker for the end of the material;")
    print(f"  {summary.usable_note_count} notes can be used to sync images")
    print(
        f"The shortest note is {summary.shortest_ticks} midi ticks "
        f"({summary.shortest_seconds:.6f} s)"
    )
    print(
        f"The longest note is {summary.longest_ticks} midi ticks "
        f"({summary.longest_seconds:.6f} s)"
    )
    print(f"The total runtime of this midi file is {summary.runtime_seconds:.6f} s")

    if args.notes:
        print(describe_notes(extract_notes(midi)))
    if args.debug:
        print(describe(midi))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
