#!/usr/bin/env python3
"""Write C major scale MIDI files for manual checks.

  scale.mid          C4..C5, explicit note offs, 100 ticks per note, no tempo
  scale_140bpm.mid   same notes at 428571 us/qn using note-on velocity 0
                     releases (saved with running status)
"""

from __future__ import annotations

import argparse
from pathlib import Path

import mido

C_MAJOR = (60, 62, 64, 65, 67, 69, 71, 72)
TICKS_PER_BEAT = 100
VELOCITY = 64


def scale_track(*, tempo: int | None = None, note_on_release: bool = False) -> mido.MidiTrack:
    track = mido.MidiTrack()
    if tempo is not None:
        track.append(mido.MetaMessage("set_tempo", tempo=tempo, time=0))
    for key in C_MAJOR:
        track.append(mido.Message("note_on", note=key, velocity=VELOCITY, time=0))
        if note_on_release:
            track.append(mido.Message("note_on", note=key, velocity=0, time=TICKS_PER_BEAT))
        else:
            track.append(mido.Message("note_off", note=key, velocity=VELOCITY, time=TICKS_PER_BEAT))
    track.append(mido.MetaMessage("end_of_track", time=0))
    return track


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--out-dir", type=Path, default=Path("output"))
    args = parser.parse_args()

    args.out_dir.mkdir(parents=True, exist_ok=True)
    files = {
        "scale.mid": scale_track(),
        "scale_140bpm.mid": scale_track(tempo=428571, note_on_release=True),
    }
    for name, track in files.items():
        mid = mido.MidiFile(type=0, ticks_per_beat=TICKS_PER_BEAT)
        mid.tracks.append(track)
        path = args.out_dir / name
        mid.save(path)
        print(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
