"""Turn extracted notes into an image frame schedule.

Each note becomes one frame shown for the note's duration; images are
assigned round-robin.  Encoding the schedule into a video is left to the
caller.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from fractions import Fraction
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .notes import MidiNote


END_FRAME_SECONDS = 0.1
IMAGE_EXTENSIONS = frozenset({".bmp", ".gif", ".jpeg", ".jpg", ".png", ".tiff", ".wbmp"})


@dataclass(frozen=True)
class FrameSpec:
    image: Path
    seconds: float


def collect_images(directory: Path) -> List[Path]:
    """List image files directly inside ``directory``, sorted by name."""
    if not directory.is_dir():
        raise ValueError(f"{directory} is not a directory")
    return sorted(
        path
        for path in directory.iterdir()
        if path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS
    )


def build_frame_schedule(
    notes: Sequence[MidiNote],
    timebase: Union[float, Fraction],
    images: Sequence[Path],
    *,
    end_image: Optional[Path] = None,
    shuffle_seed: Optional[int] = None,
) -> List[FrameSpec]:
    """Pair every note with an image.

    With ``end_image`` the last frame (the terminal note) is replaced by that
    image held for ``END_FRAME_SECONDS``.  ``shuffle_seed`` shuffles the image
    order reproducibly before assignment.
    """
    if not images:
        raise ValueError("need at least one image to build a frame schedule")

    ordered = list(images)
    if shuffle_seed is not None:
        random.Random(shuffle_seed).shuffle(ordered)

    frames = [
        FrameSpec(image=ordered[idx % len(ordered)], seconds=note.seconds(timebase))
        for idx, note in enumerate(notes)
    ]
    if end_image is not None and frames:
        frames[-1] = FrameSpec(image=end_image, seconds=END_FRAME_SECONDS)
    return frames


def total_seconds(frames: Sequence[FrameSpec]) -> float:
    return sum(frame.seconds for frame in frames)
