from pathlib import Path
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from midisync.frames import (  # noqa: E402
    END_FRAME_SECONDS,
    FrameSpec,
    build_frame_schedule,
    collect_images,
    total_seconds,
)
from midisync.notes import MidiNote  # noqa: E402

IMAGES = [Path("a.png"), Path("b.png"), Path("c.png")]


def _notes(count: int) -> list:
    notes = [
        MidiNote(key=60 + i, velocity=64, duration_ticks=100, ticks_from_start=i * 100)
        for i in range(count)
    ]
    notes.append(MidiNote(key=0, velocity=0, duration_ticks=0, ticks_from_start=count * 100))
    return notes


def test_round_robin_assignment() -> None:
    frames = build_frame_schedule(_notes(4), 0.005, IMAGES)
    assert [f.image.name for f in frames] == ["a.png", "b.png", "c.png", "a.png", "b.png"]
    assert [f.seconds for f in frames] == pytest.approx([0.5, 0.5, 0.5, 0.5, 0.0])
    assert total_seconds(frames) == pytest.approx(2.0)


def test_end_image_replaces_terminal_frame() -> None:
    black = Path("black.jpg")
    frames = build_frame_schedule(_notes(2), 0.005, IMAGES, end_image=black)
    assert len(frames) == 3
    assert frames[-1] == FrameSpec(image=black, seconds=END_FRAME_SECONDS)
    assert frames[0].image == IMAGES[0]


def test_shuffle_is_reproducible_permutation() -> None:
    images = [Path(f"{i}.png") for i in range(10)]
    first = build_frame_schedule(_notes(9), 0.01, images, shuffle_seed=7)
    second = build_frame_schedule(_notes(9), 0.01, images, shuffle_seed=7)
    assert first == second
    assert sorted(f.image for f in first) == sorted(images)


def test_needs_images() -> None:
    with pytest.raises(ValueError, match="at least one image"):
        build_frame_schedule(_notes(1), 0.005, [])


def test_collect_images(tmp_path: Path) -> None:
    for name in ("b.PNG", "a.jpg", "notes.txt", "c.gif"):
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "sub.png").mkdir()
    assert [p.name for p in collect_images(tmp_path)] == ["a.jpg", "b.PNG", "c.gif"]


def test_collect_images_requires_directory(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="not a directory"):
        collect_images(tmp_path / "missing")
