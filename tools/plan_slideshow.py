#!/usr/bin/env python3
"""Compute the image frame schedule for a slideshow JSON spec.

The schedule (one image + duration per note) is printed as JSON; feeding it
to a video encoder is up to the caller.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from midisync.frames import total_seconds  # noqa: E402
from midisync.slideshow_spec import load_slideshow_spec, plan_frames  # noqa: E402


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Plan slideshow frames from a JSON spec")
    parser.add_argument("spec", type=Path, help="Path to slideshow JSON spec")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the frame plan here instead of stdout",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate the spec and MIDI file without printing the plan",
    )
    return parser


def main() -> int:
    args = _build_arg_parser().parse_args()

    try:
        spec = load_slideshow_spec(args.spec)
        frames = plan_frames(spec)
    except ValueError as exc:
        raise SystemExit(f"error: {exc}") from exc

    if args.dry_run:
        print(
            f"dry-run OK: frames={len(frames)} images={len(spec.images)} "
            f"duration={total_seconds(frames):.6f}s"
        )
        return 0

    plan = {
        "output": spec.output_name,
        "width": spec.width,
        "height": spec.height,
        "audio": str(spec.audio) if spec.audio is not None else None,
        "frames": [{"image": str(f.image), "seconds": f.seconds} for f in frames],
    }
    text = json.dumps(plan, indent=2)
    if args.output is None:
        print(text)
        return 0

    out_path = args.output.expanduser().resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(text + "\n", encoding="utf-8")
    print(f"Wrote {len(frames)} frames -> {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
