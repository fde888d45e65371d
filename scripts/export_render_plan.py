#!/usr/bin/env python3
"""
export_render_plan.py - Write a frame-by-frame render plan for a project.

The plan is JSON Lines: one header line, then one render descriptor per
frame. An external encoder composites images, audio and captions from it.

Usage examples
--------------
# Plan at the project's fps (or FVT_DEFAULT_FPS), written to FVT_OUTPUT_DIR
  python export_render_plan.py project.json

# Explicit fps and output file
  python export_render_plan.py project.json --fps 60 -o plan.jsonl

# Only print the timeline summary
  python export_render_plan.py project.json --summary
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from faceless_timeline.errors import TimelineError
from faceless_timeline.services import (
    ProjectService,
    TimelineCompositor,
    TimelineExportService,
    summarize_timeline,
)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Write a frame-by-frame render plan (JSON Lines) for a project JSON file."
    )
    parser.add_argument("project", type=Path, help="Path to the project JSON file")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Output .jsonl path")
    parser.add_argument("--fps", type=float, default=None, help="Frame rate (default: project or settings)")
    parser.add_argument(
        "--default-duration",
        type=float,
        default=None,
        help="Duration for segments without one (default: FVT_DEFAULT_SEGMENT_DURATION)",
    )
    parser.add_argument("--summary", action="store_true", help="Print the timeline summary and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main() -> None:
    args = _parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )

    payload = json.loads(args.project.read_text(encoding="utf-8"))
    project = ProjectService.resolve_durations(
        ProjectService.from_payload(payload), args.default_duration
    )
    fps = ProjectService.resolve_fps(project, args.fps)
    compositor = TimelineCompositor()

    try:
        if args.summary:
            timeline = compositor.build_timeline(project, fps)
            print(summarize_timeline(timeline).model_dump_json(by_alias=True, indent=2))
            return

        output = args.output or TimelineExportService.default_output_path(project)
        frames = TimelineExportService.write_render_plan(project, output, fps, compositor)
    except TimelineError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"{frames} frames -> {output}")


if __name__ == "__main__":
    main()
