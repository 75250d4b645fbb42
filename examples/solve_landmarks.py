#!/usr/bin/env python3
"""
solve_landmarks.py - Solve rig parameters from saved landmark frames

Reads landmark frames from a JSON file and prints the solved face or pose
parameters as JSON, one object per frame.

Input format:
    A single frame as a list of [x, y, z] points, or a list of such frames.
    Frames with 468/478 points are solved as faces, 33 points as poses.
    null frames (no detection) are kept as null.

Usage:
    python solve_landmarks.py --input face_landmarks.json
    python solve_landmarks.py --input face_landmarks.json --smooth-blink --blink-low 0.5 --blink-high 0.8
    python solve_landmarks.py --input pose_landmarks.json --kind pose
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

import numpy as np

# Import our package
sys.path.append(str(Path(__file__).parent.parent))
from rig_solver import FaceSolver, PoseSolver
from rig_solver.core.base_solver import BaseLandmarkSolver
from rig_solver.core.constants import POSE_LANDMARK_COUNT

logger = logging.getLogger("solve_landmarks")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Solve face/pose rig parameters from landmark frames",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--input", "-i", type=str, required=True,
                        help="JSON file with one frame or a list of frames")
    parser.add_argument("--kind", choices=["auto", "face", "pose"], default="auto",
                        help="Solver to use (default: detect from landmark count)")
    parser.add_argument("--smooth-blink", action="store_true",
                        help="Apply blink stabilization to face frames")
    parser.add_argument("--blink-high", type=float, default=0.85,
                        help="Eye ratio mapped to fully open (default: 0.85)")
    parser.add_argument("--blink-low", type=float, default=0.55,
                        help="Eye ratio mapped to closed (default: 0.55)")
    parser.add_argument("--no-wink", action="store_true",
                        help="Average both eyes even when they look like a wink")
    parser.add_argument("--log_level", type=str, default="WARNING", choices=LOG_LEVELS,
                        help="Log level (default: WARNING)")
    return parser.parse_args()


def load_frames(path: Path) -> List[Optional[np.ndarray]]:
    """
    Load landmark frames from JSON.

    Args:
        path: JSON file path

    Returns:
        List of (N, 3) arrays, None for frames without detection
    """
    with open(path, "r") as f:
        data = json.load(f)

    if BaseLandmarkSolver.is_single_frame(data):
        data = [data]

    return [np.asarray(frame, dtype=np.float64) if frame is not None else None for frame in data]


def main() -> int:
    args = parse_args()
    logging.basicConfig(format="%(levelname)s:%(name)s:%(message)s", level=getattr(logging, args.log_level))

    input_path = Path(args.input)
    if not input_path.exists():
        logger.error("Input file not found: %s", input_path)
        return 1

    frames = load_frames(input_path)
    logger.info("Loaded %d frames from %s", len(frames), input_path)

    kind = args.kind
    if kind == "auto":
        first = next((frame for frame in frames if frame is not None), None)
        kind = "pose" if first is not None and first.shape[0] == POSE_LANDMARK_COUNT else "face"

    solver: Any
    if kind == "face":
        solver = FaceSolver(
            smooth_blink=args.smooth_blink,
            blink_high=args.blink_high,
            blink_low=args.blink_low,
            enable_wink=not args.no_wink,
        )
    else:
        solver = PoseSolver()

    try:
        results = solver.solve(frames)
    except ValueError as e:
        logger.error("Failed to solve %s frames: %s", kind, e)
        return 1

    for result in results:
        print(json.dumps(result.to_dict() if result is not None else None))

    return 0


if __name__ == "__main__":
    sys.exit(main())
