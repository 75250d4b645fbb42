"""
Rig Solver Package

Converts MediaPipe face and body landmarks into bounded rig parameters:
head rotation, eye openness, pupils, brow raise, mouth phonemes, and
arm, hip and spine rotations.
"""

__version__ = "1.0.0"

from .core.types import (
    Arm,
    Eyes,
    Face,
    Head,
    Hips,
    Leg,
    Mouth,
    Phoneme,
    Pose,
    Side,
)
from .solvers.face_solver import FaceSolver, stabilize_blink
from .solvers.pose_solver import PoseSolver

__all__ = [
    "Arm",
    "Eyes",
    "Face",
    "FaceSolver",
    "Head",
    "Hips",
    "Leg",
    "Mouth",
    "Phoneme",
    "Pose",
    "PoseSolver",
    "Side",
    "stabilize_blink",
]
