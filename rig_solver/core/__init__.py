"""Core components for the rig_solver package."""

from .base_solver import BaseLandmarkSolver
from .types import Arm, Eyes, Face, Head, Hips, Leg, Mouth, Phoneme, Pose, Side
from . import vector_math

__all__ = [
    "Arm",
    "BaseLandmarkSolver",
    "Eyes",
    "Face",
    "Head",
    "Hips",
    "Leg",
    "Mouth",
    "Phoneme",
    "Pose",
    "Side",
    "vector_math",
]
