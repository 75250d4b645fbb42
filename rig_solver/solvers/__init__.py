"""Solver implementations for landmark to rig parameter conversion."""

from .face_solver import FaceSolver
from .pose_solver import PoseSolver

__all__ = [
    "FaceSolver",
    "PoseSolver",
]
