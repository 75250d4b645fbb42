"""Synthetic landmark frames shared by the solver tests."""

from typing import Callable, Dict, Optional, Tuple

import pytest
import torch

Point = Tuple[float, float, float]

# Left half of a frontal, bilaterally symmetric face. Right-side points are
# mirrored around x = 0.5. Mouth center points sit on the symmetry axis.
FACE_LEFT_POINTS: Dict[int, Point] = {
    # Head plane: outer brow corner, jaw
    21: (0.3, 0.3, 0.0),
    172: (0.35, 0.8, 0.0),
    # Eye: outer, inner corner (width 0.15), lids with a 0.03 gap
    130: (0.30, 0.4, 0.0),
    133: (0.45, 0.4, 0.0),
    160: (0.33, 0.385, 0.0),
    159: (0.375, 0.385, 0.0),
    158: (0.42, 0.385, 0.0),
    144: (0.33, 0.415, 0.0),
    145: (0.375, 0.415, 0.0),
    153: (0.42, 0.415, 0.0),
    # Brow: corners 0.2 apart, brow to under-eye gap 0.253
    35: (0.28, 0.4, 0.0),
    244: (0.48, 0.4, 0.0),
    63: (0.32, 0.3, 0.0),
    105: (0.38, 0.3, 0.0),
    66: (0.44, 0.3, 0.0),
    229: (0.32, 0.553, 0.0),
    230: (0.38, 0.553, 0.0),
    231: (0.44, 0.553, 0.0),
    # Iris center at the natural resting position
    468: (0.375, 0.38875, 0.0),
    469: (0.385, 0.38875, 0.0),
    470: (0.375, 0.37875, 0.0),
    471: (0.365, 0.38875, 0.0),
    472: (0.375, 0.39875, 0.0),
    # Mouth corner, width chosen so the stretch is neutral
    61: (0.383, 0.7, 0.0),
}

FACE_MIRROR = {
    21: 251, 172: 397,
    130: 263, 133: 362, 160: 387, 159: 386, 158: 385, 144: 373, 145: 374, 153: 380,
    35: 265, 244: 464, 63: 293, 105: 334, 66: 296, 229: 449, 230: 450, 231: 451,
    468: 473, 469: 474, 470: 475, 471: 476, 472: 477,
    61: 291,
}

FACE_CENTER_POINTS: Dict[int, Point] = {
    13: (0.5, 0.7, 0.0),
    14: (0.5, 0.7, 0.0),
}

# Subject's left side of a frontal pose with both arms hanging straight down
# and bent slightly toward the camera.
POSE_LEFT_POINTS: Dict[int, Point] = {
    11: (0.6, 0.3, 0.0),
    13: (0.6, 0.5, -0.05),
    15: (0.6, 0.7, -0.1),
    17: (0.6, 0.75, -0.12),
    19: (0.6, 0.76, -0.1),
    23: (0.6, 0.6, 0.0),
}

POSE_MIRROR = {11: 12, 13: 14, 15: 16, 17: 18, 19: 20, 23: 24}


def mirror(point: Point) -> Point:
    return (1.0 - point[0], point[1], point[2])


def _build(count: int,
           left: Dict[int, Point],
           pairs: Dict[int, int],
           center: Dict[int, Point],
           overrides: Optional[Dict[int, Point]]) -> torch.Tensor:
    landmarks = torch.zeros(count, 3, dtype=torch.float64)
    for index, point in left.items():
        if index < count:
            landmarks[index] = torch.tensor(point, dtype=torch.float64)
            landmarks[pairs[index]] = torch.tensor(mirror(point), dtype=torch.float64)
    for index, point in center.items():
        landmarks[index] = torch.tensor(point, dtype=torch.float64)
    for index, point in (overrides or {}).items():
        landmarks[index] = torch.tensor(point, dtype=torch.float64)
    return landmarks


@pytest.fixture
def make_face() -> Callable[..., torch.Tensor]:
    """Factory for symmetric face frames; overrides replace single points."""
    def factory(count: int = 478, overrides: Optional[Dict[int, Point]] = None) -> torch.Tensor:
        return _build(count, FACE_LEFT_POINTS, FACE_MIRROR, FACE_CENTER_POINTS, overrides)
    return factory


@pytest.fixture
def face_landmarks(make_face) -> torch.Tensor:
    return make_face()


@pytest.fixture
def make_pose() -> Callable[..., torch.Tensor]:
    """Factory for symmetric pose frames; overrides replace single points."""
    def factory(overrides: Optional[Dict[int, Point]] = None) -> torch.Tensor:
        return _build(33, POSE_LEFT_POINTS, POSE_MIRROR, {}, overrides)
    return factory


@pytest.fixture
def pose_landmarks(make_pose) -> torch.Tensor:
    return make_pose()
