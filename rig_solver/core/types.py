"""Type definitions for solver outputs."""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional, Tuple

Vector2 = Tuple[float, float]
Vector3 = Tuple[float, float, float]

ZERO2: Vector2 = (0.0, 0.0)
ZERO3: Vector3 = (0.0, 0.0, 0.0)


class Side(Enum):
    """Body side selector for per-side solver stages."""
    LEFT = "left"
    RIGHT = "right"


def _to_plain(value: Any) -> Any:
    """Convert a nested record value into plain Python containers."""
    if isinstance(value, RigRecord):
        return value.to_dict()
    if isinstance(value, tuple):
        return [float(v) for v in value]
    return value


class RigRecord:
    """Mixin giving frozen output dataclasses a plain-dict export."""

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the record to a nested dictionary of floats and lists.

        Fields that are None (undeclared sub-results) are kept as None so the
        output shape stays stable across frames.
        """
        return {f.name: _to_plain(getattr(self, f.name)) for f in fields(self)}


# Face ------------------------------------------------------------------------

@dataclass(frozen=True)
class Head(RigRecord):
    """Head orientation and face box derived from the brow/jaw plane."""

    # Rotation in radians
    x: float
    y: float
    z: float

    width: float
    height: float

    # Center of the face box
    position: Vector3
    # Euler angles normalized to [-1, 1] (fractions of pi)
    normalized_angles: Vector3


@dataclass(frozen=True)
class Eyes(RigRecord):
    """Eye openness, 0 = closed, 1 = open."""
    left: float
    right: float


@dataclass(frozen=True)
class Phoneme(RigRecord):
    """Vowel blend weights. Not normalized; weights do not sum to 1."""
    a: float
    e: float
    i: float
    o: float
    u: float


@dataclass(frozen=True)
class Mouth(RigRecord):
    # Horizontal mouth stretch
    x: float
    # Vertical mouth open
    y: float
    shape: Phoneme


@dataclass(frozen=True)
class Face(RigRecord):
    """
    Complete face solve result for a single frame.

    Brow and pupils carry a single value averaged over both sides.
    """

    head: Head
    eyes: Eyes
    brow: float
    pupils: Vector2
    mouth: Mouth

    @classmethod
    def create_default(cls) -> "Face":
        """
        Create a face result with neutral values.

        Returns:
            Face looking straight ahead with eyes open and mouth closed
        """
        return cls(
            head=Head(x=0.0, y=0.0, z=0.0, width=0.0, height=0.0,
                      position=ZERO3, normalized_angles=ZERO3),
            eyes=Eyes(left=1.0, right=1.0),
            brow=0.0,
            pupils=ZERO2,
            mouth=Mouth(x=0.0, y=0.0, shape=Phoneme(a=0.0, e=0.0, i=0.0, o=0.0, u=0.0)),
        )


# Pose ------------------------------------------------------------------------

@dataclass(frozen=True)
class Arm(RigRecord):
    """Rigged arm rotations in radians."""
    upper: Vector3
    lower: Vector3
    hand: Vector3


@dataclass(frozen=True)
class Leg(RigRecord):
    upper: Vector3
    lower: Vector3


@dataclass(frozen=True)
class Hips(RigRecord):
    """Hip placement and rotation (radians)."""
    world_position: Vector3
    position: Vector3
    rotation: Vector3


@dataclass(frozen=True)
class Pose(RigRecord):
    """
    Complete body solve result for a single frame.

    Legs are part of the output shape but are not solved; they are always None.
    """

    left_arm: Arm
    right_arm: Arm
    spine: Vector3
    hips: Hips
    left_leg: Optional[Leg] = None
    right_leg: Optional[Leg] = None

    @classmethod
    def create_default(cls) -> "Pose":
        """Create a pose result with every rotation at rest."""
        rest_arm = Arm(upper=ZERO3, lower=ZERO3, hand=ZERO3)
        return cls(
            left_arm=rest_arm,
            right_arm=rest_arm,
            spine=ZERO3,
            hips=Hips(world_position=ZERO3, position=ZERO3, rotation=ZERO3),
        )
