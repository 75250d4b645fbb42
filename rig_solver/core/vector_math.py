"""
Vector math primitives shared by the face and pose solvers.

Points are 1-D torch tensors of length 3 (x, y, z) and scalars are 0-d
tensors, all float64. Python floats are accepted wherever a scalar is
expected.

Angle triples are normalized to [-1, 1] as fractions of pi unless stated
otherwise.
"""

import math
from typing import Tuple, Union

import torch

Scalar = Union[float, torch.Tensor]

PI = math.pi
HALF_PI = math.pi / 2
TWO_PI = math.pi * 2


def as_scalar(value: Scalar) -> torch.Tensor:
    """Convert a float or tensor into a 0-d float64 tensor."""
    return torch.as_tensor(value, dtype=torch.float64)


def find_2d_angle(cx: Scalar, cy: Scalar, ex: Scalar, ey: Scalar) -> torch.Tensor:
    """
    Angle of the ray from (cx, cy) to (ex, ey).

    Returns:
        atan2(ey - cy, ex - cx) in radians, range (-pi, pi]
    """
    dy = as_scalar(ey) - as_scalar(cy)
    dx = as_scalar(ex) - as_scalar(cx)
    return torch.atan2(dy, dx)


def unit(vector: torch.Tensor) -> torch.Tensor:
    """
    Scale a vector to unit length.

    The vector must have non-zero length. A zero vector is not special-cased
    and yields NaN components.
    """
    return vector / torch.linalg.norm(vector)


def remap(val: Scalar, min_value: float, max_value: float) -> torch.Tensor:
    """
    Clamp a value to [min_value, max_value] and rescale it to [0, 1].

    Args:
        val: Value to remap
        min_value: Lower bound, maps to 0
        max_value: Upper bound, maps to 1

    Returns:
        Remapped value in [0, 1]

    Raises:
        ValueError: If max_value is not greater than min_value
    """
    if max_value <= min_value:
        raise ValueError(f"remap bounds must satisfy min < max, got [{min_value}, {max_value}]")
    clamped = torch.clamp(as_scalar(val), min_value, max_value)
    return (clamped - min_value) / (max_value - min_value)


def normalize_radians(radians: Scalar) -> torch.Tensor:
    """
    Fold an angle expected near zero into [-1, 1] (fractions of pi).

    Angles at or beyond +pi/2 are shifted down by 2*pi; angles at or below
    -pi/2 (including ones produced by the first shift) are shifted up by 2*pi
    and reflected around pi. This is not a general modulo.
    """
    radians = as_scalar(radians)
    if radians >= HALF_PI:
        radians = radians - TWO_PI
    if radians <= -HALF_PI:
        radians = radians + TWO_PI
        radians = PI - radians
    return radians / PI


def normalize_angle(radians: Scalar) -> torch.Tensor:
    """
    Wrap an angle into [-pi, pi] and scale it to [-1, 1].

    The remainder is truncated (keeps the sign of the input) before the
    branch correction.
    """
    angle = torch.fmod(as_scalar(radians), TWO_PI)
    if angle > PI:
        angle = angle - TWO_PI
    elif angle < -PI:
        angle = angle + TWO_PI
    return angle / PI


def find_rotation(vector: torch.Tensor, other: torch.Tensor, normalize: bool) -> torch.Tensor:
    """
    Pairwise-plane angles between two 3D points.

    Args:
        vector: Start point
        other: End point
        normalize: If True, unit-normalize the resulting triple as a 3-vector
                   (the triple itself, not each angle)

    Returns:
        Angles in the (z, x), (z, y) and (x, y) planes, radians unless normalized
    """
    result = torch.stack([
        find_2d_angle(vector[2], vector[0], other[2], other[0]),
        find_2d_angle(vector[2], vector[1], other[2], other[1]),
        find_2d_angle(vector[0], vector[1], other[0], other[1]),
    ])
    if normalize:
        return unit(result)
    return result


def angle_between_3d(a: torch.Tensor, b: torch.Tensor, c: torch.Tensor) -> torch.Tensor:
    """
    Angle at vertex b between rays b->a and b->c.

    Returns:
        Angle passed through normalize_radians, in [-1, 1]
    """
    vec1 = unit(a - b)
    vec2 = unit(c - b)
    # Rounding can push the dot product of unit vectors just past +-1
    dot = torch.clamp(torch.dot(vec1, vec2), -1.0, 1.0)
    return normalize_radians(torch.acos(dot))


def roll_pitch_yaw(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    """
    Rotation of the segment a->b from its projections on the axis planes.

    Returns:
        Normalized angles in the (z, y), (z, x) and (x, y) planes
    """
    return torch.stack([
        normalize_angle(find_2d_angle(a[2], a[1], b[2], b[1])),
        normalize_angle(find_2d_angle(a[2], a[0], b[2], b[0])),
        normalize_angle(find_2d_angle(a[0], a[1], b[0], b[1])),
    ])


def roll_pitch_yaw_plane(a: torch.Tensor, b: torch.Tensor, c: torch.Tensor) -> torch.Tensor:
    """
    Euler angles of the plane through three points.

    The X axis runs along a->b, the Z axis is the plane normal
    (b - a) x (c - a) and Y completes the basis as Z x X.

    Args:
        a: First point, origin of the basis
        b: Second point, defines the X axis
        c: Third point, fixes the plane

    Returns:
        Normalized (alpha, beta, gamma) angles in [-1, 1]
    """
    qb = b - a
    qc = c - a
    normal = torch.linalg.cross(qb, qc)

    unit_z = unit(normal)
    unit_x = unit(qb)
    unit_y = torch.linalg.cross(unit_z, unit_x)

    beta = torch.asin(torch.clamp(unit_z[0], -1.0, 1.0))
    alpha = torch.atan2(-unit_z[1], unit_z[2])
    gamma = torch.atan2(-unit_y[0], unit_x[0])

    return torch.stack([normalize_angle(alpha), normalize_angle(beta), normalize_angle(gamma)])


def lerp(a: torch.Tensor, b: torch.Tensor, t: float) -> torch.Tensor:
    """Linear interpolation from a to b, with t clamped to [0, 1]."""
    t = min(max(t, 0.0), 1.0)
    return a + (b - a) * t


def distance(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    """Euclidean distance between two points."""
    return torch.linalg.norm(b - a)


def to_vector2(vector: torch.Tensor) -> torch.Tensor:
    """Drop the z component of a point."""
    return vector[:2]


def to_tuple(vector: torch.Tensor) -> Tuple[float, ...]:
    """Convert a point or angle triple into a tuple of Python floats."""
    return tuple(float(v) for v in vector.tolist())
