"""Body landmark solver: arm, hip and spine rotations for a humanoid rig."""

import logging
from typing import Tuple

import torch

from ..core.base_solver import BaseLandmarkSolver
from ..core.constants import (
    CENTER_LERP,
    HAND_Y_RANGE,
    HAND_Y_SCALE,
    HAND_Z_SCALE,
    HIP_ANCHOR_X,
    HIP_POSITION_X_RANGE,
    HIP_POSITION_Z_RANGE,
    HIP_WORLD_X_BASE,
    HIP_WORLD_X_DEPTH,
    HIP_WORLD_Z_BASE,
    HIP_WORLD_Z_DEPTH,
    LOWER_ARM_SCALE,
    LOWER_ARM_X_RANGE,
    LOWER_ARM_Z_RANGE,
    POSE_LANDMARK_COUNT,
    POSE_LANDMARK_POINTS,
    TURN_AMOUNT_RANGE,
    TURN_RECENTER,
    TURN_WRAP_THRESHOLD,
    UPPER_ARM_X_OFFSET,
    UPPER_ARM_X_RANGE,
    UPPER_ARM_Z_SCALE,
)
from ..core.types import Arm, Hips, Pose, Side, Vector3
from ..core.vector_math import (
    PI,
    angle_between_3d,
    distance,
    find_rotation,
    lerp,
    remap,
    roll_pitch_yaw,
    to_tuple,
    to_vector2,
)

logger = logging.getLogger(__name__)

# The rig's right arm follows the landmarks MediaPipe labels "left" (mirrored view)
_ARM_LANDMARKS = {
    Side.RIGHT: ("left_shoulder", "right_shoulder", "left_elbow", "left_wrist", "left_pinky", "left_index"),
    Side.LEFT: ("right_shoulder", "left_shoulder", "right_elbow", "right_wrist", "right_pinky", "right_index"),
}


def _point(landmarks: torch.Tensor, name: str) -> torch.Tensor:
    return landmarks[POSE_LANDMARK_POINTS[name]]


# Arms ------------------------------------------------------------------------

def solve_arm_segments(landmarks: torch.Tensor,
                       side: Side) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
    """
    Raw upper arm, lower arm and hand rotations for one side.

    The normalized rotation triple does not capture joint flexion well, so its
    Y component is replaced with the bend angle at the shoulder/elbow.

    Args:
        landmarks: Pose landmarks (33, 3)
        side: Rig side

    Returns:
        (upper, lower, hand) solver-space rotation triples
    """
    shoulder, other_shoulder, elbow, wrist, pinky, index = (
        _point(landmarks, name) for name in _ARM_LANDMARKS[side]
    )

    upper = find_rotation(shoulder, elbow, True)
    upper[1] = angle_between_3d(other_shoulder, shoulder, elbow)

    lower = find_rotation(elbow, wrist, True)
    lower[1] = angle_between_3d(shoulder, elbow, wrist)
    lower[2] = torch.clamp(lower[2], *LOWER_ARM_Z_RANGE)

    hand = find_rotation(wrist, lerp(pinky, index, 0.5), True)

    return upper, lower, hand


def rig_arm(upper: torch.Tensor, lower: torch.Tensor, hand: torch.Tensor, side: Side) -> Arm:
    """
    Map raw arm rotations into humanoid rig joint space.

    Applies side-dependent sign inversion and the calibrated scale factors.
    Shoulder roll is reduced by the positive parts of the raw elbow X and Z
    for a more natural silhouette.

    Args:
        upper: Raw upper arm triple
        lower: Raw lower arm triple (Z already clamped)
        hand: Raw hand triple
        side: Rig side

    Returns:
        Rigged Arm in radians
    """
    invert = 1.0 if side is Side.RIGHT else -1.0

    upper_z = upper[2] * UPPER_ARM_Z_SCALE * invert

    upper_y = upper[1] * PI * invert
    upper_y = upper_y - torch.clamp(lower[0], min=0.0)
    upper_y = upper_y - -invert * torch.clamp(lower[2], min=0.0)
    upper_x = upper[0] - UPPER_ARM_X_OFFSET * invert

    lower_z = lower[2] * -LOWER_ARM_SCALE * invert
    lower_y = lower[1] * LOWER_ARM_SCALE * invert
    lower_x = lower[0] * LOWER_ARM_SCALE * invert

    # Realistic humanoid limits
    upper_x = torch.clamp(upper_x, *UPPER_ARM_X_RANGE)
    lower_x = torch.clamp(lower_x, *LOWER_ARM_X_RANGE)

    hand_y = torch.clamp(hand[2] * HAND_Y_SCALE, *HAND_Y_RANGE)  # sides
    hand_z = hand[2] * HAND_Z_SCALE * invert  # up and down

    return Arm(
        upper=to_tuple(torch.stack([upper_x, upper_y, upper_z])),
        lower=to_tuple(torch.stack([lower_x, lower_y, lower_z])),
        hand=to_tuple(torch.stack([hand[0], hand_y, hand_z])),
    )


def calc_arms(landmarks: torch.Tensor) -> Tuple[Arm, Arm]:
    """
    Solve and rig both arms.

    Returns:
        (left_arm, right_arm)
    """
    left_arm = rig_arm(*solve_arm_segments(landmarks, Side.LEFT), Side.LEFT)
    right_arm = rig_arm(*solve_arm_segments(landmarks, Side.RIGHT), Side.RIGHT)
    return left_arm, right_arm


# Hips and spine --------------------------------------------------------------

def stabilize_turn(rotation: torch.Tensor) -> torch.Tensor:
    """
    Clean up a two-point torso rotation.

    Recenters the Y seam, folds Z so the tilt does not jump between left and
    right, and damps Z as the body turns side-on where the tilt estimate is
    unreliable. X is zeroed because it is not accurate.

    Args:
        rotation: Normalized roll_pitch_yaw triple

    Returns:
        Stabilized normalized triple
    """
    y = rotation[1]
    z = rotation[2]

    if y > TURN_WRAP_THRESHOLD:
        y = y - 2
    y = y + TURN_RECENTER

    # Stop jumping between left and right tilt
    if z > 0:
        z = 1 - z
    elif z < 0:
        z = -1 - z

    turn_amount = remap(torch.abs(y), *TURN_AMOUNT_RANGE)
    z = z * (1 - turn_amount)

    return torch.stack([torch.zeros_like(y), y, z])


def calc_hips(landmarks: torch.Tensor) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
    """
    Raw hip position, hip rotation and spine rotation.

    Args:
        landmarks: Pose landmarks (33, 3)

    Returns:
        (hip_position, hip_rotation, spine) with rotations normalized to [-1, 1]
    """
    hip_left = _point(landmarks, "left_hip")
    hip_right = _point(landmarks, "right_hip")
    shoulder_left = _point(landmarks, "left_shoulder")
    shoulder_right = _point(landmarks, "right_shoulder")

    # TODO: CENTER_LERP of 1.0 picks the right-side point rather than the midpoint;
    # switching to 0.5 changes hip placement and needs recalibrating HIP_ANCHOR_X.
    hip_center = lerp(to_vector2(hip_left), to_vector2(hip_right), CENTER_LERP)
    shoulder_center = lerp(to_vector2(shoulder_left), to_vector2(shoulder_right), CENTER_LERP)
    spine_length = distance(hip_center, shoulder_center)

    position = torch.stack([
        torch.clamp(-1 * (hip_center[0] - HIP_ANCHOR_X), *HIP_POSITION_X_RANGE),
        torch.zeros_like(spine_length),
        torch.clamp(spine_length - 1, *HIP_POSITION_Z_RANGE),
    ])

    rotation = stabilize_turn(roll_pitch_yaw(hip_left, hip_right))
    spine = stabilize_turn(roll_pitch_yaw(shoulder_left, shoulder_right))

    return position, rotation, spine


def rig_hips(position: torch.Tensor, rotation: torch.Tensor, spine: torch.Tensor) -> Tuple[Hips, Vector3]:
    """
    Convert hip and spine rotations to radians and place the hips in world space.

    The world position mixes horizontal offset and depth to account for
    perspective foreshortening from a single camera.

    Returns:
        (hips, spine) with rotations in radians
    """
    x, z = position[0], position[2]
    world_position = torch.stack([
        x * (HIP_WORLD_X_BASE + HIP_WORLD_X_DEPTH * -z),
        torch.zeros_like(x),
        z * (HIP_WORLD_Z_BASE + z * HIP_WORLD_Z_DEPTH),
    ])

    hips = Hips(
        world_position=to_tuple(world_position),
        position=to_tuple(position),
        rotation=to_tuple(rotation * PI),
    )
    return hips, to_tuple(spine * PI)


class PoseSolver(BaseLandmarkSolver):
    """
    Solves BlazePose body landmarks (33 points) into humanoid rig rotations.

    Arms, hips and spine are solved; legs are part of the Pose shape but are
    not computed and stay None.
    """

    min_landmarks = POSE_LANDMARK_COUNT

    def _solve_single(self, landmarks: torch.Tensor) -> Pose:
        left_arm, right_arm = calc_arms(landmarks)
        hips, spine = rig_hips(*calc_hips(landmarks))
        # TODO: solve legs from the hip, knee and ankle landmarks (23-28)

        logger.debug("Solved pose: hips rotation %s, spine %s", hips.rotation, spine)

        return Pose(
            left_arm=left_arm,
            right_arm=right_arm,
            spine=spine,
            hips=hips,
        )
