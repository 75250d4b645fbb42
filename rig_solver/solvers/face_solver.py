"""Face landmark solver: head orientation, eyes, pupils, brow and mouth shape."""

import logging
from typing import Optional, Sequence, Tuple

import torch

from ..core.base_solver import BaseLandmarkSolver
from ..core.constants import (
    BLINK_BLEND,
    BLINK_CLOSING_THRESHOLD,
    BLINK_MAX_ROTATION,
    BLINK_NO_WINK_THRESHOLD,
    BLINK_OPENING_THRESHOLD,
    BLINK_WINK_THRESHOLD,
    BROW_MAX_RATIO,
    BROW_RAISE_RANGE,
    EYE_MAX_RATIO,
    EYE_OPEN_HIGH,
    EYE_OPEN_LOW,
    EYE_RATIO_LIMIT,
    FACE_LANDMARK_COUNT,
    FACE_LANDMARK_POINTS,
    FACE_REFINED_LANDMARK_COUNT,
    HEAD_POSITION_LERP,
    MOUTH_OPEN_RANGE,
    MOUTH_PHONEME_OPEN_RANGE,
    MOUTH_WIDTH_OFFSET,
    MOUTH_WIDTH_RANGE,
    MOUTH_WIDTH_SCALE,
    PHONEME_A_BASE,
    PHONEME_A_WEIGHT,
    PHONEME_E_RANGE,
    PHONEME_E_WEIGHT,
    PHONEME_I_OPEN_RANGE,
    PHONEME_O_RANGE,
    PHONEME_O_WEIGHT,
    PHONEME_U_RANGE,
    PHONEME_U_WEIGHT,
    PUPIL_REST_OFFSET,
    PUPIL_SCALE,
)
from ..core.types import Eyes, Face, Head, Mouth, Phoneme, Side, Vector2
from ..core.vector_math import PI, distance, lerp, remap, roll_pitch_yaw_plane, to_tuple, to_vector2

logger = logging.getLogger(__name__)

_EYE_POINTS = {
    Side.LEFT: FACE_LANDMARK_POINTS["eye_left"],
    Side.RIGHT: FACE_LANDMARK_POINTS["eye_right"],
}
_BROW_POINTS = {
    Side.LEFT: FACE_LANDMARK_POINTS["brow_left"],
    Side.RIGHT: FACE_LANDMARK_POINTS["brow_right"],
}
_PUPIL_POINTS = {
    Side.LEFT: FACE_LANDMARK_POINTS["pupil_left"],
    Side.RIGHT: FACE_LANDMARK_POINTS["pupil_right"],
}


def has_iris(landmarks: torch.Tensor) -> bool:
    """Whether the frame carries the iris refinement points (468-477)."""
    return landmarks.shape[0] >= FACE_REFINED_LANDMARK_COUNT


# Head ------------------------------------------------------------------------

def face_euler_plane(landmarks: torch.Tensor) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
    """
    Three points spanning the face plane.

    Returns:
        (top_left, top_right, bottom_midpoint): the outer brow corners and the
        midpoint of the two jaw points
    """
    top_left = landmarks[FACE_LANDMARK_POINTS["head_top_left"]]
    top_right = landmarks[FACE_LANDMARK_POINTS["head_top_right"]]
    bottom_right = landmarks[FACE_LANDMARK_POINTS["head_bottom_right"]]
    bottom_left = landmarks[FACE_LANDMARK_POINTS["head_bottom_left"]]

    bottom_midpoint = lerp(bottom_right, bottom_left, 0.5)

    return top_left, top_right, bottom_midpoint


def calc_head(landmarks: torch.Tensor) -> Head:
    """
    Calculate head rotation and the rough face box.

    Args:
        landmarks: Face landmarks (N, 3)

    Returns:
        Head with rotation in radians; X and Y are flipped, Z is not
    """
    top_left, top_right, bottom_midpoint = face_euler_plane(landmarks)
    rotate = roll_pitch_yaw_plane(top_left, top_right, bottom_midpoint)

    # Center of the brow line and rough box dimensions
    midpoint = lerp(top_left, top_right, 0.5)
    width = distance(top_left, top_right)
    height = distance(midpoint, bottom_midpoint)

    # Flip
    rotate = rotate * torch.tensor([-1.0, -1.0, 1.0], dtype=rotate.dtype)
    radians = rotate * PI

    return Head(
        x=float(radians[0]),
        y=float(radians[1]),
        z=float(radians[2]),
        width=float(width),
        height=float(height),
        position=to_tuple(lerp(midpoint, bottom_midpoint, HEAD_POSITION_LERP)),
        normalized_angles=to_tuple(rotate),
    )


# Mouth -----------------------------------------------------------------------

def calc_mouth(landmarks: torch.Tensor) -> Mouth:
    """
    Calculate mouth open/stretch and the vowel blend.

    Mouth distances are divided by eye distances so the result does not
    depend on face size or distance from the camera.

    Args:
        landmarks: Face landmarks (N, 3)

    Returns:
        Mouth with x, y and phoneme weights
    """
    inner_left, inner_right = FACE_LANDMARK_POINTS["eye_inner_corners"]
    outer_left, outer_right = FACE_LANDMARK_POINTS["eye_outer_corners"]
    upper_lip, lower_lip = FACE_LANDMARK_POINTS["lip_inner_center"]
    corner_left, corner_right = FACE_LANDMARK_POINTS["mouth_corners"]

    eye_inner_distance = distance(landmarks[inner_left], landmarks[inner_right])
    eye_outer_distance = distance(landmarks[outer_left], landmarks[outer_right])

    mouth_open = distance(landmarks[upper_lip], landmarks[lower_lip])
    mouth_width = distance(landmarks[corner_left], landmarks[corner_right])

    ratio_y = remap(mouth_open / eye_inner_distance, *MOUTH_OPEN_RANGE)

    ratio_x = remap(mouth_width / eye_outer_distance, *MOUTH_WIDTH_RANGE)
    ratio_x = (ratio_x - MOUTH_WIDTH_OFFSET) * MOUTH_WIDTH_SCALE

    mouth_x = ratio_x
    mouth_y = remap(mouth_open / eye_inner_distance, *MOUTH_PHONEME_OPEN_RANGE)

    ratio_i = torch.clamp(remap(mouth_x, 0.0, 1.0) * 2 * remap(mouth_y, *PHONEME_I_OPEN_RANGE), 0.0, 1.0)
    ratio_a = mouth_y * PHONEME_A_BASE + mouth_y * (1 - ratio_i) * PHONEME_A_WEIGHT
    ratio_u = mouth_y * remap(1 - ratio_i, *PHONEME_U_RANGE) * PHONEME_U_WEIGHT
    ratio_e = remap(ratio_u, *PHONEME_E_RANGE) * (1 - ratio_i) * PHONEME_E_WEIGHT
    ratio_o = (1 - ratio_i) * remap(mouth_y, *PHONEME_O_RANGE) * PHONEME_O_WEIGHT

    return Mouth(
        x=float(ratio_x),
        y=float(ratio_y),
        shape=Phoneme(
            a=float(ratio_a),
            e=float(ratio_e),
            i=float(ratio_i),
            o=float(ratio_o),
            u=float(ratio_u),
        ),
    )


# Eyes ------------------------------------------------------------------------

def eye_lid_ratio(landmarks: torch.Tensor, points: Sequence[int]) -> torch.Tensor:
    """
    Average lid gap divided by eye width, measured in 2D for less jitter.

    Args:
        landmarks: Face landmarks (N, 3)
        points: Eight indices ordered [outer_corner, inner_corner,
                outer_upper, mid_upper, inner_upper, outer_lower, mid_lower, inner_lower]

    Returns:
        Lid gap to width ratio
    """
    (outer_corner, inner_corner,
     outer_upper, mid_upper, inner_upper,
     outer_lower, mid_lower, inner_lower) = [to_vector2(landmarks[i]) for i in points]

    eye_width = distance(outer_corner, inner_corner)
    outer_lid = distance(outer_upper, outer_lower)
    mid_lid = distance(mid_upper, mid_lower)
    inner_lid = distance(inner_upper, inner_lower)
    lid_average = (outer_lid + mid_lid + inner_lid) / 3

    return lid_average / eye_width


def get_eye_open(landmarks: torch.Tensor,
                 side: Side,
                 high: float = EYE_OPEN_HIGH,
                 low: float = EYE_OPEN_LOW) -> torch.Tensor:
    """
    Eye openness for one side.

    Args:
        landmarks: Face landmarks with iris refinement (478, 3)
        side: Which eye
        high: Ratio mapped to fully open
        low: Ratio mapped to closed

    Returns:
        Openness in [0, 1]
    """
    eye_distance = eye_lid_ratio(landmarks, _EYE_POINTS[side])
    # Compare against the typical height to width ratio of an open eye
    ratio = torch.clamp(eye_distance / EYE_MAX_RATIO, 0.0, EYE_RATIO_LIMIT)
    return remap(ratio, low, high)


def calc_eyes(landmarks: torch.Tensor,
              high: float = EYE_OPEN_HIGH,
              low: float = EYE_OPEN_LOW) -> Eyes:
    """Eye openness for both eyes; fully open when the iris points are missing."""
    if not has_iris(landmarks):
        logger.debug("No iris landmarks (%d points), reporting eyes open", landmarks.shape[0])
        return Eyes(left=1.0, right=1.0)

    return Eyes(
        left=float(get_eye_open(landmarks, Side.LEFT, high, low)),
        right=float(get_eye_open(landmarks, Side.RIGHT, high, low)),
    )


def stabilize_blink(eyes: Eyes,
                    head_y: float,
                    enable_wink: bool = True,
                    max_rotation: float = BLINK_MAX_ROTATION) -> Eyes:
    """
    Damp blink asymmetry noise while keeping intentional winks.

    Args:
        eyes: Raw eye openness
        head_y: Head yaw in radians
        enable_wink: Allow one eye to stay open while the other closes
        max_rotation: Yaw beyond which the far eye is considered hidden

    Returns:
        New Eyes with both values in [0, 1]
    """
    left = min(max(eyes.left, 0.0), 1.0)
    right = min(max(eyes.right, 0.0), 1.0)

    # Far eye is occluded at extreme yaw, copy the visible one
    if head_y > max_rotation:
        logger.debug("Head yaw %.3f beyond %.3f, copying right eye", head_y, max_rotation)
        return Eyes(left=right, right=right)
    if head_y < -max_rotation:
        logger.debug("Head yaw %.3f beyond %.3f, copying left eye", head_y, -max_rotation)
        return Eyes(left=left, right=left)

    blink_diff = abs(left - right)
    blink_thresh = BLINK_WINK_THRESHOLD if enable_wink else BLINK_NO_WINK_THRESHOLD

    is_closing = left < BLINK_CLOSING_THRESHOLD and right < BLINK_CLOSING_THRESHOLD
    is_opening = left > BLINK_OPENING_THRESHOLD and right > BLINK_OPENING_THRESHOLD

    if blink_diff >= blink_thresh and not is_closing and not is_opening:
        return Eyes(left=left, right=right)

    # Blend both eyes toward the more open one
    low, high = min(left, right), max(left, right)
    value = low + (high - low) * BLINK_BLEND
    return Eyes(left=value, right=value)


# Pupils ----------------------------------------------------------------------

def pupil_pos(landmarks: torch.Tensor, side: Side) -> torch.Tensor:
    """
    Pupil offset from the eye center, scaled by eye width.

    Vertical offset is twice as sensitive as horizontal and is biased for the
    pupil's natural resting position slightly below center.

    Returns:
        (x, y) offset, roughly [-1, 1]
    """
    eye_points = _EYE_POINTS[side]
    outer_corner = landmarks[eye_points[0]]
    inner_corner = landmarks[eye_points[1]]
    eye_width = distance(to_vector2(outer_corner), to_vector2(inner_corner))
    midpoint = lerp(outer_corner, inner_corner, 0.5)

    pupil = landmarks[_PUPIL_POINTS[side][0]]
    dx = midpoint[0] - pupil[0]
    dy = midpoint[1] - pupil[1] - eye_width * PUPIL_REST_OFFSET

    ratio_x = PUPIL_SCALE * dx / (eye_width / 2)
    ratio_y = PUPIL_SCALE * dy / (eye_width / 4)

    return torch.stack([ratio_x, ratio_y])


def calc_pupils(landmarks: torch.Tensor) -> Vector2:
    """Average pupil position of both eyes; (0, 0) without iris points."""
    if not has_iris(landmarks):
        return (0.0, 0.0)

    pupils = (pupil_pos(landmarks, Side.LEFT) + pupil_pos(landmarks, Side.RIGHT)) * 0.5
    return to_tuple(pupils)


# Brow ------------------------------------------------------------------------

def get_brow_raise(landmarks: torch.Tensor, side: Side) -> torch.Tensor:
    """Brow raise for one side in [0, 1]."""
    brow_distance = eye_lid_ratio(landmarks, _BROW_POINTS[side])
    brow_ratio = brow_distance / BROW_MAX_RATIO - 1
    return remap(brow_ratio, *BROW_RAISE_RANGE)


def calc_brow(landmarks: torch.Tensor) -> float:
    if not has_iris(landmarks):
        return 0.0

    left = get_brow_raise(landmarks, Side.LEFT)
    right = get_brow_raise(landmarks, Side.RIGHT)
    return float((left + right) / 2)


class FaceSolver(BaseLandmarkSolver):
    """
    Solves MediaPipe Face Mesh landmarks (468 or 478 points) into face rig parameters.

    Head, mouth, eyes, pupils and brow are computed independently from the
    same frame. Without iris refinement (fewer than 478 points) eyes report
    open, pupils centered and brow neutral.

    Options set on the instance are defaults; each can be overridden per call
    to solve/solve_frame. The solver keeps no per-frame state.
    """

    min_landmarks = FACE_LANDMARK_COUNT

    def __init__(self,
                 smooth_blink: bool = False,
                 blink_high: float = EYE_OPEN_HIGH,
                 blink_low: float = EYE_OPEN_LOW,
                 enable_wink: bool = True,
                 max_rotation: float = BLINK_MAX_ROTATION):
        """
        Initialize the face solver.

        Args:
            smooth_blink: Apply blink stabilization
            blink_high: Eye ratio mapped to fully open
            blink_low: Eye ratio mapped to closed
            enable_wink: Keep winks during blink stabilization
            max_rotation: Head yaw (radians) beyond which the far eye copies the near one
        """
        self._smooth_blink = smooth_blink
        self._blink_high = blink_high
        self._blink_low = blink_low
        self._enable_wink = enable_wink
        self._max_rotation = max_rotation

    @property
    def smooth_blink(self) -> bool:
        return self._smooth_blink

    @property
    def blink_high(self) -> float:
        return self._blink_high

    @property
    def blink_low(self) -> float:
        return self._blink_low

    @property
    def enable_wink(self) -> bool:
        return self._enable_wink

    @property
    def max_rotation(self) -> float:
        return self._max_rotation

    def _solve_single(self,
                      landmarks: torch.Tensor,
                      smooth_blink: Optional[bool] = None,
                      blink_high: Optional[float] = None,
                      blink_low: Optional[float] = None,
                      enable_wink: Optional[bool] = None,
                      max_rotation: Optional[float] = None) -> Face:
        """
        Solve one validated face frame.

        Args:
            landmarks: Face landmarks (N, 3), N >= 468

        Returns:
            Face parameters
        """
        smooth_blink = self.smooth_blink if smooth_blink is None else smooth_blink
        blink_high = self.blink_high if blink_high is None else blink_high
        blink_low = self.blink_low if blink_low is None else blink_low
        enable_wink = self.enable_wink if enable_wink is None else enable_wink
        max_rotation = self.max_rotation if max_rotation is None else max_rotation

        head = calc_head(landmarks)
        mouth = calc_mouth(landmarks)

        eyes = calc_eyes(landmarks, high=blink_high, low=blink_low)
        if smooth_blink:
            eyes = stabilize_blink(eyes, head.y, enable_wink=enable_wink, max_rotation=max_rotation)

        return Face(
            head=head,
            eyes=eyes,
            brow=calc_brow(landmarks),
            pupils=calc_pupils(landmarks),
            mouth=mouth,
        )
