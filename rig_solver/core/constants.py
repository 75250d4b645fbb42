"""Landmark index tables and calibration constants for the rig solvers."""

import math

# Landmark counts
FACE_LANDMARK_COUNT = 468          # MediaPipe Face Mesh without iris refinement
FACE_REFINED_LANDMARK_COUNT = 478  # 468 face + 10 iris points (refine_landmarks=True)
POSE_LANDMARK_COUNT = 33           # BlazePose body landmarks

# MediaPipe 478-point face landmark indices used by the face solver.
# Eye and brow groups are ordered:
# [outer_corner, inner_corner,
#  outer_upper, mid_upper, inner_upper,
#  outer_lower, mid_lower, inner_lower]
FACE_LANDMARK_POINTS = {
    "eye_left": [130, 133, 160, 159, 158, 144, 145, 153],
    "eye_right": [263, 362, 387, 386, 385, 373, 374, 380],
    "brow_left": [35, 244, 63, 105, 66, 229, 230, 231],
    "brow_right": [265, 464, 293, 334, 296, 449, 450, 451],

    # Iris: [center, right, top, left, bottom]
    "pupil_left": [468, 469, 470, 471, 472],
    "pupil_right": [473, 474, 475, 476, 477],

    # Head plane: brow outer corners and the two jaw points averaged into the bottom midpoint
    "head_top_left": 21,
    "head_top_right": 251,
    "head_bottom_right": 397,
    "head_bottom_left": 172,

    # Mouth
    "eye_inner_corners": [133, 362],    # [left, right]
    "eye_outer_corners": [130, 263],    # [left, right]
    "lip_inner_center": [13, 14],       # [upper, lower]
    "mouth_corners": [61, 291],         # [left, right]
}

# BlazePose 33-point body landmark indices used by the pose solver.
# "left"/"right" follow MediaPipe's subject-relative naming.
POSE_LANDMARK_POINTS = {
    "left_shoulder": 11,
    "right_shoulder": 12,
    "left_elbow": 13,
    "right_elbow": 14,
    "left_wrist": 15,
    "right_wrist": 16,
    "left_pinky": 17,
    "right_pinky": 18,
    "left_index": 19,
    "right_index": 20,
    "left_hip": 23,
    "right_hip": 24,
}

# --- Face: head ---------------------------------------------------------------
HEAD_POSITION_LERP = 0.5

# --- Face: mouth --------------------------------------------------------------
MOUTH_OPEN_RANGE = (0.15, 0.7)
MOUTH_WIDTH_RANGE = (0.45, 0.9)
MOUTH_WIDTH_OFFSET = 0.3
MOUTH_WIDTH_SCALE = 2.0
MOUTH_PHONEME_OPEN_RANGE = (0.17, 0.5)

# Phoneme blend cascade
PHONEME_I_OPEN_RANGE = (0.2, 0.7)
PHONEME_A_BASE = 0.4
PHONEME_A_WEIGHT = 0.6
PHONEME_U_RANGE = (0.0, 0.3)
PHONEME_U_WEIGHT = 0.1
PHONEME_E_RANGE = (0.2, 1.0)
PHONEME_E_WEIGHT = 0.3
PHONEME_O_RANGE = (0.3, 1.0)
PHONEME_O_WEIGHT = 0.4

# --- Face: eyes ---------------------------------------------------------------
EYE_MAX_RATIO = 0.285       # Human eye height to width ratio is roughly 0.3
EYE_RATIO_LIMIT = 2.0
EYE_OPEN_HIGH = 0.85
EYE_OPEN_LOW = 0.55

# --- Face: blink stabilization ------------------------------------------------
BLINK_MAX_ROTATION = 0.5
BLINK_WINK_THRESHOLD = 0.8
BLINK_NO_WINK_THRESHOLD = 1.2
BLINK_CLOSING_THRESHOLD = 0.3
BLINK_OPENING_THRESHOLD = 0.6
BLINK_BLEND = 0.95

# --- Face: pupils -------------------------------------------------------------
PUPIL_SCALE = 4.0
PUPIL_REST_OFFSET = 0.075   # Fraction of eye width the pupil naturally rests below center

# --- Face: brow ---------------------------------------------------------------
BROW_MAX_RATIO = 1.15
BROW_RAISE_RANGE = (0.07, 0.125)

# --- Pose: arms ---------------------------------------------------------------
LOWER_ARM_Z_RANGE = (-2.14, 0.0)
UPPER_ARM_Z_SCALE = -2.3
UPPER_ARM_X_OFFSET = 0.3
LOWER_ARM_SCALE = 2.14
UPPER_ARM_X_RANGE = (-0.5, math.pi)
LOWER_ARM_X_RANGE = (-0.3, 0.3)
HAND_Y_RANGE = (-0.6, 0.6)
HAND_Y_SCALE = 2.0
HAND_Z_SCALE = -2.3

# --- Pose: hips and spine -----------------------------------------------------
CENTER_LERP = 1.0           # Lerp factor for hip/shoulder "center" (1.0 selects the second point)
HIP_ANCHOR_X = 0.65
HIP_POSITION_X_RANGE = (-1.0, 1.0)
HIP_POSITION_Z_RANGE = (-2.0, 0.0)
TURN_WRAP_THRESHOLD = 0.5
TURN_RECENTER = 0.5
TURN_AMOUNT_RANGE = (0.2, 0.4)

# Hip world position: x * (a + b * -z), z * (c + z * d)
HIP_WORLD_X_BASE = 0.5
HIP_WORLD_X_DEPTH = 1.8
HIP_WORLD_Z_BASE = 0.1
HIP_WORLD_Z_DEPTH = -2.0
