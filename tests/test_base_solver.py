import numpy as np
import pytest
import torch

from rig_solver import Face, FaceSolver, Pose, PoseSolver
from rig_solver.core.base_solver import BaseLandmarkSolver


def test_to_landmark_tensor_converts_numpy():
    array = np.arange(9, dtype=np.float32).reshape(3, 3)
    tensor = BaseLandmarkSolver.to_landmark_tensor(array)

    assert tensor.dtype == torch.float64
    assert tensor.shape == (3, 3)
    assert tensor[2, 1].item() == 7.0


def test_to_landmark_tensor_pads_2d_points():
    tensor = BaseLandmarkSolver.to_landmark_tensor([[0.1, 0.2], [0.3, 0.4]])

    assert tensor.shape == (2, 3)
    assert tensor[:, 2].tolist() == [0.0, 0.0]


def test_to_landmark_tensor_does_not_touch_input():
    original = torch.rand(4, 3, dtype=torch.float32)
    before = original.clone()
    tensor = BaseLandmarkSolver.to_landmark_tensor(original)
    tensor[0, 0] = 42.0

    assert torch.equal(original, before)


@pytest.mark.parametrize("shape", [(478,), (478, 3, 1), (478, 1)])
def test_malformed_frames_are_rejected(shape):
    with pytest.raises(ValueError):
        FaceSolver().solve(torch.zeros(shape, dtype=torch.float64))


def test_face_requires_468_landmarks(make_face):
    with pytest.raises(ValueError, match="468"):
        FaceSolver().solve(make_face()[:467])


def test_numpy_frame(face_landmarks):
    face = FaceSolver().solve(face_landmarks.numpy())
    assert face == FaceSolver().solve(face_landmarks)


def test_float32_frame_matches_float64(pose_landmarks):
    pose = PoseSolver().solve(pose_landmarks.float())
    assert isinstance(pose, Pose)
    assert pose.hips.position[2] == pytest.approx(-0.7, abs=1e-6)


def test_batch_keeps_missing_frames(face_landmarks):
    results = FaceSolver().solve([face_landmarks, None, face_landmarks])

    assert isinstance(results, list)
    assert isinstance(results[0], Face)
    assert results[1] is None
    assert results[0] == results[2]


def test_stream_is_lazy(pose_landmarks):
    calls = []

    def frames():
        for frame in (pose_landmarks, None):
            calls.append(frame)
            yield frame

    results = PoseSolver().solve(frames())
    assert calls == []

    assert isinstance(next(results), Pose)
    assert next(results) is None
    with pytest.raises(StopIteration):
        next(results)


def test_stream_forwards_options(face_landmarks):
    results = list(FaceSolver().solve(iter([face_landmarks]), blink_low=0.5, blink_high=0.8))
    expected = FaceSolver(blink_low=0.5, blink_high=0.8).solve(face_landmarks)
    assert results == [expected]


def test_nested_list_frame_is_solved_as_one_frame(pose_landmarks):
    pose = PoseSolver().solve(pose_landmarks.tolist())

    assert isinstance(pose, Pose)
    assert pose == PoseSolver().solve_frame(pose_landmarks.tolist())


def test_nested_tuple_frame_is_solved_as_one_frame(face_landmarks):
    frame = tuple(tuple(point) for point in face_landmarks.tolist())
    assert FaceSolver().solve(frame) == FaceSolver().solve(face_landmarks)


def test_batch_of_nested_list_frames(pose_landmarks):
    frames = [pose_landmarks.tolist(), None]
    results = PoseSolver().solve(frames)

    assert isinstance(results, list)
    assert isinstance(results[0], Pose)
    assert results[1] is None


@pytest.mark.parametrize("data, expected", [
    ([[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]], True),
    (((0.1, 0.2), (0.3, 0.4)), True),
    ([[1, 2, 3]], True),
    ([[[0.1, 0.2, 0.3]], None], False),
    ([None, [[0.1, 0.2, 0.3]]], False),
    ([[], [[0.1, 0.2, 0.3]]], False),
    ([], False),
    ([np.zeros((3, 3))], False),
])
def test_is_single_frame(data, expected):
    assert BaseLandmarkSolver.is_single_frame(data) is expected
