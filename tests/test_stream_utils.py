import numpy as np
import torch

from rig_solver.processors import apply_to_stream, is_iterator


def test_landmark_containers_are_not_streams():
    assert not is_iterator(torch.zeros(33, 3))
    assert not is_iterator(np.zeros((33, 3)))
    assert not is_iterator([torch.zeros(33, 3)])
    assert not is_iterator("frames")


def test_generators_are_streams():
    assert is_iterator(x for x in range(3))
    assert is_iterator(iter([1, 2]))


def test_apply_to_stream_preserves_none():
    assert list(apply_to_stream(iter([1, None, 3]), lambda x: x * 2)) == [2, None, 6]


def test_apply_to_stream_can_pass_none_to_func():
    result = list(apply_to_stream(iter([None]), lambda x: "missing" if x is None else x, preserve_none=False))
    assert result == ["missing"]
