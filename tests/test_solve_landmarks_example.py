import importlib.util
import json
from pathlib import Path

import pytest

EXAMPLE_PATH = Path(__file__).parent.parent / "examples" / "solve_landmarks.py"


@pytest.fixture
def example():
    spec = importlib.util.spec_from_file_location("solve_landmarks", EXAMPLE_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def write_json(path, data):
    path.write_text(json.dumps(data))
    return path


def test_load_single_frame(example, tmp_path):
    path = write_json(tmp_path / "frame.json", [[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]])
    frames = example.load_frames(path)

    assert len(frames) == 1
    assert frames[0].shape == (2, 3)


def test_load_frames_keeps_missing(example, tmp_path):
    path = write_json(tmp_path / "frames.json", [None, [[0.1, 0.2, 0.3]]])
    frames = example.load_frames(path)

    assert frames[0] is None
    assert frames[1].shape == (1, 3)


def test_load_frames_with_empty_first_frame(example, tmp_path):
    path = write_json(tmp_path / "frames.json", [[], [[0.1, 0.2, 0.3]]])
    frames = example.load_frames(path)

    assert len(frames) == 2
    assert frames[0].size == 0
    assert frames[1].shape == (1, 3)
