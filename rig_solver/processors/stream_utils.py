"""Streaming utilities for unified batch/stream solving."""

from typing import Any, Callable, Iterator, TypeVar

import numpy as np
import torch

T = TypeVar('T')


def is_iterator(obj: Any) -> bool:
    """
    Check if object should be treated as a stream of frames.

    Landmark containers (tensors, arrays) and common non-stream iterables
    are excluded even though they support iteration.

    Args:
        obj: Object to check

    Returns:
        True if object is an iterable stream of frames
    """
    if isinstance(obj, (torch.Tensor, np.ndarray, str, bytes, dict, list, tuple, set)):
        return False

    return hasattr(obj, '__iter__')


def apply_to_stream(stream: Iterator[T],
                    func: Callable[[T], Any],
                    preserve_none: bool = True) -> Iterator[Any]:
    """
    Lazily apply a function to each frame of a stream.

    Args:
        stream: Input stream
        func: Function to apply to each frame
        preserve_none: If True, None frames (no detection) pass through unchanged

    Yields:
        Results of applying func to each frame
    """
    for item in stream:
        if item is None and preserve_none:
            yield None
        else:
            yield func(item)
