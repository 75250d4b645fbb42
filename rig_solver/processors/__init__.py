"""Processing utilities for frame streams."""

from .stream_utils import (
    apply_to_stream,
    is_iterator,
)

__all__ = [
    "apply_to_stream",
    "is_iterator",
]
