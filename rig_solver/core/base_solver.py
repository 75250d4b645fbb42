"""Base class for landmark to rig parameter solvers."""

from abc import ABC, abstractmethod
from typing import Any, Iterator, List, Optional, Sequence, Union
import numpy as np
import torch

from ..processors.stream_utils import apply_to_stream, is_iterator

LandmarkInput = Union[torch.Tensor, np.ndarray, Sequence[Sequence[float]]]


class BaseLandmarkSolver(ABC):
    """
    Abstract base class for solvers mapping one landmark frame to rig parameters.

    Solvers are stateless: every frame is solved independently and the same
    input always produces the same output.
    """

    # Minimum number of landmarks a frame must contain
    min_landmarks: int = 0

    def solve(self,
              input_data: Union[LandmarkInput, Iterator[Optional[LandmarkInput]], List[Optional[LandmarkInput]]],
              **options: Any) -> Any:
        """
        Unified solving interface supporting single frame, batch, and streaming modes.

        Args:
            input_data: A single landmark frame (torch.Tensor, numpy array or nested point
                        sequences, shape (N, 3)), a list of frames, or an iterator of frames.
                        None frames pass through.
            **options: Per-call solver options, forwarded to solve_frame

        Returns:
            - Single frame: solver result
            - List: list of results
            - Iterator: iterator of results
        """
        # Handle single frame
        if isinstance(input_data, (torch.Tensor, np.ndarray)):
            return self.solve_frame(input_data, **options)

        # Handle a single frame given as nested point sequences
        elif self.is_single_frame(input_data):
            return self.solve_frame(input_data, **options)

        # Handle iterator/generator (streaming mode)
        elif is_iterator(input_data):
            return apply_to_stream(input_data, lambda frame: self.solve_frame(frame, **options), preserve_none=True)

        # Handle list (batch mode)
        else:
            return [self.solve_frame(frame, **options) if frame is not None else None for frame in input_data]

    def solve_frame(self, landmarks: LandmarkInput, **options: Any) -> Any:
        """
        Solve a single landmark frame.

        Args:
            landmarks: Landmark frame of shape (N, 3) or (N, 2)
            **options: Per-call solver options

        Returns:
            Solver result for the frame

        Raises:
            ValueError: If the frame is malformed or has too few landmarks
        """
        tensor = self.to_landmark_tensor(landmarks)
        self.validate_landmarks(tensor)
        return self._solve_single(tensor, **options)

    @abstractmethod
    def _solve_single(self, landmarks: torch.Tensor, **options: Any) -> Any:
        """
        Solve a validated frame.

        Args:
            landmarks: Landmarks as a CPU float64 tensor (N, 3)
        """
        pass

    @staticmethod
    def is_single_frame(data: Any) -> bool:
        """
        Whether a list or tuple is one frame of points rather than a batch of frames.

        A frame given as nested sequences holds points whose first item is a
        number, while a batch holds frames (or None) at the top level.

        Args:
            data: Candidate list or tuple

        Returns:
            True if data is a single frame of [x, y(, z)] points
        """
        if not isinstance(data, (list, tuple)) or not data:
            return False
        first = data[0]
        return isinstance(first, (list, tuple)) and len(first) > 0 and isinstance(first[0], (int, float))

    @staticmethod
    def to_landmark_tensor(landmarks: LandmarkInput) -> torch.Tensor:
        """
        Convert a landmark frame to a CPU float64 tensor.

        The caller's data is never modified. 2D frames get a zero z column.

        Args:
            landmarks: Landmark coordinates (N, 2) or (N, 3)

        Returns:
            Landmarks as torch tensor (N, 3)
        """
        if isinstance(landmarks, torch.Tensor):
            tensor = landmarks.detach().to(device="cpu", dtype=torch.float64)
        else:
            tensor = torch.as_tensor(np.asarray(landmarks, dtype=np.float64))

        if tensor.dim() == 2 and tensor.shape[1] == 2:
            tensor = torch.cat([tensor, torch.zeros(tensor.shape[0], 1, dtype=torch.float64)], dim=1)

        return tensor

    def validate_landmarks(self, landmarks: torch.Tensor) -> None:
        """
        Check the frame layout before any index access.

        Raises:
            ValueError: If the frame is not (N, 3) or holds fewer than min_landmarks points
        """
        if landmarks.dim() != 2 or landmarks.shape[1] < 3:
            raise ValueError(f"Expected landmarks of shape (N, 3), got {tuple(landmarks.shape)}")
        if landmarks.shape[0] < self.min_landmarks:
            raise ValueError(
                f"{type(self).__name__} needs at least {self.min_landmarks} landmarks, "
                f"got {landmarks.shape[0]}"
            )
