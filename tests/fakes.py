from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np


class FakeEngine:
    """
    In-memory engine that returns a fixed output tensor.
    """

    def __init__(
        self,
        output: np.ndarray,
        input_shape: Sequence[int] = (1, 320, 320, 3),
        output_shape: Optional[Sequence[int]] = None,
    ):
        self.output = np.asarray(output, dtype=np.float32)
        self._input_shape = tuple(input_shape)
        self._output_shape = tuple(output_shape) if output_shape is not None else tuple(self.output.shape)
        self.blobs: List[Tuple[int, ...]] = []
        self.closed = False

    def input_shape(self) -> Tuple[int, ...]:
        return self._input_shape

    def output_shape(self) -> Tuple[int, ...]:
        return self._output_shape

    def run(self, blob: np.ndarray) -> np.ndarray:
        self.blobs.append(tuple(blob.shape))
        return self.output

    def close(self) -> None:
        self.closed = True


def candidate_major(rows: Sequence[Sequence[float]]) -> np.ndarray:
    """Build a [1, N, 5] tensor from (v0, v1, v2, v3, conf) rows."""
    return np.asarray(rows, dtype=np.float32)[None, ...]


def field_major(rows: Sequence[Sequence[float]]) -> np.ndarray:
    """Build a [1, 5, N] tensor from (v0, v1, v2, v3, conf) rows."""
    return np.asarray(rows, dtype=np.float32).T[None, ...].copy()
