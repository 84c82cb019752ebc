"""
Inference engine contract consumed by the detector.

Any runtime (TFLite, ONNX Runtime, a test double) can back the detector as long
as it reports its tensor shapes and runs one prepared input at a time.
"""

from __future__ import annotations

from typing import Protocol, Sequence, Tuple

import numpy as np


class InferenceEngine(Protocol):
    def input_shape(self) -> Tuple[int, ...]:
        """Declared input shape, [1, H, W, 3]."""
        ...

    def output_shape(self) -> Tuple[int, ...]:
        """Declared output shape, [1, 5, N] or [1, N, 5]."""
        ...

    def run(self, blob: np.ndarray) -> np.ndarray:
        ...

    def close(self) -> None:
        ...


def check_input_shape(shape: Sequence[int]) -> Tuple[int, int]:
    """
    Validate an NHWC input shape and return the model size as (W, H).
    """

    dims = tuple(int(d) for d in shape)
    if len(dims) != 4 or dims[0] != 1 or dims[3] != 3 or dims[1] <= 0 or dims[2] <= 0:
        raise ValueError(f"Unexpected model input shape {list(dims)}: expected [1, H, W, 3].")
    return dims[2], dims[1]
