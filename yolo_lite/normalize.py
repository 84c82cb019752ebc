from typing import Sequence, Tuple

import numpy as np

from .types import OutputShapeError

FIELDS = 5

FIELD_MAJOR = "field_major"  # [1, 5, N]
CANDIDATE_MAJOR = "candidate_major"  # [1, N, 5]


def output_layout(shape: Sequence[int]) -> Tuple[str, int]:
    """
    Classify a declared output shape.

    Returns (layout, N). Only [1, 5, N] and [1, N, 5] are accepted; when both
    trailing axes are 5 the field-major reading wins.
    """

    dims = tuple(int(d) for d in shape)
    if len(dims) != 3:
        raise OutputShapeError(f"Unexpected YOLO output shape {list(dims)}: expected rank 3.")
    if dims[0] != 1:
        raise OutputShapeError(f"Batch > 1 is not supported (got shape {list(dims)}).")
    if dims[1] == FIELDS:
        return FIELD_MAJOR, dims[2]
    if dims[2] == FIELDS:
        return CANDIDATE_MAJOR, dims[1]
    raise OutputShapeError(
        f"Unexpected YOLO output shape {list(dims)}: expected [1, 5, N] or [1, N, 5]."
    )


def normalize_output(raw: np.ndarray) -> np.ndarray:
    """
    Convert a raw output tensor into canonical predictions of shape (N, 5).

    Each row is (v0, v1, v2, v3, conf) whatever the physical layout was.
    """

    p = np.asarray(raw)
    layout, n = output_layout(p.shape)
    p = p[0]
    if layout == FIELD_MAJOR:
        p = p.T
    preds = np.ascontiguousarray(p, dtype=np.float32)
    return preds
