from typing import Tuple

import numpy as np

from .types import BoxFormat


def to_corners(boxes: np.ndarray, box_format: BoxFormat) -> np.ndarray:
    """
    Convert (K,4) model-space boxes to x1, y1, x2, y2.
    """

    boxes = np.asarray(boxes, dtype=np.float32).reshape(-1, 4)
    if BoxFormat(box_format) is BoxFormat.XYXY:
        return boxes.copy()
    if BoxFormat(box_format) is not BoxFormat.XYWH:
        raise ValueError(f"Box format must be resolved before mapping, got {box_format!r}")

    cx, cy, w, h = boxes.T
    return np.stack([cx - w / 2, cy - h / 2, cx + w / 2, cy + h / 2], axis=1)


def scale_to_source(
    boxes: np.ndarray,
    model_size: Tuple[int, int],
    src_size: Tuple[int, int],
    normalized_limit: float = 2.0,
) -> np.ndarray:
    """
    Map xyxy boxes from model space to the original image and clamp them.

    The x pair and the y pair of each box are checked independently: when both
    values of a pair are <= `normalized_limit` they are treated as fractions of
    the model size, otherwise as model pixels.

    Args:
        boxes: (K,4) xyxy in model space
        model_size: (W, H) of the model input
        src_size: (width, height) of the original image
    """

    model_w, model_h = model_size
    src_w, src_h = src_size
    out = np.asarray(boxes, dtype=np.float32).reshape(-1, 4).copy()

    x_norm = (out[:, 0] <= normalized_limit) & (out[:, 2] <= normalized_limit)
    y_norm = (out[:, 1] <= normalized_limit) & (out[:, 3] <= normalized_limit)
    out[x_norm, 0::2] *= model_w
    out[y_norm, 1::2] *= model_h

    out[:, 0::2] *= src_w / float(model_w)
    out[:, 1::2] *= src_h / float(model_h)

    out[:, 0::2] = np.clip(out[:, 0::2], 0, src_w)
    out[:, 1::2] = np.clip(out[:, 1::2], 0, src_h)
    return out


def map_predictions(
    preds: np.ndarray,
    box_format: BoxFormat,
    model_size: Tuple[int, int],
    src_size: Tuple[int, int],
    normalized_limit: float = 2.0,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Map canonical (K,5) predictions to original-image boxes.

    Returns (boxes, scores) with boxes that collapse to zero or negative area
    after clamping removed.
    """

    preds = np.asarray(preds, dtype=np.float32).reshape(-1, 5)
    corners = to_corners(preds[:, :4], box_format)
    boxes = scale_to_source(corners, model_size, src_size, normalized_limit)

    valid = (boxes[:, 2] > boxes[:, 0]) & (boxes[:, 3] > boxes[:, 1])
    return boxes[valid], preds[valid, 4]
