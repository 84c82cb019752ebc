from __future__ import annotations

from typing import Iterable, Tuple

import numpy as np

from .types import Detection

BOX_COLOR = (0, 255, 0)  # BGR
TEXT_COLOR = (255, 255, 255)
LABEL_BG_COLOR = (0, 0, 0)


def format_label(det: Detection, show_score: bool = True) -> str:
    if not show_score:
        return det.label
    return f"{det.label} {int(det.score * 100)}%"


def fill_center_transform(src_size: Tuple[int, int], view_size: Tuple[int, int]) -> Tuple[float, float, float]:
    """
    Scale and offsets that fit a source image into a view, filling it and
    cropping the overflow equally on both sides.

    Returns (scale, dx, dy); a source point (x, y) lands at (dx + x*scale, dy + y*scale).
    """

    src_w, src_h = src_size
    view_w, view_h = view_size
    if src_w <= 0 or src_h <= 0:
        raise ValueError(f"Source size must be positive, got {src_size}")
    scale = max(view_w / float(src_w), view_h / float(src_h))
    dx = (view_w - src_w * scale) / 2.0
    dy = (view_h - src_h * scale) / 2.0
    return scale, dx, dy


def to_view(det: Detection, transform: Tuple[float, float, float]) -> Tuple[float, float, float, float]:
    scale, dx, dy = transform
    return (
        dx + det.x1 * scale,
        dy + det.y1 * scale,
        dx + det.x2 * scale,
        dy + det.y2 * scale,
    )


def draw_detections(
    image_bgr: np.ndarray,
    detections: Iterable[Detection],
    *,
    show_score: bool = True,
    box_thickness: int = 2,
    font_scale: float = 0.5,
    font_thickness: int = 1,
) -> np.ndarray:
    """
    Draw bounding boxes + labels on an OpenCV BGR image and return a copy.

    Args:
        image_bgr: input image in BGR (H, W, 3).
        detections: iterable of Detection with xyxy in original image coordinates.
    """

    try:
        import cv2  # type: ignore
    except Exception as e:  # pragma: no cover
        raise ImportError("OpenCV is required for draw_detections(). Install with `pip install opencv-python`.") from e

    if image_bgr is None or not hasattr(image_bgr, "shape"):
        raise TypeError("image_bgr must be a NumPy array (BGR).")
    if image_bgr.ndim != 3 or image_bgr.shape[2] != 3:
        raise ValueError(f"Expected image shape (H, W, 3), got {getattr(image_bgr, 'shape', None)}")

    out = image_bgr.copy()
    h, w = out.shape[:2]

    for det in detections:
        x1, y1, x2, y2 = det.as_xyxy()
        x1i = int(np.clip(round(x1), 0, w - 1))
        y1i = int(np.clip(round(y1), 0, h - 1))
        x2i = int(np.clip(round(x2), 0, w - 1))
        y2i = int(np.clip(round(y2), 0, h - 1))

        cv2.rectangle(out, (x1i, y1i), (x2i, y2i), BOX_COLOR, thickness=box_thickness)

        label = format_label(det, show_score=show_score)
        (tw, th), baseline = cv2.getTextSize(label, cv2.FONT_HERSHEY_SIMPLEX, font_scale, font_thickness)
        # Place label above the box if possible, else inside.
        y_text_top = y1i - th - baseline
        if y_text_top < 0:
            y_text_top = y1i

        x_text_right = min(x1i + tw, w - 1)
        y_text_bottom = min(y_text_top + th + baseline, h - 1)

        cv2.rectangle(out, (x1i, y_text_top), (x_text_right, y_text_bottom), LABEL_BG_COLOR, thickness=-1)
        cv2.putText(
            out,
            label,
            (x1i, min(y_text_top + th, h - 1)),
            cv2.FONT_HERSHEY_SIMPLEX,
            font_scale,
            TEXT_COLOR,
            thickness=font_thickness,
            lineType=cv2.LINE_AA,
        )

    return out
