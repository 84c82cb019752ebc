from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .types import Detection


@dataclass
class NMSConfig:
    iou_threshold: float = 0.45
    max_detections: Optional[int] = None


def box_iou(box: np.ndarray, others: np.ndarray) -> np.ndarray:
    """
    IoU between one xyxy box (4,) and many boxes (M,4).

    Returns zero wherever the boxes do not overlap or either area is non-positive.
    """

    box = np.asarray(box, dtype=np.float64)
    others = np.asarray(others, dtype=np.float64).reshape(-1, 4)

    xx1 = np.maximum(box[0], others[:, 0])
    yy1 = np.maximum(box[1], others[:, 1])
    xx2 = np.minimum(box[2], others[:, 2])
    yy2 = np.minimum(box[3], others[:, 3])

    inter = np.maximum(0.0, xx2 - xx1) * np.maximum(0.0, yy2 - yy1)
    area = (box[2] - box[0]) * (box[3] - box[1])
    areas = (others[:, 2] - others[:, 0]) * (others[:, 3] - others[:, 1])
    union = area + areas - inter

    valid = (inter > 0) & (area > 0) & (areas > 0) & (union > 0)
    iou = np.zeros(others.shape[0], dtype=np.float64)
    iou[valid] = inter[valid] / union[valid]
    return iou


def nms(boxes: np.ndarray, scores: np.ndarray, cfg: NMSConfig) -> np.ndarray:
    """
    Greedy NumPy NMS. Expects boxes shape (N,4) in xyxy and scores shape (N,).
    Returns indices of boxes to keep, highest score first.

    Sorting is stable, so among equal scores the earlier box wins. A box is
    suppressed only when its IoU with a kept box is strictly above the threshold.
    """

    if boxes.size == 0:
        return np.empty((0,), dtype=np.int32)

    order = np.argsort(-np.asarray(scores, dtype=np.float64), kind="stable")
    keep = []

    while order.size > 0:
        if cfg.max_detections is not None and len(keep) >= cfg.max_detections:
            break
        i = order[0]
        keep.append(i)

        iou = box_iou(boxes[i], boxes[order[1:]])
        order = order[1:][iou <= cfg.iou_threshold]

    return np.array(keep, dtype=np.int32)


def nms_detections(detections: Sequence[Detection], iou_threshold: float) -> List[Detection]:
    """
    Run greedy NMS over `Detection` objects and return the survivors by score.
    """

    if not detections:
        return []
    boxes = np.array([d.as_xyxy() for d in detections], dtype=np.float64)
    scores = np.array([d.score for d in detections], dtype=np.float64)
    keep = nms(boxes, scores, NMSConfig(iou_threshold=iou_threshold))
    return [detections[i] for i in keep]
