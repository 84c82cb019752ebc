from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .box_format import FormatDecision, resolve_box_format
from .coords import map_predictions
from .nms import NMSConfig, nms
from .normalize import normalize_output
from .types import BoxFormat, Detection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class YoloPostConfig:
    """
    Post-processing settings for single-class YOLO exports with 5 fields per candidate.
    """

    conf_threshold: float = 0.35
    iou_threshold: float = 0.45
    # AUTO votes on every call; set XYWH/XYXY when the export is known.
    box_format: BoxFormat = BoxFormat.AUTO
    # Coordinate pairs at or below this value are read as normalized.
    normalized_limit: float = 2.0
    format_sample_size: int = 32
    narrow_vote_margin: float = 0.1
    label: str = "object"
    # Cap applied after NMS; None keeps everything.
    max_detections: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "box_format", BoxFormat(self.box_format))
        if not 0.0 <= self.conf_threshold <= 1.0:
            raise ValueError("conf_threshold must be in [0, 1]")
        if not 0.0 < self.iou_threshold < 1.0:
            raise ValueError("iou_threshold must be in (0, 1)")
        if self.normalized_limit <= 0:
            raise ValueError("normalized_limit must be > 0")
        if self.format_sample_size <= 0:
            raise ValueError("format_sample_size must be > 0")
        if not 0.0 <= self.narrow_vote_margin <= 0.5:
            raise ValueError("narrow_vote_margin must be in [0, 0.5]")
        if self.max_detections is not None and self.max_detections <= 0:
            raise ValueError("max_detections must be > 0 if provided")


class YoloPostprocessor:
    """
    Turns one raw output tensor into detections in original image coordinates.

    Steps: normalize layout -> decide box format -> confidence filter ->
    map to source pixels (dropping degenerate boxes) -> greedy NMS.
    """

    def __init__(self, cfg: YoloPostConfig = YoloPostConfig()):
        self.cfg = cfg
        self.last_decision: Optional[FormatDecision] = None

    def process(
        self,
        raw: np.ndarray,
        model_size: Tuple[int, int],
        orig_size: Tuple[int, int],
    ) -> List[Detection]:
        """
        Args:
            raw: model output, shape [1, 5, N] or [1, N, 5]
            model_size: (W, H) of the model input
            orig_size: (width, height) of the image the caller passed in
        """

        preds = normalize_output(raw)
        decision = resolve_box_format(
            preds,
            self.cfg.box_format,
            sample_size=self.cfg.format_sample_size,
            narrow_margin=self.cfg.narrow_vote_margin,
        )
        self.last_decision = decision

        keep = preds[:, 4] >= self.cfg.conf_threshold
        candidates = preds[keep]
        if candidates.shape[0] == 0:
            logger.debug("%d raw candidates, none above %.2f", preds.shape[0], self.cfg.conf_threshold)
            return []

        boxes, scores = map_predictions(
            candidates,
            decision.box_format,
            model_size,
            orig_size,
            normalized_limit=self.cfg.normalized_limit,
        )
        keep_idx = nms(
            boxes,
            scores,
            NMSConfig(iou_threshold=self.cfg.iou_threshold, max_detections=self.cfg.max_detections),
        )
        logger.debug(
            "%d raw candidates, %d above threshold, %d mapped, %d after NMS (%s)",
            preds.shape[0],
            candidates.shape[0],
            boxes.shape[0],
            keep_idx.size,
            decision.box_format.value,
        )

        return [
            Detection(
                x1=float(boxes[i, 0]),
                y1=float(boxes[i, 1]),
                x2=float(boxes[i, 2]),
                y2=float(boxes[i, 3]),
                score=float(scores[i]),
                label=self.cfg.label,
            )
            for i in keep_idx
        ]
