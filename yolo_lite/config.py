from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .postprocess import YoloPostConfig
from .types import BoxFormat


@dataclass(frozen=True)
class DetectorConfig:
    model_path: str
    backend: Optional[str] = None
    num_threads: int = 4
    channel_order: str = "bgr"
    conf_threshold: float = 0.35
    iou_threshold: float = 0.45
    box_format: BoxFormat = BoxFormat.AUTO
    normalized_limit: float = 2.0
    format_sample_size: int = 32
    label: str = "object"
    max_detections: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.model_path:
            raise ValueError("model_path must not be empty")
        if self.backend is not None and self.backend not in ("tflite", "onnxruntime"):
            raise ValueError("backend must be 'tflite' or 'onnxruntime' if provided")
        if self.num_threads <= 0:
            raise ValueError("num_threads must be > 0")
        if self.channel_order not in ("bgr", "rgb"):
            raise ValueError("channel_order must be 'bgr' or 'rgb'")
        # Threshold ranges are checked by YoloPostConfig.
        self.post_config()

    def post_config(self) -> YoloPostConfig:
        return YoloPostConfig(
            conf_threshold=self.conf_threshold,
            iou_threshold=self.iou_threshold,
            box_format=self.box_format,
            normalized_limit=self.normalized_limit,
            format_sample_size=self.format_sample_size,
            label=self.label,
            max_detections=self.max_detections,
        )


def _require_number(payload: Dict[str, Any], key: str, default: float) -> float:
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return float(value)


def _require_int(
    payload: Dict[str, Any], key: str, default: Optional[int], nullable: bool = False
) -> Optional[int]:
    value = payload.get(key, default)
    if value is None and nullable:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return int(value)


def _require_str(
    payload: Dict[str, Any], key: str, default: Optional[str], nullable: bool = False
) -> Optional[str]:
    value = payload.get(key, default)
    if value is None and nullable:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


def load_detector_config(path: Path) -> DetectorConfig:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Detector config not found: {path}")
    raw = path.read_text(encoding="utf-8")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid detector config JSON: {path}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Detector config must be a JSON object")

    allowed = {
        "model_path",
        "backend",
        "num_threads",
        "channel_order",
        "conf_threshold",
        "iou_threshold",
        "box_format",
        "normalized_limit",
        "format_sample_size",
        "label",
        "max_detections",
    }
    unknown = sorted(set(payload.keys()) - allowed)
    if unknown:
        raise ValueError(f"Unknown detector config keys: {unknown}")

    if "model_path" not in payload:
        raise ValueError("Missing required key: model_path")
    model_path = _require_str(payload, "model_path", None)

    box_format = _require_str(payload, "box_format", "auto")
    try:
        fmt = BoxFormat(box_format.lower())
    except ValueError as exc:
        raise ValueError(f"box_format must be one of auto, xywh, xyxy (got {box_format!r})") from exc

    return DetectorConfig(
        model_path=model_path,
        backend=_require_str(payload, "backend", None, nullable=True),
        num_threads=_require_int(payload, "num_threads", 4),
        channel_order=_require_str(payload, "channel_order", "bgr"),
        conf_threshold=_require_number(payload, "conf_threshold", 0.35),
        iou_threshold=_require_number(payload, "iou_threshold", 0.45),
        box_format=fmt,
        normalized_limit=_require_number(payload, "normalized_limit", 2.0),
        format_sample_size=_require_int(payload, "format_sample_size", 32),
        label=_require_str(payload, "label", "object"),
        max_detections=_require_int(payload, "max_detections", None, nullable=True),
    )
