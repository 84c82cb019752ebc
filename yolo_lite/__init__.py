"""
Single-class YOLO detection on top of a pluggable inference engine.

Core pieces (layout normalization, box format voting, coordinate mapping, NMS)
only need NumPy; OpenCV is used for resizing and drawing. Inference runtimes
(TFLite, ONNX Runtime) live in `yolo_lite.backends` and are imported lazily.
"""

from .types import BoxFormat, Detection, OutputShapeError
from .nms import NMSConfig, box_iou, nms, nms_detections
from .normalize import normalize_output, output_layout
from .box_format import FormatDecision, infer_box_format, resolve_box_format
from .coords import map_predictions, scale_to_source, to_corners
from .preprocess import InputBuffer, TensorPreprocessor
from .engine import InferenceEngine, check_input_shape
from .postprocess import YoloPostConfig, YoloPostprocessor
from .runtime import YoloDetector, find_project_root, load_detector, resolve_path
from .config import DetectorConfig, load_detector_config
from .visualize import draw_detections, fill_center_transform, to_view

__all__ = [
    "BoxFormat",
    "Detection",
    "OutputShapeError",
    "NMSConfig",
    "box_iou",
    "nms",
    "nms_detections",
    "normalize_output",
    "output_layout",
    "FormatDecision",
    "infer_box_format",
    "resolve_box_format",
    "map_predictions",
    "scale_to_source",
    "to_corners",
    "InputBuffer",
    "TensorPreprocessor",
    "InferenceEngine",
    "check_input_shape",
    "YoloPostConfig",
    "YoloPostprocessor",
    "YoloDetector",
    "find_project_root",
    "load_detector",
    "resolve_path",
    "DetectorConfig",
    "load_detector_config",
    "draw_detections",
    "fill_center_transform",
    "to_view",
]
