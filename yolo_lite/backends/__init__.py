"""
Concrete inference engines.

Each module imports its runtime on construction, so `yolo_lite` itself imports
without TFLite or ONNX Runtime installed. Pick one through `load_detector`.
"""

from __future__ import annotations

__all__ = ["tflite_backend", "onnxruntime_backend"]
