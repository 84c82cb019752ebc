from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np

from .box_format import FormatDecision
from .engine import InferenceEngine, check_input_shape
from .normalize import output_layout
from .postprocess import YoloPostConfig, YoloPostprocessor
from .preprocess import TensorPreprocessor
from .types import Detection, OutputShapeError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def find_project_root(
    start: Optional[PathLike] = None,
    markers: Sequence[str] = ("pyproject.toml", "setup.py", ".git", "requirements.txt"),
) -> Path:
    """
    Best-effort project root discovery.

    Useful when models live in `<root>/models` and the detector is started from a subdirectory.
    """

    p = Path(start) if start is not None else Path.cwd()
    p = p.resolve()

    # If a file is provided, start from its directory.
    if p.is_file():
        p = p.parent

    for parent in (p, *p.parents):
        for m in markers:
            if (parent / m).exists():
                return parent
    return p


def resolve_path(path: PathLike, root: Optional[PathLike] = "auto") -> Path:
    """
    Resolve `path` to an absolute Path.

    - Absolute paths are returned as-is.
    - Relative paths are resolved against:
      - `root` if provided
      - project root (auto) otherwise
    """

    p = Path(path)
    if p.is_absolute():
        return p

    if root == "auto" or root is None:
        base = find_project_root()
    else:
        base = Path(root).resolve()

    return (base / p).resolve()


class YoloDetector:
    """
    Plug-and-play detector: preprocess -> inference -> postprocess.

    Takes a uint8 (H, W, 3) image and returns `Detection`s in that image's pixel
    coordinates. Tensor shapes are read from the engine on every call. One
    detector owns one engine and must only be used from one thread at a time.
    """

    def __init__(
        self,
        engine: InferenceEngine,
        *,
        backend_name: Optional[str] = None,
        post_cfg: YoloPostConfig = YoloPostConfig(),
        channel_order: str = "bgr",
    ):
        self.engine = engine
        self.backend_name = backend_name
        self.preprocessor = TensorPreprocessor(channel_order=channel_order)
        self.post = YoloPostprocessor(post_cfg)

    @property
    def last_decision(self) -> Optional[FormatDecision]:
        return self.post.last_decision

    def detect(self, image: np.ndarray) -> List[Detection]:
        model_size = check_input_shape(self.engine.input_shape())
        declared = tuple(self.engine.output_shape())
        output_layout(declared)

        blob = self.preprocessor.prepare(image, model_size)
        raw = np.asarray(self.engine.run(blob))
        if tuple(raw.shape) != declared:
            raise OutputShapeError(
                f"Model returned shape {list(raw.shape)} but declared {list(declared)}."
            )

        orig_h, orig_w = image.shape[:2]
        return self.post.process(raw, model_size=model_size, orig_size=(orig_w, orig_h))

    def __call__(self, image: np.ndarray) -> List[Detection]:
        return self.detect(image)

    def close(self) -> None:
        self.engine.close()

    def __enter__(self) -> "YoloDetector":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def load_detector(
    model_path: PathLike,
    *,
    backend: Optional[str] = None,
    root: Optional[PathLike] = "auto",
    post_cfg: YoloPostConfig = YoloPostConfig(),
    channel_order: str = "bgr",
    num_threads: int = 4,
    onnx_providers: Optional[Sequence[str]] = None,
) -> YoloDetector:
    """
    Create a detector for a model on disk.

    Typical usage:
        detector = load_detector("models/best_float16.tflite")  # resolves from project root by default

    Args:
        model_path: path to the model file; relative paths resolve against project root by default
        backend: "tflite" or "onnxruntime"; None infers it from the extension
        num_threads: CPU threads handed to the runtime
    """

    resolved = resolve_path(model_path, root=root)
    chosen = backend
    if chosen is None:
        suffix = resolved.suffix.lower()
        if suffix == ".tflite":
            chosen = "tflite"
        elif suffix == ".onnx":
            chosen = "onnxruntime"
        else:
            raise ValueError(
                f"Could not infer backend from extension '{suffix}'. Pass backend=... explicitly."
            )

    chosen = chosen.lower()
    if chosen == "tflite":
        from .backends.tflite_backend import TFLiteEngine, TFLiteEngineConfig

        engine = TFLiteEngine(resolved, TFLiteEngineConfig(num_threads=num_threads))
    elif chosen == "onnxruntime":
        from .backends.onnxruntime_backend import OnnxRuntimeEngine, OnnxRuntimeEngineConfig

        engine = OnnxRuntimeEngine(
            resolved,
            OnnxRuntimeEngineConfig(providers=onnx_providers, num_threads=num_threads),
        )
    else:
        raise ValueError(f"Unsupported backend: {backend!r}")

    return YoloDetector(engine, backend_name=chosen, post_cfg=post_cfg, channel_order=channel_order)
