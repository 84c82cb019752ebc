from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class OnnxRuntimeEngineConfig:
    """
    Configuration for ONNX Runtime inference.

    - providers: ORT execution providers (e.g., ["CPUExecutionProvider"])
    - num_threads: intra-op threads for the session
    - input_name/output_name: override auto-selected I/O names if needed
    """

    providers: Optional[Sequence[str]] = None
    num_threads: int = 4
    input_name: Optional[str] = None
    output_name: Optional[str] = None


def _static_shape(dims: Sequence[object], what: str) -> Tuple[int, ...]:
    shape = []
    for d in dims:
        if not isinstance(d, int):
            raise ValueError(f"Model {what} has a dynamic dimension ({list(dims)}); export with a fixed shape.")
        shape.append(int(d))
    return tuple(shape)


class OnnxRuntimeEngine:
    """
    Minimal ONNX Runtime engine.

    Expects an NHWC float32 blob shaped (1, H, W, 3), matching TFLite-style exports.
    Returns the primary output as a NumPy array.
    """

    def __init__(self, model_path: PathLike, cfg: OnnxRuntimeEngineConfig = OnnxRuntimeEngineConfig()):
        try:
            import onnxruntime as ort  # type: ignore
        except Exception as e:  # pragma: no cover
            raise ImportError(
                "onnxruntime is required for the ONNX backend. Install it with `pip install onnxruntime` "
                "(or `onnxruntime-gpu`)."
            ) from e

        self._ort = ort
        self.model_path = Path(model_path)
        if not self.model_path.exists():
            raise FileNotFoundError(str(self.model_path))

        sess_opts = ort.SessionOptions()
        sess_opts.intra_op_num_threads = int(cfg.num_threads)
        providers = list(cfg.providers) if cfg.providers is not None else None
        self.session = ort.InferenceSession(str(self.model_path), sess_options=sess_opts, providers=providers)

        inputs = {i.name: i for i in self.session.get_inputs()}
        outputs = {o.name: o for o in self.session.get_outputs()}
        self.input_name = cfg.input_name or self.session.get_inputs()[0].name
        # If output_name not provided, pick first output.
        self.output_name = cfg.output_name or self.session.get_outputs()[0].name
        self._input_shape = _static_shape(inputs[self.input_name].shape, "input")
        self._output_shape = _static_shape(outputs[self.output_name].shape, "output")
        logger.info(
            "Loaded ONNX model %s (input %s, output %s, providers %s)",
            self.model_path.name,
            list(self._input_shape),
            list(self._output_shape),
            list(self.providers_in_use),
        )

    @property
    def providers_in_use(self) -> Sequence[str]:
        # ORT returns providers in priority order for this session.
        return tuple(self.session.get_providers())

    def input_shape(self) -> Tuple[int, ...]:
        return self._input_shape

    def output_shape(self) -> Tuple[int, ...]:
        return self._output_shape

    def run(self, blob: np.ndarray) -> np.ndarray:
        if self.session is None:
            raise RuntimeError("OnnxRuntimeEngine is closed.")
        outputs = self.session.run([self.output_name], {self.input_name: np.asarray(blob, dtype=np.float32)})
        return outputs[0]

    def close(self) -> None:
        self.session = None
