from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class TFLiteEngineConfig:
    """
    Configuration for TensorFlow Lite inference.

    - num_threads: CPU threads handed to the interpreter
    - input_index/output_index: which tensor of the model to use
    """

    num_threads: int = 4
    input_index: int = 0
    output_index: int = 0


def _load_interpreter_class():
    try:
        from tflite_runtime.interpreter import Interpreter  # type: ignore

        return Interpreter
    except ImportError:
        pass
    try:
        import tensorflow as tf  # type: ignore
    except Exception as e:  # pragma: no cover
        raise ImportError(
            "A TensorFlow Lite runtime is required for the TFLite backend. Install it with "
            "`pip install tflite-runtime` (or `tensorflow`)."
        ) from e
    return tf.lite.Interpreter


class TFLiteEngine:
    """
    Minimal TFLite engine.

    Expects an NHWC float32 blob shaped (1, H, W, 3) and returns the selected
    output tensor as a NumPy array.
    """

    def __init__(self, model_path: PathLike, cfg: TFLiteEngineConfig = TFLiteEngineConfig()):
        self.model_path = Path(model_path)
        if not self.model_path.exists():
            raise FileNotFoundError(str(self.model_path))

        interpreter_cls = _load_interpreter_class()
        self.interpreter = interpreter_cls(model_path=str(self.model_path), num_threads=cfg.num_threads)
        self.interpreter.allocate_tensors()

        self._input = self.interpreter.get_input_details()[cfg.input_index]
        self._output = self.interpreter.get_output_details()[cfg.output_index]
        logger.info(
            "Loaded TFLite model %s (input %s, output %s, %d threads)",
            self.model_path.name,
            list(self.input_shape()),
            list(self.output_shape()),
            cfg.num_threads,
        )

    def input_shape(self) -> Tuple[int, ...]:
        return tuple(int(d) for d in self._input["shape"])

    def output_shape(self) -> Tuple[int, ...]:
        return tuple(int(d) for d in self._output["shape"])

    def run(self, blob: np.ndarray) -> np.ndarray:
        if self.interpreter is None:
            raise RuntimeError("TFLiteEngine is closed.")
        x = np.asarray(blob, dtype=self._input["dtype"])
        self.interpreter.set_tensor(self._input["index"], x)
        self.interpreter.invoke()
        return np.array(self.interpreter.get_tensor(self._output["index"]))

    def close(self) -> None:
        self.interpreter = None
