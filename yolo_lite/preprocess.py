from __future__ import annotations

from typing import Optional, Tuple

import numpy as np


class InputBuffer:
    """
    Reusable float32 NHWC scratch tensor for one model input size.

    Owned by a single `TensorPreprocessor`; the array handed out by `prepare`
    is this buffer, so it is overwritten by the next call.
    """

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self.array = np.empty((1, self.height, self.width, 3), dtype=np.float32)

    @property
    def nbytes(self) -> int:
        return int(self.array.nbytes)

    def fits(self, width: int, height: int) -> bool:
        return self.width == width and self.height == height


class TensorPreprocessor:
    """
    Resize an image to the model size and pack it as RGB float32 in [0, 1].

    Not reentrant: callers must not share one instance across threads.
    """

    def __init__(self, channel_order: str = "bgr"):
        channel_order = channel_order.lower()
        if channel_order not in ("bgr", "rgb"):
            raise ValueError(f"channel_order must be 'bgr' or 'rgb', got {channel_order!r}")
        self.channel_order = channel_order
        self._buffer: Optional[InputBuffer] = None

    def buffer_for(self, width: int, height: int) -> InputBuffer:
        if self._buffer is None or not self._buffer.fits(width, height):
            self._buffer = InputBuffer(width, height)
        return self._buffer

    def prepare(self, image: np.ndarray, size: Tuple[int, int]) -> np.ndarray:
        """
        Args:
            image: uint8 array (H, W, 3) in `channel_order`
            size: (W, H) the model expects

        Returns:
            float32 array (1, H, W, 3), channels R, G, B, native byte order
        """

        if image is None or not hasattr(image, "shape"):
            raise TypeError("image must be a NumPy array.")
        if image.ndim != 3 or image.shape[2] != 3:
            raise ValueError(f"Expected image shape (H, W, 3), got {getattr(image, 'shape', None)}")

        width, height = int(size[0]), int(size[1])
        if image.shape[1] != width or image.shape[0] != height:
            try:
                import cv2  # type: ignore
            except Exception as e:  # pragma: no cover
                raise ImportError("OpenCV is required for resizing. Install with `pip install opencv-python`.") from e
            resized = cv2.resize(image, (width, height), interpolation=cv2.INTER_LINEAR)
        else:
            resized = image

        if self.channel_order == "bgr":
            resized = resized[:, :, ::-1]

        buf = self.buffer_for(width, height)
        np.divide(resized, 255.0, out=buf.array[0], casting="unsafe")
        return buf.array
