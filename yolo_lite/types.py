from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class BoxFormat(str, Enum):
    """
    Coordinate convention of the first four fields of a raw prediction.
    """

    AUTO = "auto"
    XYWH = "xywh"  # center x, center y, width, height
    XYXY = "xyxy"  # x1, y1, x2, y2


class OutputShapeError(ValueError):
    """
    Raised when a model tensor does not have a supported layout.
    """


@dataclass
class Detection:
    """
    A single detected object in original image pixel coordinates.
    """

    x1: float
    y1: float
    x2: float
    y2: float
    score: float
    label: str = "object"

    def as_xyxy(self) -> Tuple[float, float, float, float]:
        return self.x1, self.y1, self.x2, self.y2

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def height(self) -> float:
        return self.y2 - self.y1
