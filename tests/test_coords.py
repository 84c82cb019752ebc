import unittest

import numpy as np

from yolo_lite.coords import map_predictions, scale_to_source, to_corners
from yolo_lite.types import BoxFormat

MODEL = (320, 320)
SRC = (640, 480)


class TestToCorners(unittest.TestCase):
    def test_center_size(self) -> None:
        out = to_corners(np.array([[160, 160, 64, 32]]), BoxFormat.XYWH)
        self.assertTrue(np.allclose(out, [[128, 144, 192, 176]]))

    def test_corners_pass_through(self) -> None:
        out = to_corners(np.array([[1, 2, 3, 4]]), BoxFormat.XYXY)
        self.assertTrue(np.allclose(out, [[1, 2, 3, 4]]))

    def test_auto_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            to_corners(np.zeros((1, 4)), BoxFormat.AUTO)


class TestScaleToSource(unittest.TestCase):
    def test_independent_axis_scale(self) -> None:
        out = scale_to_source(np.array([[10, 10, 50, 50]]), MODEL, SRC)
        self.assertTrue(np.allclose(out, [[20, 15, 100, 75]]))

    def test_clamps_to_source(self) -> None:
        out = scale_to_source(np.array([[300, -20, 330, 50]]), MODEL, SRC)
        self.assertAlmostEqual(float(out[0, 0]), 600.0, places=4)
        self.assertAlmostEqual(float(out[0, 2]), 640.0, places=4)
        self.assertAlmostEqual(float(out[0, 1]), 0.0, places=4)

    def test_normalized_pairs(self) -> None:
        out = scale_to_source(np.array([[0.1, 0.1, 0.5, 0.5]]), MODEL, SRC)
        self.assertTrue(np.allclose(out, [[64, 48, 320, 240]], atol=1e-3))

    def test_pairs_are_checked_independently(self) -> None:
        # x pair is normalized, y pair is already in model pixels.
        out = scale_to_source(np.array([[0.25, 40, 0.5, 80]]), MODEL, SRC)
        self.assertTrue(np.allclose(out, [[160, 60, 320, 120]], atol=1e-3))

    def test_normalized_limit_is_configurable(self) -> None:
        box = np.array([[1.5, 1.5, 1.9, 1.9]])
        as_norm = scale_to_source(box, MODEL, SRC)
        as_pixels = scale_to_source(box, MODEL, SRC, normalized_limit=1.0)
        self.assertAlmostEqual(float(as_norm[0, 2]), 640.0, places=3)  # 1.9*320*2 clamped
        self.assertAlmostEqual(float(as_pixels[0, 2]), 3.8, places=4)

    def test_input_not_mutated(self) -> None:
        boxes = np.array([[10, 10, 50, 50]], dtype=np.float32)
        scale_to_source(boxes, MODEL, SRC)
        self.assertTrue(np.array_equal(boxes, [[10, 10, 50, 50]]))


class TestMapPredictions(unittest.TestCase):
    def test_degenerate_boxes_dropped(self) -> None:
        preds = np.array(
            [
                [10, 10, 50, 50, 0.9],
                [400, 10, 500, 50, 0.8],  # fully right of the frame
                [30, 30, 30, 60, 0.7],  # zero width
            ],
            dtype=np.float32,
        )
        boxes, scores = map_predictions(preds, BoxFormat.XYXY, MODEL, SRC)
        self.assertEqual(boxes.shape, (1, 4))
        self.assertTrue(np.allclose(boxes, [[20, 15, 100, 75]]))
        self.assertTrue(np.allclose(scores, [0.9]))

    def test_center_size_end_to_end(self) -> None:
        preds = np.array([[160, 160, 64, 64, 0.5]], dtype=np.float32)
        boxes, _ = map_predictions(preds, BoxFormat.XYWH, MODEL, SRC)
        self.assertTrue(np.allclose(boxes, [[256, 192, 384, 288]]))


if __name__ == "__main__":
    unittest.main()
