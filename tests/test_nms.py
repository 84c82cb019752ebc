import unittest

import numpy as np

from yolo_lite.nms import NMSConfig, box_iou, nms, nms_detections
from yolo_lite.types import Detection


def _det(x1, y1, x2, y2, score) -> Detection:
    return Detection(x1=x1, y1=y1, x2=x2, y2=y2, score=score)


class TestBoxIou(unittest.TestCase):
    def test_partial_overlap(self) -> None:
        iou = box_iou(np.array([0, 0, 10, 10]), np.array([[0, 0, 10, 7]]))
        self.assertAlmostEqual(float(iou[0]), 0.7)

    def test_disjoint_and_touching(self) -> None:
        iou = box_iou(np.array([0, 0, 10, 10]), np.array([[20, 20, 30, 30], [10, 0, 20, 10]]))
        self.assertTrue(np.array_equal(iou, [0.0, 0.0]))

    def test_non_positive_area(self) -> None:
        iou = box_iou(np.array([0, 0, 10, 10]), np.array([[5, 5, 5, 8], [8, 8, 2, 2]]))
        self.assertTrue(np.array_equal(iou, [0.0, 0.0]))


class TestNms(unittest.TestCase):
    def test_overlap_above_threshold_keeps_best(self) -> None:
        dets = [_det(0, 0, 10, 7, 0.6), _det(0, 0, 10, 10, 0.9)]
        kept = nms_detections(dets, iou_threshold=0.45)
        self.assertEqual(len(kept), 1)
        self.assertEqual(kept[0].score, 0.9)

    def test_overlap_below_threshold_keeps_both(self) -> None:
        dets = [_det(0, 0, 10, 10, 0.9), _det(0, 0, 10, 3, 0.6)]
        kept = nms_detections(dets, iou_threshold=0.45)
        self.assertEqual([d.score for d in kept], [0.9, 0.6])

    def test_cluster_keeps_strict_maximum(self) -> None:
        dets = [
            _det(1, 1, 11, 11, 0.7),
            _det(0, 0, 10, 10, 0.95),
            _det(0, 1, 10, 11, 0.8),
            _det(100, 100, 110, 110, 0.5),
        ]
        kept = nms_detections(dets, iou_threshold=0.45)
        self.assertEqual([d.score for d in kept], [0.95, 0.5])
        self.assertIs(kept[0], dets[1])

    def test_equal_scores_keep_input_order(self) -> None:
        boxes = np.array([[0, 0, 10, 10], [1, 1, 11, 11], [3, 3, 13, 13]], dtype=np.float32)
        scores = np.array([0.5, 0.5, 0.5], dtype=np.float32)
        keep = nms(boxes, scores, NMSConfig(iou_threshold=0.45))
        self.assertEqual(keep.tolist(), [0, 2])

    def test_iou_equal_to_threshold_is_kept(self) -> None:
        dets = [_det(0, 0, 10, 10, 0.9), _det(0, 0, 10, 5, 0.8)]  # IoU 0.5
        kept = nms_detections(dets, iou_threshold=0.5)
        self.assertEqual(len(kept), 2)

    def test_idempotent(self) -> None:
        rng = np.random.default_rng(7)
        xy = rng.uniform(0, 200, size=(40, 2))
        wh = rng.uniform(10, 60, size=(40, 2))
        scores = rng.permutation(40) / 40.0 + 0.01
        dets = [
            _det(float(x), float(y), float(x + w), float(y + h), float(s))
            for (x, y), (w, h), s in zip(xy, wh, scores)
        ]
        once = nms_detections(dets, iou_threshold=0.45)
        twice = nms_detections(once, iou_threshold=0.45)
        self.assertEqual(once, twice)

        boxes = np.array([d.as_xyxy() for d in once])
        for i in range(len(once)):
            iou = box_iou(boxes[i], np.delete(boxes, i, axis=0))
            self.assertTrue(np.all(iou <= 0.45))

    def test_max_detections(self) -> None:
        boxes = np.array([[0, 0, 1, 1], [5, 5, 6, 6], [9, 9, 10, 10]], dtype=np.float32)
        scores = np.array([0.3, 0.9, 0.6], dtype=np.float32)
        keep = nms(boxes, scores, NMSConfig(iou_threshold=0.45, max_detections=2))
        self.assertEqual(keep.tolist(), [1, 2])

    def test_empty(self) -> None:
        keep = nms(np.zeros((0, 4)), np.zeros((0,)), NMSConfig())
        self.assertEqual(keep.size, 0)
        self.assertEqual(nms_detections([], 0.45), [])


if __name__ == "__main__":
    unittest.main()
