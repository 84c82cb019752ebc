from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

import cv2

from .config import DetectorConfig, load_detector_config
from .runtime import load_detector
from .types import BoxFormat

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yolo_lite",
        description="Run a single-class YOLO model on one image and print the detections.",
    )
    parser.add_argument("image", help="Path to the input image.")
    parser.add_argument("--model", default=None, help="Model file (.tflite or .onnx).")
    parser.add_argument("--config", default=None, help="Detector config JSON; flags override it.")
    parser.add_argument("--backend", choices=["tflite", "onnxruntime"], default=None)
    parser.add_argument("--conf", type=float, default=None, help="Confidence threshold.")
    parser.add_argument("--iou", type=float, default=None, help="IoU threshold for NMS.")
    parser.add_argument("--box-format", choices=[f.value for f in BoxFormat], default=None)
    parser.add_argument("--threads", type=int, default=None, help="Inference threads.")
    parser.add_argument("--label", default=None, help="Label attached to every detection.")
    parser.add_argument("--output", default=None, help="Write an annotated copy of the image here.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def resolve_config(args: argparse.Namespace) -> DetectorConfig:
    """
    Merge the optional config file with command line overrides.
    """

    if args.config is not None:
        base = load_detector_config(Path(args.config))
        values = asdict(base)
    elif args.model is not None:
        values = {"model_path": args.model}
    else:
        raise ValueError("Either --model or --config is required.")

    overrides = {
        "model_path": args.model,
        "backend": args.backend,
        "conf_threshold": args.conf,
        "iou_threshold": args.iou,
        "box_format": BoxFormat(args.box_format) if args.box_format else None,
        "num_threads": args.threads,
        "label": args.label,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return DetectorConfig(**values)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        cfg = resolve_config(args)
        image = cv2.imread(args.image)
        if image is None:
            raise FileNotFoundError(f"Could not read image at path: {args.image}")

        with load_detector(
            cfg.model_path,
            backend=cfg.backend,
            post_cfg=cfg.post_config(),
            channel_order=cfg.channel_order,
            num_threads=cfg.num_threads,
        ) as detector:
            detections = detector(image)

        for det in detections:
            x1, y1, x2, y2 = det.as_xyxy()
            print(f"{det.label} {det.score:.3f} {x1:.1f} {y1:.1f} {x2:.1f} {y2:.1f}")

        if args.output is not None:
            from .visualize import draw_detections

            vis = draw_detections(image, detections)
            if not cv2.imwrite(args.output, vis):
                raise RuntimeError(f"Could not write image to: {args.output}")
            logger.info("Wrote annotated image to %s", args.output)
    except (OSError, ValueError, RuntimeError, ImportError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0
