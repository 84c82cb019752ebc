from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .types import BoxFormat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormatDecision:
    """
    Outcome of the per-call box format decision.

    `votes` counts sampled rows that looked like corners (v2 > v0 and v3 > v1).
    For an explicitly configured format `sample` is 0 and nothing was voted on.
    """

    box_format: BoxFormat
    votes: int = 0
    sample: int = 0
    narrow: bool = False

    @property
    def vote_ratio(self) -> float:
        return self.votes / self.sample if self.sample else 0.0


def infer_box_format(
    preds: np.ndarray,
    sample_size: int = 32,
    narrow_margin: float = 0.1,
) -> FormatDecision:
    """
    Guess whether canonical predictions hold corners or center+size.

    Looks at the first `min(N, sample_size)` rows only. Corners need a strict
    majority; a tie (or an empty output) falls back to center+size. The result
    applies to every row of the call.
    """

    sample = min(int(preds.shape[0]), int(sample_size))
    if sample == 0:
        return FormatDecision(BoxFormat.XYWH)

    head = preds[:sample]
    votes = int(np.count_nonzero((head[:, 2] > head[:, 0]) & (head[:, 3] > head[:, 1])))
    fmt = BoxFormat.XYXY if votes > sample // 2 else BoxFormat.XYWH

    narrow = abs(votes / sample - 0.5) <= narrow_margin
    if narrow:
        logger.warning(
            "Box format vote is close: %d/%d rows look like corners, using %s.",
            votes,
            sample,
            fmt.value,
        )
    return FormatDecision(fmt, votes=votes, sample=sample, narrow=narrow)


def resolve_box_format(
    preds: np.ndarray,
    configured: BoxFormat = BoxFormat.AUTO,
    sample_size: int = 32,
    narrow_margin: float = 0.1,
) -> FormatDecision:
    """
    Use the configured format when one is known, otherwise vote.
    """

    configured = BoxFormat(configured)
    if configured is not BoxFormat.AUTO:
        return FormatDecision(configured)
    return infer_box_format(preds, sample_size=sample_size, narrow_margin=narrow_margin)
