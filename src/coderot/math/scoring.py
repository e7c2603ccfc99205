"""Score normalization and the weighted-mean aggregation law."""

import math
from typing import List, Sequence, Union

import numpy as np


class Scoring:
    """Pure numeric helpers shared by evaluators, runner and aggregator."""

    @staticmethod
    def clamp(value: float) -> float:
        """Clamp to [0, 1]; NaN maps to 0."""
        if value != value:
            return 0.0
        return max(0.0, min(1.0, float(value)))

    @staticmethod
    def saturate(excess: float, scale: float) -> float:
        """
        Map a non-negative excess onto [0, 1): 1 - exp(-excess / scale).

        Monotonically non-decreasing in ``excess``; 0 for excess <= 0.
        """
        if excess <= 0:
            return 0.0
        return 1.0 - math.exp(-excess / scale)

    @staticmethod
    def weighted_mean(
        scores: Union[Sequence[float], np.ndarray], weights: Union[Sequence[float], np.ndarray]
    ) -> float:
        """
        Weighted aggregate: sum(score * weight) / sum(weight).

        Args:
            scores: Scores in [0, 1]
            weights: Positive weights, same length as ``scores``

        Returns:
            Weighted mean, or 0.0 when there is nothing to average
        """
        s = np.asarray(scores, dtype=float)
        w = np.asarray(weights, dtype=float)
        if s.size == 0:
            return 0.0
        if s.shape != w.shape:
            raise ValueError(f"scores and weights differ in shape: {s.shape} vs {w.shape}")
        total = float(np.sum(w))
        if total <= 0:
            return 0.0
        return Scoring.clamp(float(np.dot(s, w)) / total)

    @staticmethod
    def column_means(rows: Sequence[Sequence[float]], width: int) -> List[float]:
        """
        Mean of each column of a row-major score matrix.

        Args:
            rows: One row per file, one column per metric
            width: Number of columns (used when ``rows`` is empty)

        Returns:
            Column means; all zeros when there are no rows
        """
        if not rows:
            return [0.0] * width
        matrix = np.asarray(rows, dtype=float).reshape(len(rows), width)
        return [Scoring.clamp(v) for v in matrix.mean(axis=0).tolist()]
