"""Mathematical utilities for scoring."""

from .scoring import Scoring

__all__ = ["Scoring"]
