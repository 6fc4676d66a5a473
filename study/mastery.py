# study/mastery.py
from __future__ import annotations

from typing import Iterable

from .models import MasteryLevel

WINDOW_SIZE = 10        # most recent answers considered
MIN_EVENTS = 3          # below this there is not enough signal to change anything


def compute_mastery_level(recent_results: Iterable[bool], current_level: int) -> int:
    """
    Derive a word's mastery level from its recent answers (newest first).

    Rules, first match wins, over the newest WINDOW_SIZE answers:
      1) accuracy >= 0.8 with at least 5 answers -> MASTERED
      2) accuracy >= 0.5 with at least 3 answers -> LEARNING
      3) accuracy <  0.3 with at least 5 answers -> UNLEARNED
      4) otherwise the current level is kept.

    Windows of 3-4 answers with accuracy in [0.3, 0.5) match no rule and keep
    the current level.
    """
    window = list(recent_results)[:WINDOW_SIZE]
    if len(window) < MIN_EVENTS:
        return current_level

    n = len(window)
    accuracy = sum(1 for ok in window if ok) / n

    if accuracy >= 0.8 and n >= 5:
        return MasteryLevel.MASTERED
    if accuracy >= 0.5 and n >= 3:
        return MasteryLevel.LEARNING
    if accuracy < 0.3 and n >= 5:
        return MasteryLevel.UNLEARNED
    return current_level
