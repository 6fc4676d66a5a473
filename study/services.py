# study/services.py
from __future__ import annotations

import datetime as dt
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import pytz
from django.conf import settings
from django.utils import timezone

from .exceptions import NotFoundError, ValidationError
from .mastery import WINDOW_SIZE, compute_mastery_level
from .models import MAX_RESPONSE_TIME_MS, StudyEvent, Word

logger = logging.getLogger(__name__)


def local_today() -> dt.date:
    """Current calendar date in STUDY_TIMEZONE (UTC unless configured)."""
    tz = pytz.timezone(settings.STUDY_TIMEZONE)
    return timezone.now().astimezone(tz).date()


def _ms_to_seconds(ms: Optional[int]) -> int:
    """Milliseconds -> whole seconds, rounding half up (1500 -> 2, 2500 -> 3)."""
    if ms is None:
        return 0
    return (ms + 500) // 1000


@dataclass(frozen=True)
class StudyResultRequest:
    """Validated body of POST /api/study/result."""
    word_id: object
    is_correct: bool
    response_time_ms: Optional[int] = None


class StudyResultRecorder:
    """
    Records one answer for a (user, word) pair:
      1) insert the StudyEvent
      2) increment today's DailyCounter (atomic upsert in the datastore)
      3) recompute the word's mastery level from its recent answers

    Steps are not wrapped in one transaction; storage errors propagate.
    """

    def __init__(self, datastore, today: Callable[[], dt.date] = local_today):
        self.datastore = datastore
        self.today = today

    def record(self, user_id: str, request: StudyResultRequest) -> StudyEvent:
        return self.record_result(
            user_id, request.word_id, request.is_correct, request.response_time_ms
        )

    def record_result(
        self,
        user_id: str,
        word_id,
        is_correct: bool,
        response_time_ms: Optional[int] = None,
    ) -> StudyEvent:
        if response_time_ms is not None:
            if isinstance(response_time_ms, bool) or not isinstance(response_time_ms, int):
                raise ValidationError("response_time must be an integer.")
            if not 0 <= response_time_ms <= MAX_RESPONSE_TIME_MS:
                raise ValidationError(f"response_time must be between 0 and {MAX_RESPONSE_TIME_MS}.")

        word = self.datastore.get_word(word_id, user_id)
        if word is None:
            raise NotFoundError("Vocabulary not found or access denied")

        event = self.datastore.insert_study_event(user_id, word.id, bool(is_correct), response_time_ms)

        self.datastore.upsert_daily_counter(
            user_id,
            self.today(),
            1,
            1 if is_correct else 0,
            _ms_to_seconds(response_time_ms),
        )

        self._update_mastery(user_id, word)
        logger.info("recorded study result user=%s word=%s correct=%s", user_id, word.id, bool(is_correct))
        return event

    def _update_mastery(self, user_id: str, word: Word) -> None:
        recent = self.datastore.list_recent_study_events(user_id, word.id, WINDOW_SIZE)
        current = word.mastery_level
        new_level = compute_mastery_level((e.is_correct for e in recent), current)
        if new_level != current:
            self.datastore.update_word_mastery(word.id, user_id, int(new_level))
            logger.debug("mastery of word %s: %s -> %s", word.id, current, int(new_level))


class StudyHistoryReader:
    """Read-only views over a user's study events."""

    def __init__(self, datastore):
        self.datastore = datastore

    def start_session(self, user_id: str, limit: int = 10) -> Dict:
        words = self.datastore.words_for_study(user_id, limit)
        return {
            "vocabulary": words,
            "session_id": f"session_{int(time.time() * 1000)}_{user_id}",
            "total_words": len(words),
        }

    def get_study_stats(self, user_id: str, word_id=None) -> Dict:
        events = self.datastore.list_study_events(user_id, word_id=word_id)
        total = len(events)
        correct = sum(1 for e in events if e.is_correct)
        times = [e.response_time_ms for e in events if e.response_time_ms is not None]
        return {
            "total_sessions": total,
            "correct_answers": correct,
            "average_response_time": (sum(times) / len(times)) if times else 0,
            "accuracy": (correct / total) if total else 0,
        }

    def get_recent_events(self, user_id: str, limit: int = 50) -> List[StudyEvent]:
        return self.datastore.list_study_events(user_id, limit=limit)
