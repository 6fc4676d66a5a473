# study/datastore.py
from __future__ import annotations

import contextlib
import datetime as dt
from typing import Iterator, List, Optional

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils.module_loading import import_string

from .exceptions import NotFoundError, StorageError
from .models import DailyCounter, StudyEvent, Word


@contextlib.contextmanager
def _storage(action: str) -> Iterator[None]:
    """Re-raise database failures as StorageError."""
    try:
        yield
    except DatabaseError as e:
        raise StorageError(f"Failed to {action}: {e}") from e


class DjangoDatastore:
    """
    Datastore backed by the Django ORM.

    Counter increments run as a single UPDATE with F() expressions, so two
    concurrent events for the same (user, day) cannot lose an update.
    """

    # --- daily counters ---

    def upsert_daily_counter(
        self,
        user_id: str,
        study_date: dt.date,
        delta_words: int,
        delta_correct: int,
        delta_seconds: int,
    ) -> DailyCounter:
        with _storage("upsert daily counter"), transaction.atomic():
            counter, _ = DailyCounter.objects.get_or_create(user_id=user_id, study_date=study_date)
            DailyCounter.objects.filter(pk=counter.pk).update(
                words_studied=F("words_studied") + delta_words,
                correct_answers=F("correct_answers") + delta_correct,
                total_study_time_seconds=F("total_study_time_seconds") + delta_seconds,
            )
            counter.refresh_from_db()
        return counter

    def get_counter(self, user_id: str, study_date: dt.date) -> Optional[DailyCounter]:
        with _storage("fetch daily counter"):
            return DailyCounter.objects.filter(user_id=user_id, study_date=study_date).first()

    def list_counters(
        self,
        user_id: str,
        date_from: Optional[dt.date] = None,
        date_to: Optional[dt.date] = None,
        *,
        descending: bool = False,
        studied_only: bool = False,
    ) -> List[DailyCounter]:
        qs = DailyCounter.objects.filter(user_id=user_id)
        if date_from is not None:
            qs = qs.filter(study_date__gte=date_from)
        if date_to is not None:
            qs = qs.filter(study_date__lte=date_to)
        if studied_only:
            qs = qs.filter(words_studied__gt=0)
        qs = qs.order_by("-study_date" if descending else "study_date")
        with _storage("list daily counters"):
            return list(qs)

    # --- study events ---

    def insert_study_event(
        self, user_id: str, word_id, is_correct: bool, response_time_ms: Optional[int]
    ) -> StudyEvent:
        with _storage("create study event"):
            return StudyEvent.objects.create(
                user_id=user_id,
                word_id=word_id,
                is_correct=is_correct,
                response_time_ms=response_time_ms,
            )

    def list_recent_study_events(self, user_id: str, word_id, limit: int) -> List[StudyEvent]:
        return self.list_study_events(user_id, word_id=word_id, limit=limit)

    def list_study_events(self, user_id: str, word_id=None, limit: Optional[int] = None) -> List[StudyEvent]:
        qs = StudyEvent.objects.filter(user_id=user_id)
        if word_id is not None:
            qs = qs.filter(word_id=word_id)
        qs = qs.order_by("-studied_at", "-id")
        if limit:
            qs = qs[:limit]
        with _storage("fetch study events"):
            return list(qs)

    # --- words ---

    def get_word(self, word_id, user_id: str) -> Optional[Word]:
        with _storage("fetch vocabulary"):
            return Word.objects.filter(pk=word_id, user_id=user_id).first()

    def list_words(self, user_id: str) -> List[Word]:
        with _storage("fetch vocabulary"):
            return list(Word.objects.filter(user_id=user_id).order_by("-created_at"))

    def update_word_mastery(self, word_id, user_id: str, new_level: int) -> Word:
        with _storage("update vocabulary mastery"):
            word = Word.objects.filter(pk=word_id, user_id=user_id).first()
            if word is None:
                raise NotFoundError("Vocabulary not found or access denied")
            word.mastery_level = new_level
            word.save(update_fields=["mastery_level", "updated_at"])
        return word

    def words_for_study(self, user_id: str, limit: int) -> List[Word]:
        qs = (
            Word.objects.filter(user_id=user_id)
            .prefetch_related("meanings")
            .order_by("mastery_level", "?")[:limit]
        )
        with _storage("get vocabulary for study"):
            return list(qs)


def get_datastore():
    """Instantiate the datastore class named by settings.STUDY_DATASTORE."""
    return import_string(settings.STUDY_DATASTORE)()
