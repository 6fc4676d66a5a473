"""In-memory datastore used by the service tests (no database access)."""
import datetime as dt
import itertools

from django.utils import timezone

from study.exceptions import NotFoundError, StorageError
from study.models import DailyCounter, MasteryLevel, StudyEvent, Word

TODAY = dt.date(2025, 10, 27)


class InMemoryDatastore:
    def __init__(self):
        self.words = {}
        self.events = []
        self.counters = {}
        self.mastery_writes = []
        self.fail_on = set()      # operation names that raise StorageError
        self._ids = itertools.count(1)
        self._clock = timezone.now()

    def _check(self, op):
        if op in self.fail_on:
            raise StorageError(f"Failed to {op}: simulated outage")

    # --- seeding helpers ---

    def add_word(self, user_id, english_word="apple", mastery_level=MasteryLevel.UNLEARNED):
        w = Word(user_id=user_id, english_word=english_word, mastery_level=mastery_level)
        self.words[w.id] = w
        return w

    def add_events(self, user_id, word, results):
        """Append answers oldest first."""
        for ok in results:
            self.insert_study_event(user_id, word.id, ok, None)

    def add_counter(self, user_id, study_date, words_studied, correct_answers=0, seconds=0):
        c = DailyCounter(
            id=next(self._ids),
            user_id=user_id,
            study_date=study_date,
            words_studied=words_studied,
            correct_answers=correct_answers,
            total_study_time_seconds=seconds,
        )
        self.counters[(user_id, study_date)] = c
        return c

    # --- datastore contract ---

    def upsert_daily_counter(self, user_id, study_date, delta_words, delta_correct, delta_seconds):
        self._check("upsert_daily_counter")
        c = self.counters.get((user_id, study_date))
        if c is None:
            c = self.add_counter(user_id, study_date, 0)
        c.words_studied += delta_words
        c.correct_answers += delta_correct
        c.total_study_time_seconds += delta_seconds
        return c

    def get_counter(self, user_id, study_date):
        self._check("get_counter")
        return self.counters.get((user_id, study_date))

    def list_counters(self, user_id, date_from=None, date_to=None, *, descending=False, studied_only=False):
        self._check("list_counters")
        rows = [
            c for (uid, d), c in self.counters.items()
            if uid == user_id
            and (date_from is None or d >= date_from)
            and (date_to is None or d <= date_to)
            and (not studied_only or c.words_studied > 0)
        ]
        return sorted(rows, key=lambda c: c.study_date, reverse=descending)

    def insert_study_event(self, user_id, word_id, is_correct, response_time_ms):
        self._check("insert_study_event")
        self._clock += dt.timedelta(seconds=1)
        e = StudyEvent(
            id=next(self._ids),
            user_id=user_id,
            word_id=word_id,
            is_correct=is_correct,
            response_time_ms=response_time_ms,
            studied_at=self._clock,
        )
        self.events.append(e)
        return e

    def list_recent_study_events(self, user_id, word_id, limit):
        return self.list_study_events(user_id, word_id=word_id, limit=limit)

    def list_study_events(self, user_id, word_id=None, limit=None):
        self._check("list_study_events")
        rows = [
            e for e in reversed(self.events)
            if e.user_id == user_id and (word_id is None or e.word_id == word_id)
        ]
        return rows[:limit] if limit else rows

    def get_word(self, word_id, user_id):
        self._check("get_word")
        w = self.words.get(word_id)
        return w if w is not None and w.user_id == user_id else None

    def list_words(self, user_id):
        self._check("list_words")
        return [w for w in self.words.values() if w.user_id == user_id]

    def update_word_mastery(self, word_id, user_id, new_level):
        self._check("update_word_mastery")
        w = self.get_word(word_id, user_id)
        if w is None:
            raise NotFoundError("Vocabulary not found or access denied")
        w.mastery_level = new_level
        self.mastery_writes.append((word_id, new_level))
        return w

    def words_for_study(self, user_id, limit):
        return sorted(self.list_words(user_id), key=lambda w: w.mastery_level)[:limit]
