# study/dashboard.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Callable, List

from .models import MasteryLevel
from .services import local_today

WEEK_DAYS = 7


@dataclass
class DailyProgress:
    date: dt.date
    words_studied: int = 0
    correct_answers: int = 0
    accuracy: float = 0.0          # percent, 2 decimals


@dataclass
class TotalStats:
    total_words_studied: int = 0
    total_correct_answers: int = 0
    total_study_time: int = 0      # seconds
    study_days: int = 0
    average_accuracy: float = 0.0  # percent


@dataclass
class DashboardStats:
    total_vocabulary: int = 0
    mastered_vocabulary: int = 0
    today_studied: int = 0
    current_streak: int = 0
    weekly_progress: List[DailyProgress] = field(default_factory=list)
    total_stats: TotalStats = field(default_factory=TotalStats)


def _accuracy_percent(correct: int, studied: int) -> float:
    if studied <= 0:
        return 0.0
    return round(correct / studied * 100, 2)


def _streak_length(studied_dates, today: dt.date) -> int:
    """Count consecutive days with study, walking back from today; stop at the first gap."""
    days = set(studied_dates)
    streak = 0
    while today - dt.timedelta(days=streak) in days:
        streak += 1
    return streak


class DashboardAggregator:
    """
    Derived statistics for the dashboard. Pure reads: any datastore failure
    propagates and no partial result is returned.
    """

    def __init__(self, datastore, today: Callable[[], dt.date] = local_today):
        self.datastore = datastore
        self.today = today

    def get_dashboard_stats(self, user_id: str) -> DashboardStats:
        today = self.today()
        words = self.datastore.list_words(user_id)
        today_counter = self.datastore.get_counter(user_id, today)

        return DashboardStats(
            total_vocabulary=len(words),
            mastered_vocabulary=sum(1 for w in words if w.mastery_level == MasteryLevel.MASTERED),
            today_studied=today_counter.words_studied if today_counter else 0,
            current_streak=self._current_streak(user_id, today),
            weekly_progress=self._weekly_progress(user_id, today),
            total_stats=self.get_total_stats(user_id),
        )

    def get_current_streak(self, user_id: str) -> int:
        return self._current_streak(user_id, self.today())

    def get_weekly_progress(self, user_id: str) -> List[DailyProgress]:
        return self._weekly_progress(user_id, self.today())

    def get_total_stats(self, user_id: str) -> TotalStats:
        counters = self.datastore.list_counters(user_id)
        if not counters:
            return TotalStats()

        words = sum(c.words_studied for c in counters)
        correct = sum(c.correct_answers for c in counters)
        return TotalStats(
            total_words_studied=words,
            total_correct_answers=correct,
            total_study_time=sum(c.total_study_time_seconds for c in counters),
            study_days=len(counters),
            average_accuracy=(correct / words * 100) if words > 0 else 0.0,
        )

    def _current_streak(self, user_id: str, today: dt.date) -> int:
        counters = self.datastore.list_counters(user_id, descending=True, studied_only=True)
        return _streak_length((c.study_date for c in counters), today)

    def _weekly_progress(self, user_id: str, today: dt.date) -> List[DailyProgress]:
        start = today - dt.timedelta(days=WEEK_DAYS - 1)
        by_date = {
            c.study_date: c
            for c in self.datastore.list_counters(user_id, date_from=start, date_to=today)
        }

        out: List[DailyProgress] = []
        for i in range(WEEK_DAYS):
            day = start + dt.timedelta(days=i)
            c = by_date.get(day)
            if c is None:
                out.append(DailyProgress(date=day))
                continue
            out.append(DailyProgress(
                date=day,
                words_studied=c.words_studied,
                correct_answers=c.correct_answers,
                accuracy=_accuracy_percent(c.correct_answers, c.words_studied),
            ))
        return out
