import datetime as dt

import pytest

from study.exceptions import StorageError
from study.services import StudyHistoryReader

from .fakes import TODAY


def days_ago(n):
    return TODAY - dt.timedelta(days=n)


def test_new_user_gets_all_zero_stats(aggregator):
    stats = aggregator.get_dashboard_stats("u-1")

    assert stats.total_vocabulary == 0
    assert stats.mastered_vocabulary == 0
    assert stats.today_studied == 0
    assert stats.current_streak == 0
    assert len(stats.weekly_progress) == 7
    assert all(p.words_studied == 0 and p.correct_answers == 0 and p.accuracy == 0
               for p in stats.weekly_progress)
    assert stats.total_stats.study_days == 0
    assert stats.total_stats.average_accuracy == 0


def test_vocabulary_counts(store, aggregator):
    for level in (0, 1, 2, 2):
        store.add_word("u-1", mastery_level=level)
    store.add_word("u-2", mastery_level=2)

    stats = aggregator.get_dashboard_stats("u-1")

    assert stats.total_vocabulary == 4
    assert stats.mastered_vocabulary == 2


def test_today_studied_reads_todays_counter(store, aggregator):
    store.add_counter("u-1", TODAY, 12, 9)
    store.add_counter("u-1", days_ago(1), 30, 20)

    assert aggregator.get_dashboard_stats("u-1").today_studied == 12


def test_streak_is_zero_without_study_today(store, aggregator):
    store.add_counter("u-1", days_ago(1), 5, 3)
    store.add_counter("u-1", days_ago(2), 5, 3)

    assert aggregator.get_current_streak("u-1") == 0


@pytest.mark.parametrize("n", [1, 2, 5])
def test_streak_counts_consecutive_days_ending_today(store, aggregator, n):
    for i in range(n):
        store.add_counter("u-1", days_ago(i), 3, 1)
    # gap at day n, older activity beyond it must not count
    store.add_counter("u-1", days_ago(n + 1), 3, 1)

    assert aggregator.get_current_streak("u-1") == n


def test_streak_ignores_days_with_zero_words(store, aggregator):
    store.add_counter("u-1", TODAY, 4, 2)
    store.add_counter("u-1", days_ago(1), 0, 0)
    store.add_counter("u-1", days_ago(2), 4, 4)

    assert aggregator.get_current_streak("u-1") == 1


def test_weekly_progress_is_seven_days_oldest_first(store, aggregator):
    store.add_counter("u-1", TODAY, 4, 3)
    store.add_counter("u-1", days_ago(3), 3, 1)
    store.add_counter("u-1", days_ago(9), 50, 50)   # outside the window

    progress = aggregator.get_weekly_progress("u-1")

    assert [p.date for p in progress] == [days_ago(i) for i in range(6, -1, -1)]
    assert progress[-1].words_studied == 4
    assert progress[-1].accuracy == 75.0
    assert progress[3].words_studied == 3
    assert progress[3].accuracy == 33.33
    assert sum(p.words_studied for p in progress) == 7


def test_total_stats_sum_all_days(store, aggregator):
    store.add_counter("u-1", TODAY, 10, 8, seconds=60)
    store.add_counter("u-1", days_ago(40), 10, 4, seconds=30)

    totals = aggregator.get_total_stats("u-1")

    assert totals.total_words_studied == 20
    assert totals.total_correct_answers == 12
    assert totals.total_study_time == 90
    assert totals.study_days == 2
    assert totals.average_accuracy == pytest.approx(60.0)


def test_any_read_failure_fails_the_whole_dashboard(store, aggregator):
    store.add_word("u-1")
    store.fail_on.add("list_counters")

    with pytest.raises(StorageError):
        aggregator.get_dashboard_stats("u-1")


def test_dashboard_reflects_recorded_results(store, recorder, aggregator):
    w = store.add_word("u-1")
    for _ in range(5):
        recorder.record_result("u-1", w.id, True, 1000)

    stats = aggregator.get_dashboard_stats("u-1")

    assert stats.today_studied == 5
    assert stats.current_streak == 1
    assert stats.mastered_vocabulary == 1
    assert stats.weekly_progress[-1].accuracy == 100.0
    assert stats.total_stats.total_study_time == 5


# --- study history reads ---

def test_study_stats_over_all_and_one_word(store):
    a = store.add_word("u-1", "a")
    b = store.add_word("u-1", "b")
    store.insert_study_event("u-1", a.id, True, 1000)
    store.insert_study_event("u-1", a.id, False, None)
    store.insert_study_event("u-1", b.id, True, 3000)

    reader = StudyHistoryReader(store)
    overall = reader.get_study_stats("u-1")
    only_a = reader.get_study_stats("u-1", a.id)

    assert overall["total_sessions"] == 3
    assert overall["correct_answers"] == 2
    assert overall["average_response_time"] == 2000
    assert overall["accuracy"] == pytest.approx(2 / 3)
    assert only_a["total_sessions"] == 2
    assert only_a["average_response_time"] == 1000


def test_study_stats_empty(store):
    stats = StudyHistoryReader(store).get_study_stats("u-1")
    assert stats == {"total_sessions": 0, "correct_answers": 0, "average_response_time": 0, "accuracy": 0}


def test_recent_events_newest_first_with_limit(store):
    w = store.add_word("u-1")
    store.add_events("u-1", w, [True, False, True])

    events = StudyHistoryReader(store).get_recent_events("u-1", limit=2)

    assert [e.is_correct for e in events] == [True, False]


def test_start_session_prefers_low_mastery(store):
    store.add_word("u-1", "known", mastery_level=2)
    store.add_word("u-1", "new", mastery_level=0)
    store.add_word("u-1", "half", mastery_level=1)

    session = StudyHistoryReader(store).start_session("u-1", limit=2)

    assert [w.english_word for w in session["vocabulary"]] == ["new", "half"]
    assert session["total_words"] == 2
    assert session["session_id"].startswith("session_")
    assert session["session_id"].endswith("_u-1")
