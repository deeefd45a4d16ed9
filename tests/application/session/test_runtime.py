from datetime import timedelta

import pytest

from mneme.application.config import AppConfig
from mneme.application.session import SessionState, StudySessionRuntime, estimate_break_time
from mneme.domain.errors import NoActiveQuestion, SessionAlreadyActive, SessionNotActive
from mneme.domain.models import Mood, ReviewResult, SchedulerKind, StudySessionConfig
from mneme.domain.stats import DifficultyAdjustment

ORDERED = StudySessionConfig(shuffle=False)


@pytest.fixture
def runtime():
    return StudySessionRuntime()


@pytest.fixture
def pool(make_card):
    return [
        make_card("c1"),
        make_card("c2", level="expert", question_type="cloze"),
        make_card("c3", level="beginner"),
    ]


class TestLifecycle:
    def test_idle_until_started(self, runtime, now):
        assert runtime.state == SessionState.IDLE
        assert runtime.session is None
        assert runtime.current_question() is None
        with pytest.raises(SessionNotActive):
            runtime.submit_answer(ReviewResult(grade=3), now)
        with pytest.raises(SessionNotActive):
            runtime.skip_question()
        with pytest.raises(SessionNotActive):
            runtime.end_session(now=now)
        with pytest.raises(SessionNotActive):
            runtime.progress(now)

    def test_start_session(self, runtime, pool, now):
        session = runtime.start_session(pool, ORDERED, now, user_id="u1")

        assert runtime.state == SessionState.ACTIVE
        assert session.id.startswith("session_")
        assert len(session.id) == len("session_") + 26
        assert session.start_time == now
        assert session.user_id == "u1"
        assert [c.id for c in runtime.queue] == ["c1", "c2", "c3"]
        assert runtime.current_question().id == "c1"

    def test_cannot_start_twice(self, runtime, pool, now):
        runtime.start_session(pool, ORDERED, now)
        with pytest.raises(SessionAlreadyActive):
            runtime.start_session(pool, ORDERED, now)

    def test_restart_after_end(self, runtime, pool, now):
        first = runtime.start_session(pool, ORDERED, now)
        runtime.submit_answer(ReviewResult(grade=3), now)
        runtime.end_session(now=now + timedelta(minutes=5))

        later = now + timedelta(minutes=10)
        second = runtime.start_session(pool, ORDERED, later)
        assert second.id != first.id
        assert runtime.answers == ()
        assert runtime.current_question().id == "c1"

    def test_empty_pool(self, runtime, now):
        runtime.start_session([], ORDERED, now)

        assert runtime.state == SessionState.ACTIVE
        assert runtime.current_question() is None
        with pytest.raises(NoActiveQuestion):
            runtime.submit_answer(ReviewResult(grade=3), now)
        with pytest.raises(NoActiveQuestion):
            runtime.skip_question()

        progress = runtime.progress(now)
        assert progress.cards_remaining == 0
        assert progress.accuracy == 0
        assert progress.estimated_time_remaining == 0

        stats = runtime.session_stats()
        assert stats.total_questions == 0
        assert stats.accuracy == 0
        assert runtime.recommendations(now).difficulty_adjustment == DifficultyAdjustment.MAINTAIN

        session = runtime.end_session(now=now + timedelta(minutes=1))
        assert session.questions_reviewed == 0
        assert session.is_finalized

    def test_end_mid_queue(self, runtime, pool, now):
        runtime.start_session(pool, ORDERED, now)
        runtime.submit_answer(ReviewResult(grade=4, response_time=1500), now)

        session = runtime.end_session(Mood.GOOD, "short one", now=now + timedelta(minutes=40))

        assert runtime.state == SessionState.COMPLETED
        assert session.mood == Mood.GOOD
        assert session.notes == "short one"
        assert session.end_time == now + timedelta(minutes=40)
        assert session.focus_time == pytest.approx(36.0)
        with pytest.raises(SessionNotActive):
            runtime.submit_answer(ReviewResult(grade=3), now)
        with pytest.raises(SessionNotActive):
            runtime.end_session(now=now)

    def test_end_before_start_clamps(self, runtime, pool, now):
        runtime.start_session(pool, ORDERED, now)
        session = runtime.end_session("poor", now=now - timedelta(minutes=5))

        assert session.end_time == now
        assert session.focus_time == 0
        assert session.mood == Mood.POOR


class TestAnswers:
    def test_submit_updates_card_and_session(self, runtime, pool, now):
        runtime.start_session(pool, ORDERED, now)
        updated = runtime.submit_answer(ReviewResult(grade=3, response_time=2000), now)

        assert updated.id == "c1"
        assert updated.repetitions == 1
        assert updated.interval == 2
        assert runtime.updated_cards == [updated]
        assert runtime.session.questions_reviewed == 1
        assert runtime.session.correct_answers == 1
        assert runtime.current_question().id == "c2"

    def test_skip_records_nothing(self, runtime, pool, now):
        runtime.start_session(pool, ORDERED, now)
        runtime.skip_question()

        assert runtime.current_question().id == "c2"
        assert runtime.answers == ()
        assert runtime.session.questions_reviewed == 0

    def test_routes_by_card_scheduler(self, runtime, make_card, now):
        pool = [
            make_card("legacy", due_in_days=-1, scheduler="sm2", repetitions=1, interval=1),
            make_card("modern"),
        ]
        runtime.start_session(pool, ORDERED, now)
        legacy = runtime.submit_answer(ReviewResult(grade=3), now)
        modern = runtime.submit_answer(ReviewResult(grade=3), now)

        assert legacy.scheduler == SchedulerKind.SM2
        assert legacy.interval == 6
        assert modern.scheduler == SchedulerKind.FSRS
        assert modern.stability == pytest.approx(2.4)

    def test_leech_is_suspended(self, runtime, make_card, now):
        card = make_card(
            "leech", due_in_days=-1, lapses=7, repetitions=1, interval=1,
            last_reviewed=now - timedelta(days=2),
        )
        runtime.start_session([card], ORDERED, now)
        updated = runtime.submit_answer(ReviewResult(grade=1), now)

        assert updated.lapses == 8
        assert updated.suspended

    def test_lapse_threshold_from_config(self, make_card, now):
        runtime = StudySessionRuntime(AppConfig(lapse_suspend_threshold=2))
        runtime.start_session([make_card("c", lapses=1)], ORDERED, now)
        assert runtime.submit_answer(ReviewResult(grade=1), now).suspended


class TestStatistics:
    @pytest.fixture
    def finished(self, runtime, pool, now):
        runtime.start_session(pool, ORDERED, now)
        runtime.submit_answer(ReviewResult(grade=3, response_time=2000), now)
        runtime.submit_answer(ReviewResult(grade=1, response_time=4000), now)
        runtime.skip_question()
        return runtime

    def test_session_stats(self, finished):
        stats = finished.session_stats()

        assert stats.total_questions == 2
        assert stats.correct_answers == 1
        assert stats.accuracy == pytest.approx(50.0)
        assert stats.average_response_time == pytest.approx(3000.0)
        assert stats.time_per_card == pytest.approx(3.0)
        assert stats.difficulty_breakdown == {"intermediate": 1, "expert": 1, "beginner": 1}
        assert stats.type_breakdown == {"flashcard": 2, "cloze": 1}
        assert stats.type_accuracy == {"flashcard": 100.0, "cloze": 0.0}
        assert stats.grade_distribution == {1: 1, 2: 0, 3: 1, 4: 0}
        assert stats.cards_presented == 3

    def test_session_record(self, finished):
        session = finished.session
        assert session.questions_reviewed == 2
        assert session.correct_answers == 1
        assert session.average_response_time == pytest.approx(3000.0)

    def test_progress(self, finished, now):
        progress = finished.progress(now + timedelta(minutes=12))

        assert progress.cards_completed == 3
        assert progress.cards_remaining == 0
        assert progress.time_elapsed == pytest.approx(12.0)
        assert progress.accuracy == pytest.approx(50.0)
        assert progress.current_streak == 0

    def test_progress_stops_at_end(self, finished, now):
        finished.end_session(now=now + timedelta(minutes=10))
        assert finished.progress(now + timedelta(hours=5)).time_elapsed == pytest.approx(10.0)

    def test_estimated_time_uses_default_before_answers(self, runtime, pool, now):
        runtime.start_session(pool, ORDERED, now)
        assert runtime.progress(now).estimated_time_remaining == pytest.approx(1.5)

    def test_streak(self, runtime, pool, now):
        runtime.start_session(pool, ORDERED, now)
        runtime.submit_answer(ReviewResult(grade=1), now)
        runtime.submit_answer(ReviewResult(grade=3), now)
        runtime.submit_answer(ReviewResult(grade=4), now)
        assert runtime.progress(now).current_streak == 2

    def test_recommendations_and_burnout(self, finished, now):
        recs = finished.recommendations(now + timedelta(minutes=10))
        assert recs.suggested_session_length == 15
        assert recs.difficulty_adjustment == DifficultyAdjustment.DECREASE
        assert recs.recommended_question_types == ["cloze"]

        assessment = finished.burnout_risk(now + timedelta(minutes=50))
        assert assessment.score == 2
        assert assessment.risk == "medium"

    def test_learning_velocity(self, finished, now):
        assert finished.learning_velocity(now + timedelta(minutes=30)) == pytest.approx(2.0)

    def test_learning_velocity_without_answers(self, runtime, pool, now):
        runtime.start_session(pool, ORDERED, now)
        assert runtime.learning_velocity(now + timedelta(minutes=30)) == 0.0

    def test_is_time_up(self, runtime, pool, now):
        runtime.start_session(pool, StudySessionConfig(time_limit_minutes=25), now)
        assert not runtime.is_time_up(now + timedelta(minutes=24))
        assert runtime.is_time_up(now + timedelta(minutes=25))
        runtime.end_session(now=now + timedelta(minutes=26))
        assert not runtime.is_time_up(now + timedelta(minutes=30))


@pytest.mark.parametrize(
    "minutes,expected",
    [(20, 0.0), (30, 0.0), (40, 4.0), (60, 6.0), (90, 18.0)],
)
def test_estimate_break_time(minutes, expected):
    assert estimate_break_time(minutes) == pytest.approx(expected)
