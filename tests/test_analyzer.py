"""Tests for topic performance analysis."""
import pytest

from level_bot.models import AnswerRecord, AssessmentSession, Difficulty, Level
from level_bot.services.analyzer import analyze_topics, classify_level, finalize, overall_level
from tests.conftest import make_question


def _answer(index, chosen, time_spent):
    return AnswerRecord(question_index=index, chosen_option_index=chosen, time_spent_seconds=time_spent)


class TestClassifyLevel:
    """Cut points are strict: ties go to the upper bucket of the lower bound."""

    @pytest.mark.parametrize("ratio, expected", [
        (0.0, Level.EASY),
        (0.29, Level.EASY),
        (0.3, Level.BEGINNER),
        (0.49, Level.BEGINNER),
        (0.5, Level.INTERMEDIATE),
        (0.8, Level.INTERMEDIATE),
        (0.81, Level.HARD),
        (1.0, Level.HARD),
    ])
    def test_buckets(self, ratio, expected):
        assert classify_level(ratio) is expected

    def test_overall_uses_session_score(self):
        assert overall_level(3, 10) is Level.BEGINNER
        assert overall_level(8, 10) is Level.INTERMEDIATE
        assert overall_level(9, 10) is Level.HARD

    def test_overall_empty_session(self):
        assert overall_level(0, 0) is Level.EASY


class TestAnalyzeTopics:
    def test_counts_match_question_topics(self, two_topic_questions):
        answers = {0: _answer(0, 1, 10), 1: _answer(1, 0, 20)}
        topics = analyze_topics(two_topic_questions, answers)

        assert [t.topic for t in topics] == ["Algebra", "Geometry"]
        for perf in topics:
            expected_total = sum(1 for q in two_topic_questions if q.topic == perf.topic)
            assert perf.total_count == expected_total
            assert perf.correct_count <= perf.total_count

    def test_missing_answer_uses_expected_time(self):
        questions = [make_question(0, expected_time=20), make_question(1, expected_time=40)]
        topics = analyze_topics(questions, {})

        perf = topics[0]
        assert perf.average_time_ratio == pytest.approx(1.0)
        assert perf.correct_count == 0
        assert all(item.user_answer == "No answer" for item in perf.questions)

    def test_zero_time_uses_expected_time(self):
        questions = [make_question(0, expected_time=20)]
        topics = analyze_topics(questions, {0: _answer(0, 0, 0)})
        assert topics[0].average_time_ratio == pytest.approx(1.0)

    def test_timed_out_answer_is_wrong(self):
        questions = [make_question(0, correct=0, expected_time=15)]
        topics = analyze_topics(questions, {0: _answer(0, None, 15)})
        assert topics[0].correct_count == 0
        assert topics[0].questions[0].is_correct is False

    def test_ratio_point_three_is_beginner(self):
        questions = [make_question(i, correct=0) for i in range(10)]
        answers = {i: _answer(i, 0 if i < 3 else 1, 20) for i in range(10)}
        perf = analyze_topics(questions, answers)[0]
        assert perf.recommended_level is Level.BEGINNER

    def test_ratio_point_eight_is_intermediate(self):
        questions = [make_question(i, correct=0) for i in range(5)]
        answers = {i: _answer(i, 0 if i < 4 else 1, 20) for i in range(5)}
        perf = analyze_topics(questions, answers)[0]
        assert perf.recommended_level is Level.INTERMEDIATE
        assert perf.needs_improvement is False

    def test_slow_topic_needs_improvement(self):
        questions = [make_question(0, correct=0, expected_time=10)]
        perf = analyze_topics(questions, {0: _answer(0, 0, 20)})[0]
        assert perf.recommended_level is Level.HARD
        assert perf.needs_improvement is True
        assert "Time management: slower than the expected pace" in perf.weaknesses

    def test_band_weakness_needs_two_samples(self):
        questions = [
            make_question(0, difficulty=Difficulty.EXPERT, correct=0),
            make_question(1, difficulty=Difficulty.EXPERT, correct=0),
            make_question(2, difficulty=Difficulty.VERY_EASY, correct=0),
            make_question(3, difficulty=Difficulty.EASY, correct=0),
            make_question(4, difficulty=Difficulty.EASY, correct=0),
            make_question(5, difficulty=Difficulty.EASY, correct=0),
        ]
        answers = {
            0: _answer(0, 1, 20),
            1: _answer(1, 1, 20),
            2: _answer(2, 0, 20),
            3: _answer(3, 0, 20),
            4: _answer(4, 0, 20),
            5: _answer(5, 1, 20),
        }
        perf = analyze_topics(questions, answers)[0]

        assert "Struggles with expert difficulty Algebra questions" in perf.weaknesses
        assert "Perfect score on very easy Algebra questions" in perf.strengths
        # 2 of 3 is below the solid threshold
        assert not any("easy Algebra" in s and "very" not in s for s in perf.strengths)

    def test_single_sample_band_is_not_a_weakness(self):
        questions = [make_question(0, difficulty=Difficulty.EXPERT, correct=0)]
        perf = analyze_topics(questions, {0: _answer(0, 1, 20)})[0]
        assert perf.weaknesses == []

    def test_solid_band_strength(self):
        questions = [make_question(i, difficulty=Difficulty.ADVANCED, correct=0) for i in range(4)]
        answers = {i: _answer(i, 0 if i < 3 else 2, 20) for i in range(4)}
        perf = analyze_topics(questions, answers)[0]
        assert "Solid grasp of advanced Algebra questions" in perf.strengths

    def test_idempotent(self, two_topic_questions):
        answers = {0: _answer(0, 1, 5), 1: _answer(1, 2, 30), 2: _answer(2, 3, 50)}
        assert analyze_topics(two_topic_questions, answers) == analyze_topics(two_topic_questions, answers)


class TestFinalize:
    def test_two_topics_end_to_end(self, session):
        """Algebra answered right and fast, Geometry wrong and slow."""
        session.record_answer(0, 1, 10)
        session.record_answer(1, 0, 50)
        session.record_answer(2, 0, 20)
        session.record_answer(3, 0, 90)

        report = finalize(session)
        algebra, geometry = report.topics

        assert algebra.recommended_level is Level.HARD
        assert algebra.needs_improvement is False
        assert any("Perfect score" in s or "Time management" in s for s in algebra.strengths)

        assert geometry.recommended_level is Level.EASY
        assert geometry.needs_improvement is True
        assert any("Struggles" in w for w in geometry.weaknesses)

        assert report.score == 2
        assert report.question_count == 4
        assert report.score_percent == 50
        assert report.overall_level is Level.INTERMEDIATE
        assert report.narrative is None

    def test_overall_and_topic_levels_are_independent(self):
        questions = [make_question(i, topic="Algebra" if i < 8 else "Maps", correct=0) for i in range(10)]
        session = AssessmentSession(subject="math", questions=questions)
        for i in range(10):
            session.record_answer(i, 0 if i < 8 else 1, 20)

        report = finalize(session)
        assert report.overall_level is Level.INTERMEDIATE
        assert [t.recommended_level for t in report.topics] == [Level.HARD, Level.EASY]
