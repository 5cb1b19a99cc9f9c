import pytest

from interview_coach.answer_scorer import analyze_answer, round_half_up
from interview_coach.results import (
    METRIC_NAMES,
    compile_results,
    compile_session,
    recommendation_for,
    to_result_record,
)


class TestCompileResults:
    def test_every_answer_scored(self, session_answers):
        compiled = compile_session(session_answers)

        assert len(compiled.detailed_analysis) == 3
        assert [a.type for a in compiled.detailed_analysis] == ["behavioral", "technical", "coding"]
        assert set(compiled.metrics) == set(METRIC_NAMES)
        assert compiled.overall_score == compiled.metrics["clarity"]

    def test_metrics_are_rounded_means(self, session_answers):
        compiled = compile_session(session_answers)
        for name in METRIC_NAMES:
            values = [getattr(a.metrics, name) for a in compiled.detailed_analysis]
            assert compiled.metrics[name] == round_half_up(sum(values) / len(values))

    def test_coding_scored_on_code(self, session_answers):
        compiled = compile_session(session_answers)
        coding = compiled.detailed_analysis[2]
        expected = analyze_answer(session_answers.code_answers[2], "coding", session_answers.questions[2])
        assert coding.metrics == expected.metrics
        assert coding.strengths == expected.strengths
        assert coding.metrics.depth == 100
        assert coding.improvements == []

    def test_coding_language_recorded(self, session_answers):
        compiled = compile_session(session_answers)
        assert [a.coding_language for a in compiled.detailed_analysis] == [None, None, "python"]

    def test_missing_coding_language(self):
        compiled = compile_results(["Sum a list."], ["coding"], [""], ["total = sum(xs)"])
        assert compiled.detailed_analysis[0].coding_language is None

    def test_unanswered_questions_skipped(self):
        compiled = compile_results(
            ["Tell me about a failure.", "Explain TCP.", "Reverse a string."],
            ["behavioral", "technical", "coding"],
            ["I missed a deadline and learned to plan.", "", "I would loop backwards."],
            ["", "", "   "],
        )
        assert len(compiled.detailed_analysis) == 1
        assert compiled.detailed_analysis[0].question == "Tell me about a failure."
        assert compiled.metrics["clarity"] == compiled.detailed_analysis[0].metrics.clarity

    def test_nothing_answered(self):
        compiled = compile_results(["Q1", "Q2"], ["behavioral", "technical"], ["", ""])
        assert compiled.detailed_analysis == []
        assert compiled.metrics == {name: 0 for name in METRIC_NAMES}
        assert compiled.overall_score == 0
        assert len(compiled.personality.traits) == 10

    def test_short_answer_lists(self):
        compiled = compile_results(["Q1", "Q2"], ["behavioral"], ["I led the team."])
        assert len(compiled.detailed_analysis) == 1

    def test_personality_from_spoken_answers(self, session_answers):
        compiled = compile_session(session_answers)
        assert len(compiled.personality.dominant_traits) == 3


class TestResultRecord:
    def test_record_fields(self, session_answers):
        compiled = compile_session(session_answers)
        record = to_result_record("user-1", session_answers, compiled, role="Software Engineer", session_id="s1")

        assert record.user_id == "user-1"
        assert record.role == "Software Engineer"
        assert record.session_id == "s1"
        assert record.questions == session_answers.questions
        assert record.code_answers == session_answers.code_answers
        assert record.overall_score == compiled.overall_score
        assert record.personality_traits == compiled.personality.dominant_traits
        assert record.email_sent is False


@pytest.mark.parametrize("clarity,start", [
    (100, "Your answer demonstrates strong"),
    (75, "Your answer demonstrates strong"),
    (74, "Your answer is solid"),
    (50, "Your answer is solid"),
    (49, "Focus on improving"),
    (0, "Focus on improving"),
])
def test_recommendation_thresholds(clarity, start):
    assert recommendation_for(clarity).startswith(start)
