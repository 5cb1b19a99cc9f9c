import pytest

from interview_coach.personality import TRAIT_DEFINITIONS, PersonalityAnalyzer, analyze_personality

TRAIT_NAMES = [definition['name'] for definition in TRAIT_DEFINITIONS]


def scores_by_name(profile):
    return {trait.name: trait.score for trait in profile.traits}


class TestPersonalityAnalyzer:
    def test_empty_answers_neutral(self):
        profile = analyze_personality([])

        assert len(profile.traits) == 10
        assert all(trait.score == 50 for trait in profile.traits)
        assert [t.name for t in profile.traits] == TRAIT_NAMES
        assert profile.dominant_traits == ["Analytical Thinking", "Creativity", "Detail Orientation"]
        assert len(profile.interview_tips) == 5

    def test_summary_uses_top_and_bottom_traits(self):
        profile = analyze_personality([])
        assert profile.summary.startswith(
            "Your responses indicate that you have particularly strong Analytical Thinking and Creativity traits."
        )
        assert "developing your confidence and empathy skills further." in profile.summary
        assert "Be prepared to discuss situations that required confidence" in profile.interview_tips[1]

    def test_keyword_hits_and_first_person(self):
        profile = analyze_personality(["I analyze data"])
        scores = scores_by_name(profile)

        assert scores["Analytical Thinking"] == 60
        assert scores["Confidence"] == 60
        assert scores["Communication"] == 50
        assert profile.dominant_traits == ["Analytical Thinking", "Confidence", "Creativity"]

    def test_keyword_bonus_capped(self):
        profile = analyze_personality([" ".join(["team"] * 20)])
        scores = scores_by_name(profile)
        assert scores["Teamwork"] == 90
        assert scores["Communication"] == 60

    def test_whole_words_only(self):
        scores = scores_by_name(analyze_personality(["teammates leaders"]))
        assert scores["Teamwork"] == 50
        assert scores["Leadership"] == 50

    def test_multi_word_keyword(self):
        scores = scores_by_name(analyze_personality(["We need new ideas"]))
        assert scores["Creativity"] == 55

    def test_answers_joined_and_lowercased(self):
        scores = scores_by_name(analyze_personality(["We COLLABORATE", None, "Together"]))
        assert scores["Teamwork"] == 60

    def test_scores_clamped(self):
        text = (
            "I am confident, certain, assured, decisive, assertive, bold, strong and sure of myself. "
            "I communicate, explain, articulate, present, discuss, convey and express ideas clearly to my team."
        )
        profile = analyze_personality([text])
        assert all(0 <= trait.score <= 100 for trait in profile.traits)
        assert scores_by_name(profile)["Confidence"] == 100

    def test_traits_sorted_descending(self):
        profile = analyze_personality(["We collaborate as a team to solve and fix problems together."])
        scores = [trait.score for trait in profile.traits]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.parametrize("answers", [[], [""], ["   "], ["..."]])
    def test_degenerate_text(self, answers):
        profile = PersonalityAnalyzer().analyze(answers)
        assert all(trait.score == 50 for trait in profile.traits)
