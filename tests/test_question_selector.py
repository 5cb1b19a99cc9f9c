import pytest
import random
from collections import Counter

from interview_coach.question_selector import (
    GENERIC_QUESTIONS,
    ProfileMatcher,
    QuestionSelector,
    get_coding_challenges,
    get_selector,
    get_technical_topics,
    select_questions,
    weighted_choice,
)
from interview_coach.schemas import JobProfile, QuestionCategory


class FixedRandom:
    """Stand-in rng whose uniform() returns a preset value"""
    def __init__(self, value):
        self.value = value

    def uniform(self, a, b):
        return self.value


class TestProfileMatching:
    @pytest.fixture
    def matcher(self):
        return get_selector().matcher

    @pytest.mark.parametrize("role,expected", [
        ("software engineer", "software engineer"),
        ("  Product Manager ", "product manager"),
        ("SWE", "software engineer"),
        ("machine learning engineer", "data scientist"),
        ("Senior Software Engineer", "software engineer"),
        ("Data Scientist II", "data scientist"),
        ("manager", "product manager"),
        ("astronaut", "software engineer"),
        ("", "software engineer"),
        (None, "software engineer"),
    ])
    def test_resolve_key(self, matcher, role, expected):
        assert matcher.resolve_key(role) == expected

    def test_alias_to_unknown_profile_is_ignored(self):
        profiles = {"writer": JobProfile(categories=[QuestionCategory(name="behavioral", weight=1)])}
        matcher = ProfileMatcher(profiles, {"author": "poet"}, default_key="missing")
        assert "author" not in matcher.aliases
        assert matcher.default_key == "writer"

    def test_no_profiles_resolves_to_none(self):
        assert ProfileMatcher({}).resolve_key("software engineer") is None


class TestWeightedChoice:
    @pytest.fixture
    def categories(self):
        return [
            QuestionCategory(name="a", weight=2),
            QuestionCategory(name="b", weight=3),
            QuestionCategory(name="c", weight=5),
        ]

    @pytest.mark.parametrize("value,expected", [
        (0.0, "a"),
        (2.0, "a"),
        (2.5, "b"),
        (5.0, "b"),
        (7.5, "c"),
        (10.0, "c"),
    ])
    def test_roulette_boundaries(self, categories, value, expected):
        assert weighted_choice(categories, FixedRandom(value)).name == expected

    def test_draws_follow_weights(self):
        categories = [QuestionCategory(name="heavy", weight=9), QuestionCategory(name="light", weight=1)]
        rng = random.Random(7)
        counts = Counter(weighted_choice(categories, rng).name for _ in range(2000))
        assert counts["heavy"] > 1600
        assert counts["light"] > 100


class TestSelectQuestions:
    @pytest.mark.parametrize("role", [
        "software engineer", "product manager", "data scientist", "ux designer", "marketing manager", "chef",
    ])
    @pytest.mark.parametrize("count", [1, 3, 5, 10])
    def test_length_and_types(self, role, count, rng):
        result = select_questions(role, count, None, rng)
        profile = get_selector().matcher.match(role)

        assert len(result.questions) == count
        assert len(result.types) == count
        assert set(result.types) <= set(profile.category_names())

    @pytest.mark.parametrize("seed", range(5))
    def test_no_duplicates_within_pool(self, seed):
        result = select_questions("software engineer", 20, None, random.Random(seed))
        assert len(set(result.questions)) == 20

    def test_coding_only_software_engineer(self, rng):
        result = select_questions("software engineer", 5, ["coding"], rng)
        assert result.types == ["coding"] * 5
        assert len(set(result.questions)) == 5

    def test_coding_bank_has_ten_templates(self):
        profile = get_selector().profiles["software engineer"]
        coding = next(c for c in profile.categories if c.name == "coding")
        assert len(coding.questions) == 10

    def test_exhausted_pool_allows_repeats(self, rng):
        result = select_questions("software engineer", 15, ["coding"], rng)
        assert len(result.questions) == 15
        assert len(set(result.questions[:10])) == 10
        assert len(set(result.questions)) == 10

    def test_preferred_categories_filter(self, rng):
        result = select_questions("data scientist", 8, ["casestudy", "behavioral"], rng)
        assert set(result.types) <= {"casestudy", "behavioral"}

    def test_unknown_preferred_categories_use_all(self, rng):
        result = select_questions("software engineer", 6, ["astrology"], rng)
        profile = get_selector().profiles["software engineer"]
        assert len(result.questions) == 6
        assert set(result.types) <= set(profile.category_names())

    def test_same_seed_same_questions(self):
        first = select_questions("ux designer", 5, None, random.Random(99))
        second = select_questions("ux designer", 5, None, random.Random(99))
        assert first == second

    @pytest.mark.parametrize("count", [0, -3])
    def test_non_positive_count_returns_empty(self, count, rng):
        result = select_questions("software engineer", count, None, rng)
        assert result.questions == []
        assert result.types == []


class TestProfileLoading:
    def test_missing_config_uses_generic_questions(self, tmp_path, rng):
        selector = QuestionSelector(tmp_path / "missing.yaml")
        result = selector.select_questions("software engineer", 5, None, rng)
        assert result.questions == GENERIC_QUESTIONS
        assert result.types == ["behavioral"] * 5

    def test_generic_questions_repeat_last(self, tmp_path, rng):
        selector = QuestionSelector(tmp_path / "missing.yaml")
        result = selector.select_questions("anything", 7, None, rng)
        assert len(result.questions) == 7
        assert result.questions[5:] == [GENERIC_QUESTIONS[-1]] * 2

    def test_invalid_profile_is_skipped(self, tmp_path, rng):
        config = tmp_path / "profiles.yaml"
        config.write_text(
            "job_profiles:\n"
            "  broken:\n"
            "    categories:\n"
            "      - name: behavioral\n"
            "        weight: 0\n"
            "        questions: [\"Q\"]\n"
            "  writer:\n"
            "    categories:\n"
            "      - name: behavioral\n"
            "        weight: 2\n"
            "        questions: [\"Why do you write?\", \"What do you read?\"]\n",
            encoding="utf-8",
        )
        selector = QuestionSelector(config)
        assert list(selector.profiles) == ["writer"]

        result = selector.select_questions("broken", 2, None, rng)
        assert sorted(result.questions) == ["What do you read?", "Why do you write?"]

    def test_category_without_templates_never_selected(self, tmp_path, rng):
        config = tmp_path / "profiles.yaml"
        config.write_text(
            "job_profiles:\n"
            "  writer:\n"
            "    categories:\n"
            "      - name: empty\n"
            "        weight: 10\n"
            "      - name: behavioral\n"
            "        weight: 1\n"
            "        questions: [\"Why do you write?\"]\n",
            encoding="utf-8",
        )
        result = QuestionSelector(config).select_questions("writer", 3, None, rng)
        assert result.types == ["behavioral"] * 3


class TestTopics:
    def test_software_engineer_topics(self):
        assert "Data Structures" in get_technical_topics("software engineer")
        assert len(get_coding_challenges("software engineer")) > 0

    def test_profile_without_lists(self, tmp_path):
        config = tmp_path / "profiles.yaml"
        config.write_text(
            "job_profiles:\n"
            "  writer:\n"
            "    categories:\n"
            "      - name: behavioral\n"
            "        weight: 1\n"
            "        questions: [\"Why do you write?\"]\n",
            encoding="utf-8",
        )
        selector = QuestionSelector(config)
        assert selector.get_technical_topics("writer") == []
        assert selector.get_coding_challenges("writer") == []
