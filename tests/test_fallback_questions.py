import pytest
import random

from interview_coach.fallback_questions import (
    FallbackQuestionGenerator,
    fill_role,
    generate_fallback_questions,
    get_fallback_generator,
)


class TestFallbackQuestions:
    @pytest.fixture
    def generator(self):
        return get_fallback_generator()

    def test_bank_categories(self, generator):
        assert {
            "behavioral", "technical", "coding", "leadership", "problemsolving",
            "communication", "teamwork", "projectmanagement", "systemdesign", "cultural",
        } == set(generator.bank)

    def test_fill_role(self):
        assert fill_role("Why {role}? As a {role}.", "Chef") == "Why Chef? As a Chef."

    def test_role_is_interpolated(self, rng):
        result = generate_fallback_questions("Data Engineer", ["behavioral"], 5, rng)
        assert len(result.questions) == 5
        for question in result.questions:
            assert "Data Engineer" in question
            assert "{role}" not in question

    def test_each_requested_category_covered_first(self, rng):
        categories = ["coding", "leadership", "behavioral", "technical"]
        result = generate_fallback_questions("Engineer", categories, 5, rng)
        assert result.types[:4] == categories
        assert set(result.types) <= set(categories)
        assert len(set(result.questions)) == 5

    def test_count_smaller_than_categories(self, rng):
        result = generate_fallback_questions("Engineer", ["behavioral", "technical", "coding"], 2, rng)
        assert result.types == ["behavioral", "technical"]

    def test_duplicate_requested_categories_collapse(self, rng):
        result = generate_fallback_questions("Engineer", ["teamwork", "teamwork"], 3, rng)
        assert result.types == ["teamwork"] * 3
        assert len(set(result.questions)) == 3

    @pytest.mark.parametrize("categories", [None, [], ["astrology"]])
    def test_unknown_categories_default_to_behavioral(self, categories, rng):
        result = generate_fallback_questions("Engineer", categories, 5, rng)
        assert result.types == ["behavioral"] * 5

    def test_small_category_repeats_after_exhaustion(self, rng):
        result = generate_fallback_questions("Engineer", ["cultural"], 6, rng)
        assert len(result.questions) == 6
        assert len(set(result.questions[:4])) == 4

    def test_default_count_is_five(self):
        result = generate_fallback_questions("Engineer", ["behavioral", "coding"], rng=random.Random(3))
        assert len(result) == 5

    def test_zero_count(self, rng):
        assert len(generate_fallback_questions("Engineer", ["coding"], 0, rng)) == 0

    def test_empty_bank_uses_filler(self, tmp_path, rng):
        generator = FallbackQuestionGenerator(tmp_path / "missing.yaml")
        result = generator.generate("Pilot", ["behavioral"], 3, rng)
        assert result.questions == ["Tell me about your experience as a Pilot."] * 3
        assert result.types == ["behavioral"] * 3
