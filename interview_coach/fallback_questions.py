import logging
import random
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Optional

from .config import FALLBACK_QUESTIONS_PATH, load_yaml
from .question_selector import draw_questions
from .schemas import GeneratedQuestionSet, JobProfile, QuestionCategory

logger = logging.getLogger('fallback_questions')

DEFAULT_FILLER = "Tell me about your experience as a {role}."


def fill_role(template: str, role: str) -> str:
    """Interpolate the literal role string into a template."""
    return template.replace("{role}", role)


class FallbackQuestionGenerator:
    """Offline question generation used when the text-generation service fails."""

    def __init__(self, config_path: Path = FALLBACK_QUESTIONS_PATH):
        config = load_yaml(config_path)
        self.bank = config.get('categories') or {}
        self.default_category = config.get('default_category', 'behavioral')
        self.filler_question = config.get('filler_question', DEFAULT_FILLER)

    def build_profile(self, role: str) -> JobProfile:
        """Materialize the bank for one role."""
        categories = []
        for name, data in self.bank.items():
            categories.append(QuestionCategory(
                name=name,
                weight=data.get('weight', 1),
                questions=[fill_role(q, role) for q in data.get('questions', [])]
            ))
        return JobProfile(categories=categories)

    def generate(
        self,
        role: str,
        categories: Optional[Iterable[str]] = None,
        count: int = 5,
        rng: Optional[random.Random] = None
    ) -> GeneratedQuestionSet:
        rng = rng or random.Random()
        role = role or ""

        if count < 1:
            return GeneratedQuestionSet()

        profile = self.build_profile(role)
        by_name = {c.name: c for c in profile.categories}

        requested = [name for name in dict.fromkeys(categories or []) if name in by_name]
        if not requested and self.default_category in by_name:
            requested = [self.default_category]

        if not requested:
            logger.warning("Fallback question bank is empty, using filler questions")
            filler = fill_role(self.filler_question, role)
            return GeneratedQuestionSet(questions=[filler] * count, types=[self.default_category] * count)

        questions: List[str] = []
        types: List[str] = []

        # Cover each requested category once before weighting kicks in
        for name in requested:
            if len(questions) >= count:
                break
            category = by_name[name]
            if category.questions:
                questions.append(rng.choice(category.questions))
                types.append(name)

        questions, types = draw_questions(
            [by_name[name] for name in requested], count, rng, questions, types
        )

        # Only reachable when the requested categories hold no templates
        while len(questions) < count:
            questions.append(fill_role(self.filler_question, role))
            types.append(self.default_category)

        return GeneratedQuestionSet(questions=questions[:count], types=types[:count])


@lru_cache(maxsize=1)
def get_fallback_generator() -> FallbackQuestionGenerator:
    return FallbackQuestionGenerator()


def generate_fallback_questions(
    role: str,
    categories: Optional[Iterable[str]] = None,
    count: int = 5,
    rng: Optional[random.Random] = None
) -> GeneratedQuestionSet:
    return get_fallback_generator().generate(role, categories, count, rng)
