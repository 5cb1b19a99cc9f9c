import logging
import random
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from .config import JOB_PROFILES_PATH, load_yaml
from .schemas import GeneratedQuestionSet, JobProfile, QuestionCategory

logger = logging.getLogger('question_selector')

DEFAULT_PROFILE_KEY = "software engineer"

# Used only when no profile data could be loaded at all
GENERIC_QUESTIONS = [
    "Tell me about yourself and your background.",
    "What are your strengths and weaknesses?",
    "Why are you interested in this role?",
    "Where do you see yourself in 5 years?",
    "Describe a challenging situation you faced at work and how you handled it.",
]


def normalize_role(role: Optional[str]) -> str:
    """Lower-case and trim a role title for matching."""
    return (role or "").lower().strip()


class ProfileMatcher:
    """Resolve a free-text role title to one of the known job profiles.

    Matching order:
        1. exact profile key
        2. exact alias from the alias table
        3. substring containment (either direction) against profile keys,
           in the order the profiles were declared
        4. the default profile
    """

    def __init__(
        self,
        profiles: Dict[str, JobProfile],
        aliases: Optional[Dict[str, str]] = None,
        default_key: str = DEFAULT_PROFILE_KEY
    ):
        self.profiles = profiles
        self.aliases = {
            normalize_role(alias): normalize_role(target)
            for alias, target in (aliases or {}).items()
            if normalize_role(target) in profiles
        }
        if default_key in profiles:
            self.default_key = default_key
        else:
            self.default_key = next(iter(profiles), None)

    def resolve_key(self, role: Optional[str]) -> Optional[str]:
        """Return the profile key for a role, or None when no profiles exist."""
        if not self.profiles:
            return None

        title = normalize_role(role)

        if title in self.profiles:
            return title

        if title in self.aliases:
            return self.aliases[title]

        if title:
            for key in self.profiles:
                if key in title or title in key:
                    return key

        logger.info(f"No profile matched role '{role}', using default '{self.default_key}'")
        return self.default_key

    def match(self, role: Optional[str]) -> Optional[JobProfile]:
        key = self.resolve_key(role)
        return self.profiles.get(key) if key else None


def weighted_choice(categories: List[QuestionCategory], rng: random.Random) -> QuestionCategory:
    """Roulette-wheel pick of a category, proportional to its weight."""
    total_weight = sum(category.weight for category in categories)
    remaining = rng.uniform(0, total_weight)
    selected = categories[0]

    for category in categories:
        remaining -= category.weight
        if remaining <= 0:
            selected = category
            break

    return selected


def draw_questions(
    categories: List[QuestionCategory],
    count: int,
    rng: random.Random,
    questions: Optional[List[str]] = None,
    types: Optional[List[str]] = None
) -> Tuple[List[str], List[str]]:
    """Weighted draw of question templates until `count` are collected.

    Templates already in `questions` are avoided while any category still has
    unused ones. The roulette only spins over those categories. Once every
    category is exhausted, repeats are allowed so the result always reaches
    `count` (unless there are no templates at all).
    """
    questions = list(questions or [])
    types = list(types or [])

    while len(questions) < count:
        used = set(questions)
        open_categories = [
            c for c in categories
            if any(q not in used for q in c.questions)
        ]

        if open_categories:
            category = weighted_choice(open_categories, rng)
            unused = [q for q in category.questions if q not in used]
            question = rng.choice(unused)
        else:
            pool = [c for c in categories if c.questions]
            if not pool:
                logger.warning("Selected categories contain no question templates")
                break
            if len(questions) == len(used):
                logger.info(
                    f"Unique question pool exhausted after {len(questions)} questions, allowing repeats"
                )
            category = weighted_choice(pool, rng)
            question = rng.choice(category.questions)

        questions.append(question)
        types.append(category.name)

    return questions, types


def filter_categories(profile: JobProfile, preferred_categories: Optional[Iterable[str]]) -> List[QuestionCategory]:
    """Restrict a profile to the preferred categories, or all of them when none match."""
    preferred = set(preferred_categories or [])
    selected = [c for c in profile.categories if c.name in preferred]
    if not selected:
        if preferred:
            logger.info(
                f"None of the preferred categories {sorted(preferred)} exist in profile, "
                f"using all of {profile.category_names()}"
            )
        selected = list(profile.categories)
    return selected


class QuestionSelector:
    """Job-specific question generation from the static profile bank."""

    def __init__(self, config_path: Path = JOB_PROFILES_PATH):
        config = load_yaml(config_path)
        self.profiles = self._build_profiles(config.get('job_profiles') or {})
        self.generic_questions = config.get('generic_questions') or GENERIC_QUESTIONS
        self.matcher = ProfileMatcher(
            self.profiles,
            config.get('aliases') or {},
            normalize_role(config.get('default_profile', DEFAULT_PROFILE_KEY))
        )
        logger.info(f"Loaded {len(self.profiles)} job profiles from {config_path}")

    def _build_profiles(self, raw_profiles: Dict) -> Dict[str, JobProfile]:
        profiles = {}
        for key, data in raw_profiles.items():
            try:
                profiles[normalize_role(key)] = JobProfile(**data)
            except (ValidationError, TypeError) as e:
                logger.error(f"Skipping invalid job profile '{key}': {str(e)}")
        return profiles

    def select_questions(
        self,
        role: str,
        count: int = 5,
        preferred_categories: Optional[Iterable[str]] = None,
        rng: Optional[random.Random] = None
    ) -> GeneratedQuestionSet:
        """Pick `count` questions for a role, weighted by category."""
        rng = rng or random.Random()

        if count < 1:
            logger.warning(f"Requested {count} questions, returning an empty set")
            return GeneratedQuestionSet()

        profile = self.matcher.match(role)
        if profile is None:
            return self._generic_question_set(count)

        categories = filter_categories(profile, preferred_categories)
        questions, types = draw_questions(categories, count, rng)
        return GeneratedQuestionSet(questions=questions[:count], types=types[:count])

    def _generic_question_set(self, count: int) -> GeneratedQuestionSet:
        logger.warning("No job profiles available, using generic behavioral questions")
        questions = list(self.generic_questions[:count])
        while len(questions) < count:
            questions.append(self.generic_questions[-1])
        return GeneratedQuestionSet(questions=questions, types=["behavioral"] * count)

    def get_technical_topics(self, role: str) -> List[str]:
        profile = self.matcher.match(role)
        return list(profile.technical_topics) if profile else []

    def get_coding_challenges(self, role: str) -> List[str]:
        profile = self.matcher.match(role)
        return list(profile.coding_challenges) if profile else []


@lru_cache(maxsize=1)
def get_selector() -> QuestionSelector:
    """Shared selector over the bundled profile bank."""
    return QuestionSelector()


def select_questions(
    role: str,
    count: int = 5,
    preferred_categories: Optional[Iterable[str]] = None,
    rng: Optional[random.Random] = None
) -> GeneratedQuestionSet:
    return get_selector().select_questions(role, count, preferred_categories, rng)


def get_technical_topics(role: str) -> List[str]:
    return get_selector().get_technical_topics(role)


def get_coding_challenges(role: str) -> List[str]:
    return get_selector().get_coding_challenges(role)
