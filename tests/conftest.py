import pytest
import random
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from interview_coach.schemas import GeneratedQuestionSet, SessionAnswers
from interview_coach.store import InterviewRepository, RowStore


@pytest.fixture
def rng():
    """Seeded randomness source so draws are reproducible"""
    return random.Random(1234)


@pytest.fixture
def row_store(tmp_path):
    return RowStore(str(tmp_path / "data"))


@pytest.fixture
def repository(row_store):
    return InterviewRepository(row_store)


@pytest.fixture
def question_set():
    return GeneratedQuestionSet(
        questions=[
            "Tell me about a time you resolved a conflict in your team.",
            "Explain how a hash map handles collisions.",
            "Implement a function to reverse a linked list.",
        ],
        types=["behavioral", "technical", "coding"],
    )


@pytest.fixture
def session_answers(question_set):
    """A finished session with every question answered"""
    return SessionAnswers(
        questions=list(question_set.questions),
        types=list(question_set.types),
        answers=[
            "The situation was a release conflict. My approach was to set up a meeting and the "
            "result was that we improved delivery by 20%.",
            "A hash map uses chaining or open addressing because two keys can share a bucket.",
            "I walked through it iteratively.",
        ],
        code_answers=[
            "",
            "",
            "# iterative reversal, O(n) time\ndef reverse(head):\n    if head is None:\n"
            "        raise ValueError('empty list')\n    prev = None\n"
            "    while head:\n        head.next, prev, head = prev, head, head.next\n    return prev",
        ],
        coding_languages=["", "", "python"],
        notes=["", "", ""],
    )
