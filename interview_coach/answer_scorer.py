import math
import logging
from collections import Counter
from typing import Dict, List, Optional, Union

import regex as re

from .schemas import AnswerAnalysis, AnswerMetrics, QuestionType

logger = logging.getLogger('answer_scorer')

# Signal patterns per question type, matched case-insensitively anywhere in the answer
SIGNAL_PATTERNS: Dict[str, Dict[str, str]] = {
    QuestionType.BEHAVIORAL.value: {
        'context': r'situation|context|background',
        'action': r'action|approach|steps|implemented',
        'result': r'result|outcome|impact|improved|increased|decreased',
        'specific_details': r'\d+%|\d+ percent|increased by|decreased by|improved|specific|exactly|precisely',
    },
    QuestionType.TECHNICAL.value: {
        'technical_terms': (
            r'algorithm|framework|architecture|system|design|implementation|technology'
            r'|concept|principle|cache|database|protocol'
        ),
        'explanation': r'because|therefore|this means|as a result|consequently|due to|explains|clarifies',
    },
    QuestionType.CODING.value: {
        'comments': r'//|/\*|\*/|#|\*\*|--',
        'error_handling': r'try|catch|error|exception|throw|finally',
        'optimization': r'optimize|complexity|efficient|performance|\bO\([^()]{1,12}\)',
    },
}

STOP_WORDS = frozenset([
    "the", "and", "that", "this", "with", "for", "was",
    "were", "have", "had", "not", "are", "from",
])

MAX_KEYWORDS = 5
RELEVANCE_OFFSET = 20
SHORT_ANSWER_WORDS = 50
LONG_ANSWER_WORDS = 300
LONG_SENTENCE_WORDS = 30
EMPTY_ANSWER_NOTE = "Answer is too short to evaluate"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def tokenize(text: str) -> List[str]:
    """Lower-case split on non-word characters, dropping empty tokens."""
    return [w for w in re.split(r'\W+', (text or "").lower()) if w]


class AnswerScorer:
    """Rule-based scoring of a single interview answer.

    Scores are heuristics built from keyword signals, not a learned model.
    The same input always yields the same analysis.
    """

    def __init__(self, patterns: Optional[Dict[str, Dict[str, str]]] = None):
        self.compile_patterns(patterns or SIGNAL_PATTERNS)

    def compile_patterns(self, patterns: Dict[str, Dict[str, str]]):
        """Pre-compile signal patterns per question type."""
        self.signal_patterns = {
            question_type: {
                signal: re.compile(pattern, re.IGNORECASE)
                for signal, pattern in signals.items()
            }
            for question_type, signals in patterns.items()
        }

    def detect_signals(self, content: str, question_type: str) -> Dict[str, bool]:
        signals = self.signal_patterns.get(question_type, {})
        return {name: bool(pattern.search(content)) for name, pattern in signals.items()}

    def analyze(
        self,
        content: Optional[str],
        question_type: Union[str, QuestionType],
        question: Optional[str]
    ) -> AnswerAnalysis:
        content = content or ""
        question = question or ""
        question_type = str(getattr(question_type, 'value', question_type) or "").lower().strip()

        word_count = len(content.split())
        sentence_count = len([s for s in re.split(r'[.!?]+', content) if s.strip()])
        avg_sentence_length = word_count / (sentence_count or 1)

        structure = 0
        depth = 0
        strengths: List[str] = []
        improvements: List[str] = []
        signals = self.detect_signals(content, question_type)

        if question_type == QuestionType.BEHAVIORAL:
            structure, depth = self._score_behavioral(signals, word_count, strengths, improvements)
        elif question_type == QuestionType.TECHNICAL:
            depth = self._score_technical(signals, avg_sentence_length, strengths, improvements)
        elif question_type == QuestionType.CODING:
            depth = self._score_coding(signals, strengths, improvements)
        else:
            logger.debug(f"No scoring rules for question type '{question_type}'")

        if not content.strip() and not improvements:
            improvements.append(EMPTY_ANSWER_NOTE)

        answer_words = tokenize(content)
        relevance = self.score_relevance(question, answer_words)
        clarity = round_half_up((structure + depth + relevance) / 3)

        return AnswerAnalysis(
            question=question,
            type=question_type,
            metrics=AnswerMetrics(
                word_count=word_count,
                sentence_count=sentence_count,
                avg_sentence_length=avg_sentence_length,
                clarity=clarity,
                relevance=relevance,
                structure=structure,
                depth=depth,
            ),
            strengths=strengths,
            improvements=improvements,
            keywords=self.extract_keywords(answer_words),
        )

    def _score_behavioral(self, signals, word_count, strengths, improvements):
        has_context = signals['context']
        has_action = signals['action']
        has_result = signals['result']
        has_details = signals['specific_details']

        if has_context and has_action and has_result:
            structure = 85
        elif (has_context and has_action) or (has_action and has_result):
            structure = 65
        elif has_action:
            structure = 45
        else:
            structure = 30

        depth = 75 if has_details else 50

        if has_context and has_action and has_result:
            strengths.append("Well-structured response using the STAR method")
        else:
            improvements.append(
                "Structure your answer using the STAR method (Situation, Task, Action, Result)"
            )

        if has_details:
            strengths.append("Good use of specific details and metrics")
        else:
            improvements.append("Include specific numbers and metrics to quantify your impact")

        if word_count < SHORT_ANSWER_WORDS:
            improvements.append(
                "Expand your answer with more details about the situation and your actions"
            )
        elif word_count > LONG_ANSWER_WORDS:
            improvements.append(
                "Consider making your response more concise while maintaining key details"
            )
        else:
            strengths.append("Good answer length - detailed but concise")

        return structure, depth

    def _score_technical(self, signals, avg_sentence_length, strengths, improvements):
        has_terms = signals['technical_terms']
        has_explanation = signals['explanation']

        if has_terms and has_explanation:
            depth = 80
        elif has_terms:
            depth = 60
        elif has_explanation:
            depth = 50
        else:
            depth = 30

        if has_terms:
            strengths.append("Good use of technical terminology")
        else:
            improvements.append("Include more technical terms relevant to the question")

        if has_explanation:
            strengths.append("Clear explanations of technical concepts")
        else:
            improvements.append(
                "Explain why and how technical concepts work, not just what they are"
            )

        if avg_sentence_length > LONG_SENTENCE_WORDS:
            improvements.append("Break down complex sentences for better clarity")

        return depth

    def _score_coding(self, signals, strengths, improvements):
        depth = 20
        depth += 25 if signals['comments'] else 0
        depth += 25 if signals['error_handling'] else 0
        depth += 30 if signals['optimization'] else 0

        if signals['comments']:
            strengths.append("Good code documentation with comments")
        else:
            improvements.append("Add comments to explain your approach and key parts of the code")

        if signals['error_handling']:
            strengths.append("Includes error handling for robustness")
        else:
            improvements.append("Consider adding error handling for edge cases")

        if signals['optimization']:
            strengths.append("Shows awareness of code optimization and complexity")
        else:
            improvements.append("Discuss the time and space complexity of your solution")

        return min(depth, 100)

    def score_relevance(self, question: str, answer_words: List[str]) -> int:
        """Share of the question's words (longer than 3 chars) echoed in the answer, plus a fixed offset."""
        question_words = [w for w in tokenize(question) if len(w) > 3]
        if not question_words:
            return 0
        answer_vocabulary = set(answer_words)
        matching = [w for w in question_words if w in answer_vocabulary]
        overlap = round_half_up(len(matching) / len(question_words) * 100)
        return min(100, overlap + RELEVANCE_OFFSET)

    def extract_keywords(self, answer_words: List[str]) -> List[str]:
        """Most frequent content words, ties kept in first-seen order."""
        counts = Counter(
            w for w in answer_words
            if len(w) > 4 and w not in STOP_WORDS
        )
        ranked = sorted(counts.items(), key=lambda item: -item[1])
        return [word for word, _ in ranked[:MAX_KEYWORDS]]


_default_scorer = AnswerScorer()


def analyze_answer(
    content: Optional[str],
    question_type: Union[str, QuestionType],
    question: Optional[str]
) -> AnswerAnalysis:
    return _default_scorer.analyze(content, question_type, question)
