import logging
from typing import List, Optional, Sequence

from .answer_scorer import analyze_answer, round_half_up
from .personality import analyze_personality
from .schemas import (
    AnswerAnalysis,
    CompiledResults,
    InterviewResult,
    QuestionType,
    SessionAnswers,
)

logger = logging.getLogger('results')

METRIC_NAMES = ("structure", "depth", "relevance", "clarity")


def _at(values: Sequence[str], index: int) -> str:
    return (values[index] if index < len(values) else "") or ""


def recommendation_for(clarity: int) -> str:
    """One-line coaching advice keyed on an answer's clarity score."""
    if clarity >= 75:
        return (
            "Your answer demonstrates strong communication skills. Continue to use specific "
            "examples and clear structure in your responses."
        )
    if clarity >= 50:
        return (
            "Your answer is solid but could be improved with more specific details and a clearer "
            "structure. Consider using the STAR method for behavioral questions."
        )
    return (
        "Focus on improving the structure and clarity of your answer. Be more specific and "
        "directly address the question asked."
    )


def compile_results(
    questions: Sequence[str],
    types: Sequence[str],
    answers: Sequence[str],
    code_answers: Optional[Sequence[str]] = None,
    coding_languages: Optional[Sequence[str]] = None
) -> CompiledResults:
    """Score every answered question and profile the candidate.

    Coding questions are scored on the submitted code. Questions left
    unanswered are skipped and do not pull the averages down.
    """
    code_answers = code_answers or []
    coding_languages = coding_languages or []
    detailed: List[AnswerAnalysis] = []

    for index, question in enumerate(questions):
        question_type = _at(types, index)
        is_coding = question_type == QuestionType.CODING
        content = _at(code_answers, index) if is_coding else _at(answers, index)

        if not content.strip():
            logger.debug(f"Skipping unanswered question {index + 1}")
            continue

        analysis = analyze_answer(content, question_type, question)
        if is_coding:
            analysis.coding_language = _at(coding_languages, index) or None
        detailed.append(analysis)

    personality = analyze_personality(answers)

    if detailed:
        metrics = {
            name: round_half_up(sum(getattr(a.metrics, name) for a in detailed) / len(detailed))
            for name in METRIC_NAMES
        }
    else:
        metrics = {name: 0 for name in METRIC_NAMES}

    logger.info(
        f"Compiled results for {len(detailed)}/{len(questions)} answered questions, "
        f"overall score {metrics['clarity']}"
    )

    return CompiledResults(
        overall_score=metrics['clarity'],
        metrics=metrics,
        personality=personality,
        detailed_analysis=detailed,
    )


def compile_session(answers: SessionAnswers) -> CompiledResults:
    return compile_results(
        answers.questions,
        answers.types,
        answers.answers,
        answers.code_answers,
        answers.coding_languages,
    )


def to_result_record(
    user_id: str,
    answers: SessionAnswers,
    compiled: CompiledResults,
    role: Optional[str] = None,
    session_id: Optional[str] = None
) -> InterviewResult:
    """Build the persisted result row from a finished session."""
    return InterviewResult(
        user_id=user_id,
        session_id=session_id,
        role=role,
        questions=list(answers.questions),
        types=list(answers.types),
        answers=list(answers.answers),
        code_answers=list(answers.code_answers),
        coding_languages=list(answers.coding_languages),
        notes=list(answers.notes),
        overall_score=compiled.overall_score,
        metrics=dict(compiled.metrics),
        personality_traits=list(compiled.personality.dominant_traits),
        detailed_analysis=list(compiled.detailed_analysis),
    )
