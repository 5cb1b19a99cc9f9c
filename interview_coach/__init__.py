from .answer_scorer import analyze_answer
from .fallback_questions import generate_fallback_questions
from .personality import analyze_personality
from .question_selector import get_coding_challenges, get_technical_topics, select_questions
from .results import compile_results, to_result_record
from .schemas import (
    AnswerAnalysis,
    AnswerMetrics,
    GeneratedQuestionSet,
    InterviewResult,
    PersonalityProfile,
    PersonalityTrait,
)
from .session import InterviewFlow, InterviewSession, InvalidTransition

__all__ = [
    'analyze_answer',
    'analyze_personality',
    'compile_results',
    'generate_fallback_questions',
    'get_coding_challenges',
    'get_technical_topics',
    'select_questions',
    'to_result_record',
    'AnswerAnalysis',
    'AnswerMetrics',
    'GeneratedQuestionSet',
    'InterviewResult',
    'PersonalityProfile',
    'PersonalityTrait',
    'InterviewFlow',
    'InterviewSession',
    'InvalidTransition',
]
