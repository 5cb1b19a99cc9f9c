import logging
from enum import Enum
from typing import Optional, Tuple

from .schemas import GeneratedQuestionSet, QuestionType, SessionAnswers

logger = logging.getLogger('session')

NO_ANSWER_FEEDBACK = "No answer detected. Please try again."
NO_CODE_FEEDBACK = "No code submitted. Please write some code and run it."
DEFAULT_CODING_LANGUAGE = "javascript"


class InvalidTransition(RuntimeError):
    """An action was requested in a state that does not allow it."""


class Phase(str, Enum):
    DASHBOARD = "dashboard"
    SETUP = "setup"
    SESSION = "session"
    RESULTS = "results"


class AnswerState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    FEEDBACK_PENDING = "feedback_pending"
    FEEDBACK_SHOWN = "feedback_shown"


PHASE_TRANSITIONS = {
    Phase.DASHBOARD: {Phase.SETUP},
    Phase.SETUP: {Phase.SESSION, Phase.DASHBOARD},
    Phase.SESSION: {Phase.RESULTS},
    Phase.RESULTS: {Phase.DASHBOARD, Phase.SETUP},
}


class InterviewSession:
    """Walks a candidate through one question set, one question at a time.

    Per question: idle -> recording -> feedback_pending -> feedback_shown.
    There is no way back to an earlier question.
    """

    def __init__(self, question_set: GeneratedQuestionSet, language: str = "en"):
        if not question_set.questions:
            raise ValueError("Cannot start a session without questions")

        self.questions = list(question_set.questions)
        self.types = list(question_set.types)
        self.language = language
        count = len(self.questions)

        self.answers = [""] * count
        self.code_answers = [""] * count
        self.coding_languages = [""] * count
        self.notes = [""] * count

        self.index = 0
        self.state = AnswerState.IDLE
        self.transcript = ""
        self.code = ""
        self.coding_language = DEFAULT_CODING_LANGUAGE
        self.feedback: Optional[str] = None
        self.complete = False

    @property
    def current_question(self) -> str:
        return self.questions[self.index]

    @property
    def current_type(self) -> str:
        return self.types[self.index]

    @property
    def is_coding(self) -> bool:
        return self.current_type == QuestionType.CODING

    @property
    def is_last(self) -> bool:
        return self.index == len(self.questions) - 1

    @property
    def progress(self) -> float:
        return (self.index + 1) / len(self.questions) * 100

    def _require(self, *states: AnswerState):
        if self.complete:
            raise InvalidTransition("Session is already complete")
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise InvalidTransition(f"Action not allowed in state '{self.state.value}' (expected {allowed})")

    def start_recording(self):
        self._require(AnswerState.IDLE, AnswerState.FEEDBACK_SHOWN)
        self.transcript = ""
        self.feedback = None
        self.state = AnswerState.RECORDING

    def append_transcript(self, text: str) -> bool:
        """Add recognized speech; ignored unless recording."""
        if self.complete or self.state != AnswerState.RECORDING:
            return False
        self.transcript = f"{self.transcript} {text}".strip() if self.transcript else text
        return True

    def set_code(self, code: str, language: Optional[str] = None):
        if self.complete:
            raise InvalidTransition("Session is already complete")
        self.code = code or ""
        if language:
            self.coding_language = language

    def stop_recording(self) -> Optional[Tuple[str, str]]:
        """Store the answer for the current question.

        Returns the (question context, answer) pair to request feedback for,
        or None when there was nothing to evaluate and the canned feedback
        has already been shown.
        """
        self._require(AnswerState.RECORDING)
        self.answers[self.index] = self.transcript

        if self.is_coding:
            self.code_answers[self.index] = self.code
            self.coding_languages[self.index] = self.coding_language
            submitted = self.code
            empty_feedback = NO_CODE_FEEDBACK
        else:
            submitted = self.transcript
            empty_feedback = NO_ANSWER_FEEDBACK

        if not submitted.strip():
            self.feedback = empty_feedback
            self.state = AnswerState.FEEDBACK_SHOWN
            return None

        self.state = AnswerState.FEEDBACK_PENDING
        return self.feedback_context(), submitted

    def feedback_context(self) -> str:
        return (
            f"[{self.current_type.upper()}] [Question {self.index + 1}/{len(self.questions)}] "
            f"{self.current_question}"
        )

    def set_feedback(self, feedback: str):
        self._require(AnswerState.FEEDBACK_PENDING)
        self.feedback = feedback
        self.state = AnswerState.FEEDBACK_SHOWN

    def save_note(self, index: int, text: str):
        if not 0 <= index < len(self.notes):
            raise IndexError(f"No question at index {index}")
        self.notes[index] = text

    def next_question(self) -> Optional[SessionAnswers]:
        """Advance, or finish the session after the last question.

        Returns the collected answers once the session is complete.
        """
        self._require(AnswerState.IDLE, AnswerState.FEEDBACK_SHOWN)

        if not self.is_last:
            self.index += 1
            self.state = AnswerState.IDLE
            self.transcript = ""
            self.code = ""
            self.feedback = None
            return None

        self.complete = True
        logger.info(f"Session complete after {len(self.questions)} questions")
        return self.collect()

    def collect(self) -> SessionAnswers:
        return SessionAnswers(
            questions=list(self.questions),
            types=list(self.types),
            answers=list(self.answers),
            code_answers=list(self.code_answers),
            coding_languages=list(self.coding_languages),
            notes=list(self.notes),
        )


class InterviewFlow:
    """App-level phases: dashboard -> setup -> session -> results."""

    def __init__(self):
        self.phase = Phase.DASHBOARD
        self.role = ""
        self.session: Optional[InterviewSession] = None
        self.answers: Optional[SessionAnswers] = None

    def _move(self, target: Phase):
        if target not in PHASE_TRANSITIONS[self.phase]:
            raise InvalidTransition(f"Cannot go from {self.phase.value} to {target.value}")
        logger.debug(f"Phase {self.phase.value} -> {target.value}")
        self.phase = target

    def select_role(self, role: str):
        if self.phase not in (Phase.DASHBOARD, Phase.SETUP):
            raise InvalidTransition(f"Cannot change role during {self.phase.value}")
        self.role = role

    def configure(self):
        self._move(Phase.SETUP)

    def start_session(self, question_set: GeneratedQuestionSet, language: str = "en") -> InterviewSession:
        if self.phase != Phase.SETUP:
            raise InvalidTransition(f"Cannot start a session from {self.phase.value}")
        session = InterviewSession(question_set, language)
        self._move(Phase.SESSION)
        self.session = session
        self.answers = None
        return session

    def finish_session(self, answers: SessionAnswers):
        self._move(Phase.RESULTS)
        self.answers = answers

    def view_dashboard(self):
        self._move(Phase.DASHBOARD)

    def start_new(self):
        self._move(Phase.SETUP)
        self.session = None
