import pytest

from interview_coach.schemas import GeneratedQuestionSet
from interview_coach.session import (
    NO_ANSWER_FEEDBACK,
    NO_CODE_FEEDBACK,
    AnswerState,
    InterviewFlow,
    InterviewSession,
    InvalidTransition,
    Phase,
)


class TestInterviewFlow:
    def test_happy_path(self, question_set, session_answers):
        flow = InterviewFlow()
        assert flow.phase == Phase.DASHBOARD

        flow.select_role("Software Engineer")
        flow.configure()
        assert flow.phase == Phase.SETUP

        session = flow.start_session(question_set)
        assert flow.phase == Phase.SESSION
        assert flow.session is session

        flow.finish_session(session_answers)
        assert flow.phase == Phase.RESULTS
        assert flow.answers == session_answers

        flow.start_new()
        assert flow.phase == Phase.SETUP
        flow.view_dashboard()
        assert flow.phase == Phase.DASHBOARD

    def test_results_back_to_dashboard(self, question_set, session_answers):
        flow = InterviewFlow()
        flow.configure()
        flow.start_session(question_set)
        flow.finish_session(session_answers)
        flow.view_dashboard()
        assert flow.phase == Phase.DASHBOARD

    def test_cannot_skip_to_results(self, session_answers):
        flow = InterviewFlow()
        with pytest.raises(InvalidTransition):
            flow.finish_session(session_answers)
        assert flow.phase == Phase.DASHBOARD

    def test_cannot_start_session_from_dashboard(self, question_set):
        with pytest.raises(InvalidTransition):
            InterviewFlow().start_session(question_set)

    def test_cannot_leave_running_session(self, question_set):
        flow = InterviewFlow()
        flow.configure()
        flow.start_session(question_set)
        with pytest.raises(InvalidTransition):
            flow.view_dashboard()
        with pytest.raises(InvalidTransition):
            flow.select_role("Chef")

    def test_empty_question_set_rejected(self):
        flow = InterviewFlow()
        flow.configure()
        with pytest.raises(ValueError):
            flow.start_session(GeneratedQuestionSet())
        assert flow.phase == Phase.SETUP


class TestInterviewSession:
    @pytest.fixture
    def session(self, question_set):
        return InterviewSession(question_set, language="es")

    def answer_current(self, session, text, code=None):
        session.start_recording()
        session.append_transcript(text)
        if code is not None:
            session.set_code(code, "python")
        request = session.stop_recording()
        if request is not None:
            session.set_feedback("Nice work")
        return request

    def test_record_and_feedback(self, session):
        assert session.state == AnswerState.IDLE
        session.start_recording()
        assert session.state == AnswerState.RECORDING

        assert session.append_transcript("I resolved it")
        assert session.append_transcript("by talking to both sides.")
        context, answer = session.stop_recording()

        assert session.state == AnswerState.FEEDBACK_PENDING
        assert answer == "I resolved it by talking to both sides."
        assert context == (
            "[BEHAVIORAL] [Question 1/3] Tell me about a time you resolved a conflict in your team."
        )
        assert session.answers[0] == answer

        session.set_feedback("Good story")
        assert session.state == AnswerState.FEEDBACK_SHOWN
        assert session.feedback == "Good story"

    def test_transcript_ignored_unless_recording(self, session):
        assert not session.append_transcript("hello")
        assert session.transcript == ""

    def test_start_recording_clears_previous_attempt(self, session):
        self.answer_current(session, "first try")
        session.start_recording()
        assert session.transcript == ""
        assert session.feedback is None

    def test_no_answer_feedback(self, session):
        session.start_recording()
        assert session.stop_recording() is None
        assert session.feedback == NO_ANSWER_FEEDBACK
        assert session.state == AnswerState.FEEDBACK_SHOWN

    def test_coding_answer_stores_code(self, session):
        session.next_question()
        session.next_question()
        assert session.is_coding

        context, answer = self.answer_current(session, "Iterative approach", code="def f(): pass")
        assert answer == "def f(): pass"
        assert context.startswith("[CODING] [Question 3/3]")
        assert session.code_answers[2] == "def f(): pass"
        assert session.coding_languages[2] == "python"
        assert session.answers[2] == "Iterative approach"

    def test_coding_without_code(self, session):
        session.next_question()
        session.next_question()
        session.start_recording()
        session.append_transcript("I would use two pointers")
        assert session.stop_recording() is None
        assert session.feedback == NO_CODE_FEEDBACK

    def test_next_question_resets_answer_state(self, session):
        self.answer_current(session, "An answer")
        assert session.next_question() is None
        assert session.index == 1
        assert session.state == AnswerState.IDLE
        assert session.feedback is None
        assert session.transcript == ""

    def test_complete_session_returns_answers(self, session):
        self.answer_current(session, "Behavioral answer")
        session.next_question()
        self.answer_current(session, "Technical answer")
        session.next_question()
        self.answer_current(session, "Talking through code", code="return head")
        session.save_note(0, "mention the metrics")

        collected = session.next_question()
        assert session.complete
        assert collected.answers == ["Behavioral answer", "Technical answer", "Talking through code"]
        assert collected.code_answers == ["", "", "return head"]
        assert collected.coding_languages == ["", "", "python"]
        assert collected.notes == ["mention the metrics", "", ""]
        assert collected.types == ["behavioral", "technical", "coding"]

    def test_skipped_questions_stay_empty(self, session):
        session.next_question()
        session.next_question()
        collected = session.next_question()
        assert collected.answers == ["", "", ""]

    @pytest.mark.parametrize("action", ["stop_recording", "set_feedback"])
    def test_illegal_from_idle(self, session, action):
        with pytest.raises(InvalidTransition):
            if action == "set_feedback":
                session.set_feedback("x")
            else:
                session.stop_recording()

    def test_cannot_advance_while_recording(self, session):
        session.start_recording()
        with pytest.raises(InvalidTransition):
            session.next_question()

    def test_cannot_advance_while_feedback_pending(self, session):
        session.start_recording()
        session.append_transcript("answer")
        session.stop_recording()
        with pytest.raises(InvalidTransition):
            session.next_question()
        with pytest.raises(InvalidTransition):
            session.start_recording()

    def test_no_actions_after_completion(self, session):
        for _ in range(3):
            session.next_question()
        with pytest.raises(InvalidTransition):
            session.start_recording()
        with pytest.raises(InvalidTransition):
            session.next_question()
        with pytest.raises(InvalidTransition):
            session.set_code("x")

    def test_save_note_out_of_range(self, session):
        with pytest.raises(IndexError):
            session.save_note(3, "nope")

    def test_progress(self, session):
        assert session.progress == pytest.approx(100 / 3)
        session.next_question()
        assert session.progress == pytest.approx(200 / 3)
