import streamlit as st
import logging
import random
from datetime import datetime, timedelta

from interview_coach.config import load_settings
from interview_coach.logging_config import setup_logging

# Set page config (must be the first Streamlit command)
st.set_page_config(
    page_title="AI Interview Coach",
    page_icon="🎤",
    layout="centered",
    initial_sidebar_state="expanded"
)

st.markdown("""
    <style>
        .block-container {
            max-width: 1100px;
            padding-top: 1rem;
            padding-bottom: 1rem;
        }
        .stButton > button {
            width: 100%;
        }
        .stAlert {
            padding: 0.8rem;
            margin: 0.8rem 0;
        }
    </style>
""", unsafe_allow_html=True)

from interview_coach.email_service import EmailService
from interview_coach.extractor import ResumeExtractor
from interview_coach.fallback_questions import get_fallback_generator
from interview_coach.llm import LANGUAGES, InterviewLLM
from interview_coach.question_selector import get_selector, select_questions
from interview_coach.report_generator import ReportGenerator
from interview_coach.results import compile_session, recommendation_for, to_result_record
from interview_coach.schemas import ScheduledInterview, SessionConfig, UserProfile
from interview_coach.session import AnswerState, InterviewFlow, InvalidTransition, Phase
from interview_coach.store import InterviewRepository, PreferenceStore, RowStore

settings = load_settings()
setup_logging(settings.log_dir, settings.log_level)
logger = logging.getLogger('app')

LOCAL_USER_ID = "local-user"
CODING_LANGUAGES = ["javascript", "python", "java", "c++", "go", "typescript"]


@st.cache_resource
def get_repository() -> InterviewRepository:
    return InterviewRepository(RowStore(settings.data_dir))


@st.cache_resource
def get_preferences() -> PreferenceStore:
    return PreferenceStore(f"{settings.data_dir}/preferences.json")


repository = get_repository()
preferences = get_preferences()
resume_extractor = ResumeExtractor()
report_generator = ReportGenerator()


def init_state():
    if "flow" not in st.session_state:
        st.session_state.flow = InterviewFlow()
    if "config" not in st.session_state:
        st.session_state.config = None
    if "compiled" not in st.session_state:
        st.session_state.compiled = None
    if "result_id" not in st.session_state:
        st.session_state.result_id = None


def get_llm() -> InterviewLLM:
    api_key = preferences.get(PreferenceStore.API_KEY)
    return InterviewLLM(settings, api_key=api_key)


def header(subtitle: str):
    st.markdown(
        f"""
        <div style='text-align: center; padding: 1rem; margin-bottom: 1.5rem;
             background: linear-gradient(135deg, #1a237e 0%, #0d47a1 100%);
             border-radius: 10px;'>
            <div style='font-size: 2.4em; color: white;'>🎤 AI Interview Coach</div>
            <div style='font-size: 1.1em; color: #e3f2fd;'>{subtitle}</div>
        </div>
        """,
        unsafe_allow_html=True
    )


def sidebar():
    st.sidebar.title("Settings")

    saved_key = preferences.get(PreferenceStore.API_KEY, "")
    api_key = st.sidebar.text_input(
        "API key",
        value=saved_key,
        type="password",
        help=f"Key for the {settings.llm_provider} text-generation service. Leave empty to use offline questions."
    )
    if api_key != saved_key:
        preferences.set(PreferenceStore.API_KEY, api_key)

    codes = list(LANGUAGES.keys())
    saved_language = preferences.get(PreferenceStore.LANGUAGE, settings.default_language)
    language = st.sidebar.selectbox(
        "Interview language",
        options=codes,
        index=codes.index(saved_language) if saved_language in codes else 0,
        format_func=lambda code: LANGUAGES[code]
    )
    if language != saved_language:
        preferences.set(PreferenceStore.LANGUAGE, language)

    with st.sidebar.expander("Email notifications"):
        profile = repository.get_profile(LOCAL_USER_ID)
        email = st.text_input("Email", value=profile.email if profile else "")
        full_name = st.text_input("Name", value=profile.full_name if profile else "")
        notify = st.checkbox("Send me emails", value=profile.email_notifications if profile else True)
        if st.button("Save profile") and email:
            repository.upsert_profile(UserProfile(
                user_id=LOCAL_USER_ID,
                email=email,
                full_name=full_name,
                email_notifications=notify
            ))
            st.success("Profile saved")


def dashboard_page():
    flow: InterviewFlow = st.session_state.flow
    header("Practice interviews with instant feedback")

    roles = [role.title() for role in get_selector().profiles]
    col1, col2 = st.columns([1, 1])
    with col1:
        st.markdown("### 🎯 Choose a role")
        role = st.selectbox("Role", options=roles + ["Other"])
        if role == "Other":
            role = st.text_input("Custom role", placeholder="e.g. Site Reliability Engineer")
        if st.button("Configure interview", type="primary") and role:
            flow.select_role(role)
            flow.configure()
            st.rerun()

    with col2:
        st.markdown("### 📅 Schedule a session")
        title = st.text_input("Title", value="Mock interview")
        day = st.date_input("Date", value=datetime.now().date() + timedelta(days=1))
        at = st.time_input("Time", value=datetime.now().replace(minute=0, second=0, microsecond=0).time())
        duration = st.number_input("Duration (minutes)", min_value=15, max_value=180, value=30, step=15)
        if st.button("Schedule"):
            interview_id = repository.schedule_interview(ScheduledInterview(
                user_id=LOCAL_USER_ID,
                title=title,
                scheduled_at=datetime.combine(day, at).isoformat(),
                duration_minutes=int(duration)
            ))
            if EmailService(repository).send_interview_reminder(LOCAL_USER_ID, interview_id):
                st.success("Interview scheduled, reminder sent")
            else:
                st.info("Interview scheduled. Add an email in the sidebar to receive reminders.")

    st.markdown("### 🕘 History")
    history = repository.get_history(LOCAL_USER_ID)
    if not history:
        st.info("No completed interviews yet.")
    for row in history[:10]:
        completed = (row.get('completed_at') or '')[:16].replace('T', ' ')
        st.write(f"**{(row.get('role') or 'Interview').title()}** · {completed} · score {row.get('overall_score', 0)}%")


def setup_page():
    flow: InterviewFlow = st.session_state.flow
    header(f"Set up your {flow.role} interview")

    categories = list(get_fallback_generator().bank.keys()) or ["behavioral", "technical", "coding"]
    default_categories = [c for c in ("behavioral", "technical", "coding") if c in categories]

    role = st.text_input("Role", value=flow.role)
    industry = st.text_input("Industry (optional)")
    difficulty = st.slider("Difficulty", min_value=1, max_value=5, value=3)
    count = st.number_input("Number of questions", min_value=1, max_value=15, value=5)
    selected = st.multiselect("Question categories", options=categories, default=default_categories)
    resume = st.file_uploader("Resume (optional)", type=["pdf", "docx", "txt"])
    language = preferences.get(PreferenceStore.LANGUAGE, settings.default_language)

    col1, col2 = st.columns(2)
    with col1:
        if st.button("⬅️ Back"):
            flow.view_dashboard()
            st.rerun()
    with col2:
        start = st.button("Start interview", type="primary")

    if not start:
        return

    if not role.strip():
        st.error("Please enter a role")
        return

    resume_text = None
    if resume is not None:
        try:
            resume_text = resume_extractor.extract_text(resume.getvalue(), resume.name)
        except ValueError as e:
            st.error(str(e))
            return
        if resume_text is None:
            st.warning("Could not read the resume, continuing without it")

    with st.spinner("Preparing your questions..."):
        if preferences.get(PreferenceStore.API_KEY) or settings.api_key:
            question_set = get_llm().generate_questions(
                role, difficulty, int(count), selected, resume_text, industry or None, language
            )
        else:
            question_set = select_questions(role, int(count), selected, random.Random())

    config = SessionConfig(
        user_id=LOCAL_USER_ID,
        role=role,
        industry=industry or None,
        difficulty=difficulty,
        question_count=int(count),
        categories=selected,
        language=language
    )
    session_id = repository.save_session_config(config)
    st.session_state.config = (session_id, config)

    flow.select_role(role)
    flow.start_session(question_set, language)
    st.rerun()


def session_page():
    flow: InterviewFlow = st.session_state.flow
    session = flow.session

    st.progress(session.progress / 100, text=f"Question {session.index + 1} of {len(session.questions)}")
    st.markdown(f"**{session.current_type.title()} question**")
    st.markdown(f"### {session.current_question}")

    if session.is_coding:
        language = st.selectbox("Language", CODING_LANGUAGES, key=f"lang_{session.index}")
        code = st.text_area("Code editor", height=250, key=f"code_{session.index}")
        session.set_code(code, language)

    if session.state in (AnswerState.IDLE, AnswerState.FEEDBACK_SHOWN):
        if st.button("🎙️ Start answer"):
            session.start_recording()
            st.rerun()

    if session.state == AnswerState.RECORDING:
        transcript = st.text_area("Your answer", height=200, key=f"answer_{session.index}")
        if st.button("⏹️ Stop and get feedback", type="primary"):
            session.append_transcript(transcript)
            request = session.stop_recording()
            if request is not None:
                with st.spinner("Analyzing your answer..."):
                    feedback = get_llm().generate_feedback(request[0], request[1], session.language)
                session.set_feedback(feedback)
            st.rerun()

    if session.feedback:
        st.info(session.feedback)

    note = st.text_input("Notes", value=session.notes[session.index], key=f"note_{session.index}")
    if note != session.notes[session.index]:
        session.save_note(session.index, note)

    label = "Finish interview" if session.is_last else "Next question ➡️"
    if st.button(label, disabled=session.state in (AnswerState.RECORDING, AnswerState.FEEDBACK_PENDING)):
        try:
            answers = session.next_question()
        except InvalidTransition as e:
            st.error(str(e))
            return
        if answers is not None:
            flow.finish_session(answers)
            st.session_state.compiled = None
            st.session_state.result_id = None
        st.rerun()


def save_results():
    flow: InterviewFlow = st.session_state.flow
    compiled = compile_session(flow.answers)
    session_id, config = st.session_state.config or (None, None)
    record = to_result_record(
        LOCAL_USER_ID,
        flow.answers,
        compiled,
        role=config.role if config else flow.role,
        session_id=session_id
    )
    st.session_state.compiled = (compiled, record)
    st.session_state.result_id = repository.save_result(record)
    if session_id:
        repository.update_session_status(session_id, "completed")


def results_page():
    flow: InterviewFlow = st.session_state.flow
    if st.session_state.compiled is None:
        save_results()
    compiled, record = st.session_state.compiled

    header("Your interview results")

    col1, col2 = st.columns([1, 2])
    with col1:
        st.metric("Overall score", f"{compiled.overall_score}%")
    with col2:
        for name, value in compiled.metrics.items():
            st.progress(value / 100, text=f"{name.title()}: {value}%")

    summary_tab, details_tab, personality_tab = st.tabs(["Summary", "Answers", "Personality"])

    with summary_tab:
        answered = len(compiled.detailed_analysis)
        st.write(f"You answered {answered} of {len(record.questions)} questions.")
        st.write(recommendation_for(compiled.overall_score))

    with details_tab:
        for i, analysis in enumerate(compiled.detailed_analysis, 1):
            with st.expander(f"Q{i}: {analysis.question}"):
                metrics = analysis.metrics
                st.write(
                    f"Clarity {metrics.clarity}% · Structure {metrics.structure}% · "
                    f"Depth {metrics.depth}% · Relevance {metrics.relevance}%"
                )
                st.caption(f"Words: {metrics.word_count} · Sentences: {metrics.sentence_count}")
                for strength in analysis.strengths:
                    st.markdown(f"✅ {strength}")
                for improvement in analysis.improvements:
                    st.markdown(f"💡 {improvement}")
                if analysis.keywords:
                    st.caption("Keywords: " + ", ".join(analysis.keywords))
                st.write(recommendation_for(metrics.clarity))

    with personality_tab:
        personality = compiled.personality
        st.write(personality.summary)
        for trait in personality.traits:
            st.progress(trait.score / 100, text=f"{trait.name}: {trait.score}%")
        st.markdown("#### Interview tips")
        for tip in personality.interview_tips:
            st.markdown(f"- {tip}")

    profile = repository.get_profile(LOCAL_USER_ID)
    pdf = report_generator.generate_report(
        record, compiled.personality, profile.full_name if profile else None
    )
    st.download_button(
        "📄 Download report",
        data=pdf,
        file_name=f"interview-analysis-{datetime.now().strftime('%Y-%m-%d')}.pdf",
        mime="application/pdf"
    )
    if st.button("✉️ Email results"):
        if EmailService(repository).send_interview_results(LOCAL_USER_ID, st.session_state.result_id):
            st.success("Results have been sent to your email")
        else:
            st.warning("Could not send results. Check your email settings in the sidebar.")

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Start new interview", type="primary"):
            flow.start_new()
            st.rerun()
    with col2:
        if st.button("Back to dashboard"):
            flow.view_dashboard()
            st.rerun()


def main():
    """Main application entry point"""
    init_state()
    sidebar()

    pages = {
        Phase.DASHBOARD: dashboard_page,
        Phase.SETUP: setup_page,
        Phase.SESSION: session_page,
        Phase.RESULTS: results_page,
    }
    pages[st.session_state.flow.phase]()


if __name__ == "__main__":
    main()
