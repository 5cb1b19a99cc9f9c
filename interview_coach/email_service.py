import html
import logging
from datetime import datetime
from typing import Callable, Optional

from .config import load_settings
from .schemas import EmailMessage, UserProfile
from .store import INTERVIEW_SESSIONS, InterviewRepository, RowStore

logger = logging.getLogger('email_service')

SIGNATURE = "AI Interview Coach Team"

REMINDER_TEMPLATE = """
<html>
  <body>
    <h2>Interview Reminder</h2>
    <p>Hello {name},</p>
    <p>This is a reminder about your upcoming interview session:</p>
    <ul>
      <li><strong>Title:</strong> {title}</li>
      <li><strong>Date:</strong> {date}</li>
      <li><strong>Time:</strong> {time}</li>
      <li><strong>Duration:</strong> {duration} minutes</li>
    </ul>
    <p>Please make sure you're prepared and in a quiet environment for your session.</p>
    <p>Good luck!</p>
    <p>{signature}</p>
  </body>
</html>
"""

RESULTS_TEMPLATE = """
<html>
  <body>
    <h2>Interview Results</h2>
    <p>Hello {name},</p>
    <p>Your recent interview session has been analyzed. Here's a summary of your performance:</p>
    <div style="background-color: #f5f5f5; padding: 15px; border-radius: 5px;">
      <p><strong>Overall Score:</strong> {score}%</p>
      <p><strong>Questions Answered:</strong> {question_count}</p>
      <p><strong>Completed:</strong> {completed}</p>
    </div>
    <p>For a detailed analysis, please log in to your account and view the full report.</p>
    <p>Keep practicing to improve your interview skills!</p>
    <p>{signature}</p>
  </body>
</html>
"""


def log_transport(message: EmailMessage) -> None:
    """Default transport: record the message instead of delivering it."""
    logger.info(f"Sending email to {message.to}: {message.subject}")
    logger.debug(message.body)


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(value) if value else None
    except ValueError:
        logger.warning(f"Unparseable timestamp '{value}'")
        return None


class EmailService:
    """Builds reminder and result emails from stored rows and hands them to a transport."""

    def __init__(
        self,
        repository: InterviewRepository,
        transport: Callable[[EmailMessage], None] = log_transport
    ):
        self.repository = repository
        self.transport = transport

    def _recipient(self, user_id: str) -> Optional[UserProfile]:
        profile = self.repository.get_profile(user_id)
        if profile is None:
            logger.error(f"No profile found for user {user_id}")
            return None
        if not profile.email_notifications:
            logger.info(f"Email notifications disabled for user {user_id}")
            return None
        return profile

    def _deliver(self, message: EmailMessage) -> bool:
        try:
            self.transport(message)
            return True
        except Exception as e:
            logger.error(f"Email transport failed for {message.to}: {str(e)}")
            return False

    def send_interview_reminder(self, user_id: str, interview_id: str) -> bool:
        profile = self._recipient(user_id)
        if profile is None:
            return False

        interview = self.repository.get_scheduled_interview(interview_id)
        if interview is None:
            logger.error(f"Scheduled interview {interview_id} not found")
            return False

        scheduled = _parse_timestamp(interview.get('scheduled_at'))
        title = interview.get('title', '')
        body = REMINDER_TEMPLATE.format(
            name=html.escape(profile.full_name),
            title=html.escape(title),
            date=scheduled.strftime('%Y-%m-%d') if scheduled else interview.get('scheduled_at', ''),
            time=scheduled.strftime('%H:%M') if scheduled else '',
            duration=interview.get('duration_minutes', ''),
            signature=SIGNATURE,
        )
        message = EmailMessage(
            to=profile.email,
            subject=f"Reminder: Your Interview Session - {title}",
            body=body,
        )

        if not self._deliver(message):
            return False
        return self.repository.mark_reminder_sent(interview_id)

    def send_interview_results(self, user_id: str, result_id: str) -> bool:
        profile = self._recipient(user_id)
        if profile is None:
            return False

        result = self.repository.get_result(result_id)
        if result is None:
            logger.error(f"Interview result {result_id} not found")
            return False

        role = result.get('role') or self._session_role(result.get('session_id'))
        completed = _parse_timestamp(result.get('completed_at'))
        body = RESULTS_TEMPLATE.format(
            name=html.escape(profile.full_name),
            score=result.get('overall_score', 0),
            question_count=len(result.get('questions') or []),
            completed=completed.strftime('%Y-%m-%d %H:%M') if completed else '',
            signature=SIGNATURE,
        )
        message = EmailMessage(
            to=profile.email,
            subject=f"Your Interview Results - {role or 'Interview'} Analysis",
            body=body,
        )

        if not self._deliver(message):
            return False
        return self.repository.mark_result_emailed(result_id)

    def _session_role(self, session_id: Optional[str]) -> Optional[str]:
        if not session_id:
            return None
        rows = self.repository.store.select(INTERVIEW_SESSIONS, id=session_id)
        return rows[0].get('role') if rows else None


def _default_service() -> EmailService:
    settings = load_settings()
    return EmailService(InterviewRepository(RowStore(settings.data_dir)))


def send_interview_reminder(user_id: str, interview_id: str, service: Optional[EmailService] = None) -> bool:
    return (service or _default_service()).send_interview_reminder(user_id, interview_id)


def send_interview_results(user_id: str, result_id: str, service: Optional[EmailService] = None) -> bool:
    return (service or _default_service()).send_interview_results(user_id, result_id)
