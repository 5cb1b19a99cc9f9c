import json
import logging
import random
import re
import time
import traceback
from typing import Dict, Iterable, List, Optional

import requests
from groq import Groq

from .config import Settings, load_settings
from .fallback_questions import generate_fallback_questions
from .schemas import GeneratedQuestionSet

logger = logging.getLogger('llm_service')

DEFAULT_MODELS = {
    'groq': "llama-3.3-70b-versatile",
    'deepseek': "deepseek-chat",
}

LANGUAGES = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "zh": "Chinese",
    "ja": "Japanese",
    "hi": "Hindi",
    "ar": "Arabic",
    "pt": "Portuguese",
    "ru": "Russian",
}

QUESTION_SYSTEM_PROMPT = (
    "You are an expert interviewer who creates high-quality interview questions for job candidates."
)
FEEDBACK_SYSTEM_PROMPT = (
    "You are an expert interview coach who provides helpful, constructive feedback on interview responses."
)

FALLBACK_FEEDBACK = [
    "Your answer addressed the question, but could benefit from more specific examples. Consider using "
    "the STAR method (Situation, Task, Action, Result) to structure your response more effectively.",
    "You made some good points in your answer. To strengthen it further, try quantifying your "
    "achievements with specific metrics or results where possible.",
    "Your response shows your experience, but could be more concise. Try focusing on the most relevant "
    "aspects of your experience that directly answer the question.",
    "You demonstrated good technical knowledge. To improve, consider explaining how your technical "
    "skills translated to business impact or team success.",
    "Your answer was thoughtful, but could benefit from better structure. Start with a brief overview, "
    "then provide details, and end with a concise summary of your main point.",
]

DEFAULT_CATEGORIES = ["behavioral", "technical", "coding"]


class LLMServiceError(RuntimeError):
    """Raised by the provider layer when a text-generation call fails."""

    def __init__(self, message: str, category: str = "other"):
        super().__init__(message)
        self.category = category


def get_language_name(code: Optional[str]) -> str:
    return LANGUAGES.get(code or "", "English")


def handle_api_error(error: Exception, service: str) -> LLMServiceError:
    """Classify a provider failure and wrap it for the caller to raise."""
    error_msg = str(error)
    lowered = error_msg.lower()
    if "rate limit" in lowered or "429" in lowered:
        logger.error(f"{service} API rate limit exceeded")
        return LLMServiceError(f"{service} rate limit exceeded. Please try again later.", "rate_limit")
    elif "invalid api key" in lowered or "401" in lowered or "unauthorized" in lowered:
        logger.error(f"Invalid {service} API key")
        return LLMServiceError(f"Invalid {service} API key. Please check your configuration.", "invalid_key")
    elif "timeout" in lowered or "timed out" in lowered:
        logger.error(f"{service} API request timed out")
        return LLMServiceError(f"{service} request timed out. Please try again.", "timeout")
    else:
        logger.error(f"Unexpected {service} API error: {error_msg}")
        logger.debug(f"API error details: {traceback.format_exc()}")
        return LLMServiceError(f"Unexpected error with {service} API: {error_msg}")


def clean_json_string(content: str) -> str:
    """Strip markdown fences and trailing commas from a model reply."""
    if '```' in content:
        matches = re.findall(r'```(?:json)?(.*?)```', content, re.DOTALL)
        if matches:
            content = matches[0]
    content = content.strip()
    return re.sub(r',(\s*[}\]])', r'\1', content)


class InterviewLLM:
    """Question generation and answer feedback through a hosted model.

    Every public method degrades to the local generators: no provider error
    ever reaches the caller. Calls are single attempts.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        api_key: Optional[str] = None,
        rng: Optional[random.Random] = None
    ):
        self.settings = settings or load_settings()
        self.provider = self.settings.llm_provider
        self.api_key = api_key or self.settings.api_key
        self.model = self.settings.llm_model or DEFAULT_MODELS[self.provider]
        self.timeout = self.settings.llm_timeout
        self.rng = rng or random.Random()
        self.groq_client = None

        if not self.api_key:
            logger.warning(f"No API key configured for {self.provider} - using offline fallbacks")

    def initialize_client(self) -> None:
        """Create the Groq client on first use."""
        try:
            self.groq_client = Groq(api_key=self.api_key, timeout=self.timeout)
            logger.info("Successfully initialized Groq client")
        except Exception as e:
            logger.error(f"Failed to initialize Groq client: {str(e)}")
            raise LLMServiceError("Failed to initialize Groq client") from e

    def execute_request(self, messages: List[Dict[str, str]], json_mode: bool = False) -> str:
        """Send one chat completion and return the reply text."""
        if not self.api_key:
            raise LLMServiceError(f"{self.provider} API key not found", "invalid_key")

        if self.provider == 'groq':
            return self._groq_request(messages, json_mode)
        return self._deepseek_request(messages, json_mode)

    def _groq_request(self, messages: List[Dict[str, str]], json_mode: bool) -> str:
        if not self.groq_client:
            self.initialize_client()

        kwargs = {}
        if json_mode:
            kwargs['response_format'] = {"type": "json_object"}

        try:
            response = self.groq_client.chat.completions.create(
                messages=messages,
                model=self.model,
                temperature=0.9,
                max_tokens=2000,
                **kwargs
            )
            return response.choices[0].message.content
        except Exception as e:
            raise handle_api_error(e, "Groq") from e

    def _deepseek_request(self, messages: List[Dict[str, str]], json_mode: bool) -> str:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }
        data = {
            "model": self.model,
            "messages": messages,
            "response_format": {"type": "json_object" if json_mode else "text"},
        }

        try:
            response = requests.post(
                self.settings.deepseek_api_url,
                headers=headers,
                json=data,
                timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()["choices"][0]["message"]["content"]
        except requests.exceptions.RequestException as e:
            raise handle_api_error(e, "DeepSeek") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise LLMServiceError(f"Malformed DeepSeek response: {str(e)}", "malformed") from e

    def _seed_tag(self) -> str:
        return f"{self.rng.randint(0, 9999)}-{int(time.time() * 1000)}"

    def build_question_prompt(
        self,
        role: str,
        difficulty: int,
        count: int,
        categories: List[str],
        resume_text: Optional[str] = None,
        industry: Optional[str] = None,
        language: str = "en"
    ) -> str:
        language_instructions = (
            f"Generate all questions in {get_language_name(language)} language. "
            if language != "en" else ""
        )
        industry_text = f" in the {industry} industry" if industry else ""
        category_list = ", ".join(categories)

        prompt = (
            f"[Seed: {self._seed_tag()}] {language_instructions}"
            f"Generate {count} COMPLETELY UNIQUE and DIVERSE interview questions for a {role} role"
            f"{industry_text}. The difficulty level is {difficulty}/5. "
            f"Include questions from the following categories: {category_list}.\n\n"
            f"IMPORTANT: Each question MUST be different from standard interview questions. Be creative "
            f"and specific to the {role} role. DO NOT use generic questions that appear in typical "
            f"interview guides.\n\n"
            f"If coding questions are included, provide clear Data Structures and Algorithms problems with "
            f"specific requirements. For technical questions, make them relevant to the {role} role.\n\n"
            f"Ensure questions are varied, randomized, and not repetitive. For each question, specify the "
            f"type as one of: {category_list}. Return exactly {count} questions total as a JSON object "
            f'with two arrays: "questions" and "types".'
        )

        if resume_text:
            prompt += (
                f"\n\nHere is the candidate's resume:\n{resume_text}\n\n"
                "Generate questions that are specifically tailored to the candidate's experience, skills, "
                "and background. Ask about specific projects, technologies, and achievements mentioned "
                "in the resume."
            )
        return prompt

    def build_feedback_prompt(self, question_context: str, answer: str, language: str = "en") -> str:
        language_instructions = (
            f"Provide feedback in {get_language_name(language)} language. "
            if language != "en" else ""
        )
        return (
            f"[Analysis ID: {self._seed_tag()}]\n\n"
            f"Question: {question_context}\n\n"
            f"Answer: {answer}\n\n"
            f"{language_instructions}Analyze this specific answer in detail and provide personalized "
            "constructive feedback. Your analysis should include:\n\n"
            "1. Specific strengths of this particular answer (with examples from their response)\n"
            "2. Areas for improvement unique to this answer (with specific suggestions)\n"
            "3. Content relevance assessment (how well did they address the specific question)\n"
            "4. Structure and clarity evaluation\n"
            "5. Delivery suggestions\n\n"
            "Avoid generic feedback. Focus on what makes THIS answer unique and provide tailored "
            "recommendations."
        )

    def parse_question_set(self, content: str, categories: Optional[List[str]] = None) -> GeneratedQuestionSet:
        """Turn a JSON reply into a question set.

        Entries may be plain strings or {"question", "type"} objects. Types
        outside the requested categories map to the first requested one.
        Any other shape raises ValueError.
        """
        parsed = json.loads(clean_json_string(content or ""))
        if not isinstance(parsed, dict):
            raise ValueError("Question reply is not a JSON object")

        entries = parsed["questions"]
        if not isinstance(entries, list) or not entries:
            raise ValueError("Question reply contains no questions")

        reply_types = parsed.get("types")
        if not isinstance(reply_types, list):
            reply_types = []

        allowed = [c.strip().lower() for c in categories or []]
        default_type = allowed[0] if allowed else "behavioral"

        questions, types = [], []
        for i, entry in enumerate(entries):
            question_type = reply_types[i] if i < len(reply_types) else None
            if isinstance(entry, dict):
                question_type = entry.get("type", question_type)
                entry = entry.get("question")
            if not isinstance(entry, str) or not entry.strip():
                raise ValueError(f"Unusable question entry at position {i}")

            question_type = question_type.strip().lower() if isinstance(question_type, str) else ""
            if not question_type or (allowed and question_type not in allowed):
                question_type = default_type

            questions.append(entry.strip())
            types.append(question_type)

        return GeneratedQuestionSet(questions=questions, types=types)

    def generate_questions(
        self,
        role: str,
        difficulty: int = 3,
        count: int = 5,
        categories: Optional[Iterable[str]] = None,
        resume_text: Optional[str] = None,
        industry: Optional[str] = None,
        language: str = "en"
    ) -> GeneratedQuestionSet:
        categories = list(categories or DEFAULT_CATEGORIES)
        messages = [
            {"role": "system", "content": QUESTION_SYSTEM_PROMPT},
            {"role": "user", "content": self.build_question_prompt(
                role, difficulty, count, categories, resume_text, industry, language
            )},
        ]

        try:
            content = self.execute_request(messages, json_mode=True)
            question_set = self.parse_question_set(content, categories)
            logger.info(f"Generated {len(question_set)} questions for '{role}' via {self.provider}")
            return question_set
        except LLMServiceError as e:
            logger.error(f"Question generation failed: {str(e)}")
        except (KeyError, ValueError) as e:
            logger.error(f"Could not parse generated questions: {str(e)}")

        logger.info("Falling back to offline question bank")
        return generate_fallback_questions(role, categories, count, self.rng)

    def generate_feedback(self, question_context: str, answer: str, language: str = "en") -> str:
        messages = [
            {"role": "system", "content": FEEDBACK_SYSTEM_PROMPT},
            {"role": "user", "content": self.build_feedback_prompt(question_context, answer, language)},
        ]

        try:
            content = self.execute_request(messages)
            if content and content.strip():
                return content.strip()
            logger.warning("Empty feedback reply, using canned feedback")
        except LLMServiceError as e:
            logger.error(f"Feedback generation failed: {str(e)}")

        return self.rng.choice(FALLBACK_FEEDBACK)
