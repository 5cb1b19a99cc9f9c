import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger('config')

CONFIG_DIR = Path(__file__).parent / 'config'
JOB_PROFILES_PATH = CONFIG_DIR / 'job_profiles.yaml'
FALLBACK_QUESTIONS_PATH = CONFIG_DIR / 'fallback_questions.yaml'


class Settings(BaseModel):
    """Runtime settings read from the environment (and .env)."""
    llm_provider: str = Field(default='groq', pattern='^(groq|deepseek)$')
    groq_api_key: Optional[str] = None
    deepseek_api_key: Optional[str] = None
    deepseek_api_url: str = 'https://api.deepseek.com/v1/chat/completions'
    llm_model: Optional[str] = None
    llm_timeout: float = Field(default=30.0, gt=0)
    data_dir: str = '.data'
    log_dir: Optional[str] = None
    log_level: str = 'INFO'
    default_language: str = 'en'

    @property
    def api_key(self) -> Optional[str]:
        if self.llm_provider == 'deepseek':
            return self.deepseek_api_key
        return self.groq_api_key


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Load settings, letting real environment variables win over .env."""
    load_dotenv(env_file)
    return Settings(
        llm_provider=os.getenv('LLM_PROVIDER', 'groq').lower(),
        groq_api_key=os.getenv('GROQ_API_KEY'),
        deepseek_api_key=os.getenv('DEEPSEEK_API_KEY'),
        deepseek_api_url=os.getenv('DEEPSEEK_API_URL', 'https://api.deepseek.com/v1/chat/completions'),
        llm_model=os.getenv('LLM_MODEL'),
        llm_timeout=float(os.getenv('LLM_TIMEOUT', '30')),
        data_dir=os.getenv('DATA_DIR', '.data'),
        log_dir=os.getenv('LOG_DIR'),
        log_level=os.getenv('LOG_LEVEL', 'INFO'),
        default_language=os.getenv('DEFAULT_LANGUAGE', 'en'),
    )


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML document, returning {} when it is missing or unreadable."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except Exception as e:
        logger.error(f"Error loading YAML config {path}: {str(e)}")
        return {}
