import logging
import os
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

DEFAULT_LOGS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'logs')

# Libraries that log every HTTP call or PDF object at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "groq", "pdfminer", "PIL")


def log_file_path(logs_dir: str) -> str:
    return os.path.join(logs_dir, f'interview_coach_{datetime.now().strftime("%Y%m%d")}.log')


def setup_logging(logs_dir: Optional[str] = None, level: str = 'INFO') -> logging.Logger:
    """Route every component logger to a rotating daily file and the console.

    Safe to call on each Streamlit rerun: existing root handlers are replaced.
    """
    logs_dir = logs_dir or DEFAULT_LOGS_DIR
    os.makedirs(logs_dir, exist_ok=True)
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(log_level)
    logger.handlers.clear()

    file_handler = RotatingFileHandler(
        log_file_path(logs_dir),
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    file_handler.setLevel(log_level)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter('%(levelname)s: [%(name)s] %(message)s'))
    console_handler.setLevel(max(log_level, logging.INFO))
    logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
