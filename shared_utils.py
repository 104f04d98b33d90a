import json
import logging
from datetime import datetime
from dataclasses import dataclass, field, fields
from typing import List, Dict, Any, Optional
from functools import wraps

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from openai import OpenAI
from firecrawl import FirecrawlApp

from config import (
    LOG_LEVEL, LOGGER_NAME, HTTP_MAX_RETRIES, HTTP_BACKOFF_FACTOR,
    HTTP_TIMEOUT_STANDARD, DEFAULT_HEADERS, OPENAI_API_KEY, FIRECRAWL_API_KEY,
    GPT_MAX_CONTENT_CHARS, TRUNCATED_CONTENT_SUFFIX
)


# Unified Logger with context
class Logger:
    def __init__(self):
        logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO),
                            format='%(asctime)s - %(levelname)s - %(message)s')
        self.logger = logging.getLogger(LOGGER_NAME)

    def log(self, level: str, msg: str, **ctx):
        context = " | ".join(f"{k}={v}" for k, v in ctx.items()) if ctx else ""
        message = f"{msg} | {context}" if context else msg
        getattr(self.logger, level.lower())(message)

# Global instances
logger = Logger()


class ExtractionError(Exception):
    """Raised when an upstream extraction step cannot produce usable output."""


class OCRError(ExtractionError):
    """The OCR service failed or returned no text."""


class PageReadError(ExtractionError):
    """A web page could not be fetched or had no readable text."""


class StructuringError(ExtractionError):
    """The language model response could not be turned into event fields."""


# Performance monitoring decorator
def performance_monitor(func):
    """Log how long a pipeline step takes."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = datetime.now()
        try:
            result = func(*args, **kwargs)
            duration = (datetime.now() - start_time).total_seconds()
            logger.log("debug", f"{func.__name__} completed", seconds=f"{duration:.2f}")
            return result
        except Exception as e:
            duration = (datetime.now() - start_time).total_seconds()
            logger.log("warning", f"{func.__name__} failed", seconds=f"{duration:.2f}", error=str(e))
            raise
    return wrapper

# Enhanced Singleton metaclass
class Singleton(type):
    _instances = {}
    def __call__(cls, *args, **kwargs):
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]

# HTTP client with connection pooling and retries
class HTTPClient(metaclass=Singleton):
    def __init__(self):
        self.session = self._create_session()

    def _create_session(self):
        session = requests.Session()
        retry = Retry(total=HTTP_MAX_RETRIES, backoff_factor=HTTP_BACKOFF_FACTOR,
                      status_forcelist=[429, 500, 502, 503, 504],
                      allowed_methods=None)
        session.mount("http://", HTTPAdapter(max_retries=retry))
        session.mount("https://", HTTPAdapter(max_retries=retry))
        session.headers.update(DEFAULT_HEADERS)
        return session

    def get(self, url: str, **kwargs) -> requests.Response:
        kwargs.setdefault('timeout', HTTP_TIMEOUT_STANDARD)
        return self.session.get(url, **kwargs)

    def post(self, url: str, **kwargs) -> requests.Response:
        kwargs.setdefault('timeout', HTTP_TIMEOUT_STANDARD)
        return self.session.post(url, **kwargs)

# External service clients
class ServiceClients(metaclass=Singleton):
    def __init__(self):
        self.openai = self._init_openai()
        self.firecrawl = self._init_firecrawl()

    def _init_openai(self):
        try:
            return OpenAI(api_key=OPENAI_API_KEY) if OPENAI_API_KEY else None
        except Exception as e:
            logger.log("error", "OpenAI init failed", error=str(e))
            return None

    def _init_firecrawl(self):
        try:
            return FirecrawlApp(api_key=FIRECRAWL_API_KEY) if FIRECRAWL_API_KEY else None
        except Exception as e:
            logger.log("error", "Firecrawl init failed", error=str(e))
            return None


@dataclass
class ExtractedEvent:
    """Provisional event fields as returned by the language model."""
    title: Optional[str] = None
    dates: List[str] = field(default_factory=list)
    location: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    raw_text: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExtractedEvent':
        """Create ExtractedEvent from dictionary, handling unexpected fields gracefully."""
        field_names = {f.name for f in fields(cls)}

        known_fields = {k: v for k, v in data.items() if k in field_names}
        unknown_fields = {k: v for k, v in data.items() if k not in field_names}

        # Models sometimes return a single string instead of a list
        dates = known_fields.get('dates')
        if isinstance(dates, str):
            known_fields['dates'] = [dates]
        elif isinstance(dates, list):
            known_fields['dates'] = [str(d) for d in dates if d]
        else:
            known_fields['dates'] = [str(dates)] if dates else []

        event = cls(**known_fields)

        if unknown_fields:
            event.metadata.update(unknown_fields)

        return event


def truncate_content(content: str, max_chars: int = GPT_MAX_CONTENT_CHARS) -> str:
    """Trim text sent to the language model."""
    if len(content) <= max_chars:
        return content
    return content[:max_chars] + TRUNCATED_CONTENT_SUFFIX


def parse_json_response(response_text: str) -> Dict[str, Any]:
    """
    Parse a JSON object out of a model response.

    Args:
        response_text: Raw model output, possibly wrapped in markdown fences

    Returns:
        Parsed dictionary

    Raises:
        StructuringError: if the text is not a JSON object
    """
    cleaned_response = (response_text or '').strip()
    if cleaned_response.startswith('```json'):
        cleaned_response = cleaned_response[7:]
    if cleaned_response.startswith('```'):
        cleaned_response = cleaned_response[3:]
    if cleaned_response.endswith('```'):
        cleaned_response = cleaned_response[:-3]
    cleaned_response = cleaned_response.strip()

    try:
        result = json.loads(cleaned_response)
    except json.JSONDecodeError as e:
        raise StructuringError(f"Invalid JSON from model: {e}") from e

    if not isinstance(result, dict):
        raise StructuringError("Model response is not a JSON object")

    return result
