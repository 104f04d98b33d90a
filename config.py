# This file consolidates all hard-coded values for better maintainability

import os

from dotenv import load_dotenv

load_dotenv()

# Logging
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
LOGGER_NAME = "EventExtractor"

# HTTP Configuration
HTTP_TIMEOUT_STANDARD = 15      # Standard timeout for most requests
HTTP_TIMEOUT_LONG = 60          # Long timeout for OCR uploads

# HTTP Connection Pooling and Retry Configuration
HTTP_MAX_RETRIES = 3            # Maximum number of HTTP retries
HTTP_BACKOFF_FACTOR = 0.3       # Backoff factor for retries

# Enhanced User Agent for better request handling
ENHANCED_USER_AGENT = 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36'

DEFAULT_HEADERS = {
    'User-Agent': ENHANCED_USER_AGENT,
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.9',
}

# API keys
OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
FIRECRAWL_API_KEY = os.getenv('FIRECRAWL_API_KEY')
OCR_SPACE_API_KEY = os.getenv('OCR_SPACE_API_KEY', 'helloworld')  # ocr.space public demo key

# OCR Configuration
OCR_SPACE_URL = 'https://api.ocr.space/parse/image'
OCR_LANGUAGE = 'eng'
OCR_MAX_IMAGE_BYTES = 5 * 1024 * 1024

# GPT Processing Configuration
GPT_MODEL_STANDARD = "gpt-4.1-mini"          # Standard GPT model
GPT_TEMPERATURE_STANDARD = 0.1               # Low temperature for consistent extraction
GPT_MAX_TOKENS_STANDARD = 1000               # Standard token limit
GPT_MAX_CONTENT_CHARS = 12000                # Conservative limit for GPT content
TRUNCATED_CONTENT_SUFFIX = "...[CONTENT TRUNCATED]"

# Page reading
MAX_CONTENT_FOR_PARSING = 50000  # Maximum page text kept after scraping

# Event defaults
DEFAULT_EVENT_TITLE = "Untitled Event"
DEFAULT_EVENT_HOUR = 19          # 7:00 PM when a date has no time
DEFAULT_EVENT_MINUTE = 0

# Category-based default times, only used when explicitly enabled
CATEGORY_AWARE_DEFAULT_TIME = os.getenv('CATEGORY_AWARE_DEFAULT_TIME', 'false').lower() in ('1', 'true', 'yes')
CATEGORY_DEFAULT_TIMES = {
    'evening': (19, 0),
    'social': (19, 0),
    'morning': (10, 0),
    'daytime': (10, 0),
    'business': (9, 0),
}
EVENT_CATEGORIES = ['social', 'business', 'entertainment']

# Display Configuration
MAX_DISPLAY_TITLE = 50          # Maximum characters in display titles
MAX_DISPLAY_DESCRIPTION = 200   # Maximum characters in display descriptions
MAX_ERROR_RESPONSE_DISPLAY = 200  # Maximum error response length
BANNER_WIDTH = 80               # Width of banners and separators
SECTION_SEPARATOR_WIDTH = 50    # Width of section separators

# API server
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
