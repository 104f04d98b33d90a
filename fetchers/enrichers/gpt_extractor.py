"""
GPT Extractor - Turns raw event text into provisional event fields.
"""

from typing import Optional

from config import (
    GPT_MODEL_STANDARD, GPT_MAX_TOKENS_STANDARD, GPT_TEMPERATURE_STANDARD,
    EVENT_CATEGORIES, MAX_DISPLAY_TITLE
)
from shared_utils import (
    ServiceClients, ExtractedEvent, StructuringError, logger,
    parse_json_response, truncate_content, performance_monitor
)


EXTRACTION_PROMPT = """Extract event details from the text below and return ONLY valid JSON.

The text comes from OCR of an event flyer or from a web page, so it may be noisy.

Return this exact JSON structure:
{{"title": "event title", "dates": ["date/time exactly as written"], "location": "venue name or null",
"address": "street address or null", "description": "one or two sentence summary",
"category": "one of {categories}"}}

Rules for "dates":
- Copy every date/time you find, in the order it appears, as written in the text (e.g. "12/25 7:30 pm", "March 15, 2023 7:30 PM").
- Put the main event date first.
- Do not invent dates. Use an empty list if there are none.

If information is missing, use null. Extract what you can find."""


class EventGPTExtractor:
    """Structure raw event text with the OpenAI chat completions API."""

    def __init__(self, clients: Optional[ServiceClients] = None, model: str = GPT_MODEL_STANDARD):
        self.clients = clients or ServiceClients()
        self.model = model

    @performance_monitor
    def extract(self, text: str) -> ExtractedEvent:
        """
        Extract event fields from raw text.

        Args:
            text: OCR or page text

        Returns:
            ExtractedEvent. When OpenAI is not configured, only the raw text
            is carried over as the description.

        Raises:
            StructuringError: if the model call fails or returns invalid JSON
        """
        text = (text or '').strip()

        if not text:
            logger.log("warning", "No text to structure")
            return ExtractedEvent(raw_text=text)

        if not self.clients.openai:
            logger.log("warning", "OpenAI unavailable, returning raw text as description")
            return ExtractedEvent(description=text, raw_text=text)

        prompt = EXTRACTION_PROMPT.format(categories=", ".join(EVENT_CATEGORIES))

        try:
            response = self.clients.openai.chat.completions.create(
                model=self.model,
                messages=[{"role": "system", "content": prompt},
                          {"role": "user", "content": truncate_content(text)}],
                max_tokens=GPT_MAX_TOKENS_STANDARD,
                temperature=GPT_TEMPERATURE_STANDARD
            )
            response_text = response.choices[0].message.content
        except Exception as e:
            raise StructuringError(f"OpenAI request failed: {e}") from e

        if not response_text or not response_text.strip():
            raise StructuringError("Empty OpenAI response")

        event = ExtractedEvent.from_dict(parse_json_response(response_text))
        event.raw_text = text

        logger.log("info", "Structured event text",
                   title=(event.title or '')[:MAX_DISPLAY_TITLE], dates=len(event.dates))
        return event
