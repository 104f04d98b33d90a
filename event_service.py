"""
Event Service Layer - Business logic for event extraction.

This module orchestrates the extraction pipeline: text extraction (OCR or
page reading), structuring with GPT, and assembly of the final event
record with normalized dates.
"""

from typing import Dict, Any, Optional
from datetime import datetime

from event_assembler import assemble_event
from date_normalizer import ReferenceLike
from fetchers.ocr_reader import OCRReader
from fetchers.page_reader import PageReader
from fetchers.enrichers.gpt_extractor import EventGPTExtractor
from shared_utils import ExtractionError, logger


class EventService:
    """
    Service layer for event extraction.

    Collaborators are injected so tests and callers can swap the external
    services out.
    """

    def __init__(self, ocr_reader: Optional[OCRReader] = None,
                 page_reader: Optional[PageReader] = None,
                 extractor: Optional[EventGPTExtractor] = None):
        """Initialize service with its collaborators."""
        self.ocr_reader = ocr_reader or OCRReader()
        self.page_reader = page_reader or PageReader()
        self.extractor = extractor or EventGPTExtractor()

    def process_image(self, image_bytes: bytes, content_type: str = 'image/png',
                      reference: ReferenceLike = None) -> Dict[str, Any]:
        """
        Extract an event from an uploaded image.

        Args:
            image_bytes: Raw image contents
            content_type: MIME type of the upload
            reference: Instant treated as "now" for date normalization

        Returns:
            Event record dictionary

        Raises:
            ExtractionError: if OCR or structuring fails
        """
        if not content_type or not content_type.startswith('image/'):
            raise ExtractionError(f"Unsupported content type: {content_type}")

        text = self.ocr_reader.read_text(image_bytes, content_type)
        return self.process_text(text, reference, source='image')

    def process_url(self, url: str, reference: ReferenceLike = None) -> Dict[str, Any]:
        """
        Extract an event from a web page.

        Args:
            url: Event page URL
            reference: Instant treated as "now" for date normalization

        Returns:
            Event record dictionary

        Raises:
            ExtractionError: if the page cannot be read or structured
        """
        text = self.page_reader.read_text(url)
        record = self.process_text(text, reference, source='url')
        record['url'] = url.strip()
        return record

    def process_text(self, text: str, reference: ReferenceLike = None,
                     source: Optional[str] = None) -> Dict[str, Any]:
        """Structure already extracted text and assemble the record."""
        if reference is None:
            reference = datetime.now()

        extracted = self.extractor.extract(text)
        record = assemble_event(extracted, reference, source=source)

        logger.log("info", "Event extracted", source=source, title=record['title'],
                   datetime=record['datetime'])
        return record


# Global service instance
_event_service = None

def get_event_service() -> EventService:
    """Get the global event service instance."""
    global _event_service
    if _event_service is None:
        _event_service = EventService()
    return _event_service
