"""
Fetchers package - Text extraction and structuring for event inputs.

Images go through OCR, URLs through the page reader, and the resulting
text is structured into event fields by the GPT extractor.
"""

from .ocr_reader import OCRReader
from .page_reader import PageReader
from .enrichers.gpt_extractor import EventGPTExtractor

__all__ = [
    'OCRReader',
    'PageReader',
    'EventGPTExtractor'
]
