"""
Event enrichment modules.
"""

from .gpt_extractor import EventGPTExtractor, EXTRACTION_PROMPT

__all__ = [
    'EventGPTExtractor',
    'EXTRACTION_PROMPT'
]
