"""
Event Assembler - Builds the final event record from extracted fields.

Every date phrase is normalized against the same reference instant. The
first phrase that normalizes becomes the event's canonical datetime; all
phrases are kept as {original, parsed} pairs so the UI can offer them.
"""

from typing import List, Dict, Any, Optional
from datetime import datetime

from config import DEFAULT_EVENT_TITLE
from date_normalizer import DateTimeNormalizer, ReferenceLike
from shared_utils import ExtractedEvent, logger


def normalize_date_phrases(phrases: List[str], reference: datetime,
                           category_hint: Optional[str] = None) -> List[Dict[str, Optional[str]]]:
    """
    Normalize each phrase, keeping the original text next to the result.

    Args:
        phrases: Date phrases in their original order
        reference: Instant treated as "now"
        category_hint: Event category passed to the normalizer

    Returns:
        List of {"original": str, "parsed": ISO str or None}
    """
    pairs = []
    for phrase in phrases:
        parsed = DateTimeNormalizer.normalize(phrase, reference, category_hint)
        if parsed is None:
            logger.log("debug", "Date phrase not understood", phrase=phrase)
        pairs.append({
            'original': phrase,
            'parsed': DateTimeNormalizer.to_iso(parsed),
        })
    return pairs


def select_primary_datetime(pairs: List[Dict[str, Optional[str]]]) -> Optional[str]:
    """Return the first parsed value in original order, or None."""
    for pair in pairs:
        if pair.get('parsed'):
            return pair['parsed']
    return None


def assemble_event(extracted: ExtractedEvent, reference: ReferenceLike = None,
                   source: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the event record returned to clients.

    Args:
        extracted: Provisional fields from the extraction step
        reference: Instant treated as "now" (defaults to the current time)
        source: Where the event came from ("image" or "url")

    Returns:
        Event record dictionary
    """
    if reference is None:
        reference = datetime.now()
    reference = DateTimeNormalizer.coerce_reference(reference)

    all_dates = normalize_date_phrases(extracted.dates, reference, extracted.category)
    primary = select_primary_datetime(all_dates)

    if primary is None:
        logger.log("warning", "No parseable date found for event",
                   title=extracted.title, phrases=len(extracted.dates))

    location: Dict[str, Any] = {'name': extracted.location or ''}
    if extracted.address:
        location['address'] = extracted.address

    record = {
        'title': extracted.title or DEFAULT_EVENT_TITLE,
        'datetime': primary,
        'location': location,
        'description': extracted.description,
        'type': extracted.category,
        'allDates': all_dates,
    }
    if source:
        record['source'] = source

    return record
