"""
Date Normalizer - Turns free-text date phrases into concrete timestamps.

Date phrases come out of the GPT extraction step exactly as they were
written on a flyer or web page ("12/25 7:30 pm", "March 15, 2023",
"3/1/24"). This module resolves each phrase against a reference instant
and returns the next future occurrence as a datetime, or None when the
phrase cannot be understood.
"""

import re
from datetime import datetime, date
from typing import Optional, Union, List, Tuple

from dateutil import parser as date_parser

from config import (
    DEFAULT_EVENT_HOUR, DEFAULT_EVENT_MINUTE,
    CATEGORY_DEFAULT_TIMES, CATEGORY_AWARE_DEFAULT_TIME
)
from shared_utils import logger

ReferenceLike = Union[datetime, date, str, None]


class DateTimeNormalizer:
    """
    Resolves loosely formatted date/time phrases to absolute datetimes.

    Two strategies are tried in order:

    1. Short numeric dates (``month/day`` with an optional year). Missing
       years come from the reference, past dates roll to next year by
       calendar date, and a missing time defaults to 7:00 PM.
    2. A generic parse of the whole phrase with dateutil. Results earlier
       than the reference instant (time included) move to the reference
       year, or the year after if that is still in the past.

    All methods are pure: the reference instant is always passed in.
    """

    SHORT_DATE_PATTERN = re.compile(r'(?<![\d/])\b(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?\b')
    TIME_PATTERN = re.compile(r'\b(\d{1,2}):(\d{2})\s*(am|pm)?\b', re.IGNORECASE)

    @classmethod
    def normalize(cls, phrase: str, reference: ReferenceLike,
                  category_hint: Optional[str] = None,
                  category_aware: Optional[bool] = None) -> Optional[datetime]:
        """
        Normalize a date phrase to the next matching instant.

        Args:
            phrase: Free-form date/time text
            reference: Instant treated as "now"
            category_hint: Optional event category (evening, morning, business...)
            category_aware: Use the category to pick the default time. Defaults
                to the CATEGORY_AWARE_DEFAULT_TIME setting (off).

        Returns:
            datetime, or None if the phrase could not be parsed
        """
        if not phrase or not isinstance(phrase, str) or not phrase.strip():
            return None

        reference = cls.coerce_reference(reference)
        text = phrase.strip()

        try:
            match = cls.SHORT_DATE_PATTERN.search(text)
            if match:
                default_time = cls.default_time_for(category_hint, category_aware)
                return cls._parse_short_date(match, text, reference, default_time)
            return cls._parse_generic(text, reference)
        except Exception as e:
            logger.log("debug", "Could not normalize date phrase", phrase=text, error=str(e))
            return None

    @classmethod
    def _parse_short_date(cls, match: re.Match, text: str, reference: datetime,
                          default_time: Tuple[int, int]) -> datetime:
        month = int(match.group(1))
        day = int(match.group(2))
        year_text = match.group(3)
        reference_date = reference.date()

        if year_text is None:
            year = reference.year
        elif len(year_text) < 3:
            year = 2000 + int(year_text)
            # Two-digit years that land in the past, or on a missing Feb 29, mean "this year"
            try:
                in_past = date(year, month, day) < reference_date
            except ValueError:
                in_past = True
            if in_past:
                year = reference.year
        else:
            year = int(year_text)

        # Rollover compares calendar dates only
        if date(year, month, day) < reference_date:
            year += 1

        hour, minute = cls._extract_time(text, default_time)

        return datetime(year, month, day, hour, minute, tzinfo=reference.tzinfo)

    @classmethod
    def _extract_time(cls, text: str, default_time: Tuple[int, int]) -> Tuple[int, int]:
        """Find an H:MM time in the phrase and convert it to 24-hour form."""
        match = cls.TIME_PATTERN.search(text)
        if not match:
            return default_time

        hour = int(match.group(1))
        minute = int(match.group(2))
        meridiem = (match.group(3) or '').lower()

        if meridiem == 'pm' and hour < 12:
            hour += 12
        elif meridiem == 'am' and hour == 12:
            hour = 0

        return hour, minute

    @classmethod
    def _parse_generic(cls, text: str, reference: datetime) -> Optional[datetime]:
        midnight = reference.replace(hour=0, minute=0, second=0, microsecond=0, tzinfo=None)
        parsed = date_parser.parse(text, default=midnight)

        if parsed.tzinfo is None and reference.tzinfo is not None:
            parsed = parsed.replace(tzinfo=reference.tzinfo)

        # Rollover compares the full instant, time included
        comparable = cls._comparable_reference(reference, parsed)
        if parsed < comparable:
            parsed = parsed.replace(year=reference.year)
            if parsed < comparable:
                parsed = parsed.replace(year=reference.year + 1)

        return parsed

    @staticmethod
    def _comparable_reference(reference: datetime, parsed: datetime) -> datetime:
        """Give the reference the same awareness as the parsed value."""
        if parsed.tzinfo is not None and reference.tzinfo is None:
            return reference.replace(tzinfo=parsed.tzinfo)
        return reference

    @classmethod
    def default_time_for(cls, category_hint: Optional[str] = None,
                         category_aware: Optional[bool] = None) -> Tuple[int, int]:
        """
        Pick the (hour, minute) used when a short date has no time.

        Args:
            category_hint: Event category, matched case-insensitively
            category_aware: Whether the category is consulted at all

        Returns:
            Tuple of (hour, minute)
        """
        if category_aware is None:
            category_aware = CATEGORY_AWARE_DEFAULT_TIME

        if category_aware and category_hint:
            return CATEGORY_DEFAULT_TIMES.get(
                category_hint.strip().lower(),
                (DEFAULT_EVENT_HOUR, DEFAULT_EVENT_MINUTE)
            )
        return DEFAULT_EVENT_HOUR, DEFAULT_EVENT_MINUTE

    @classmethod
    def coerce_reference(cls, reference: ReferenceLike) -> datetime:
        """
        Turn whatever the caller passed as "now" into a datetime.

        Missing or unusable references fall back to the current local time
        rather than failing the caller.
        """
        if isinstance(reference, datetime):
            return reference
        if isinstance(reference, date):
            return datetime(reference.year, reference.month, reference.day)
        if isinstance(reference, str) and reference.strip():
            try:
                return datetime.fromisoformat(reference.strip())
            except ValueError:
                logger.log("warning", "Invalid reference instant, using current time",
                           reference=reference)
                return datetime.now()

        logger.log("warning", "No reference instant supplied, using current time")
        return datetime.now()

    @staticmethod
    def to_iso(value: Optional[datetime]) -> Optional[str]:
        """Serialize a normalized instant, passing the sentinel through."""
        if value is None:
            return None
        return value.isoformat()


def normalize_datetime(phrase: str, reference: ReferenceLike = None,
                       category_hint: Optional[str] = None,
                       category_aware: Optional[bool] = None) -> Optional[datetime]:
    """Normalize a single phrase. Uses the current time when no reference is given."""
    if reference is None:
        reference = datetime.now()
    return DateTimeNormalizer.normalize(phrase, reference, category_hint, category_aware)


def normalize_to_iso(phrase: str, reference: ReferenceLike = None,
                     category_hint: Optional[str] = None,
                     category_aware: Optional[bool] = None) -> Optional[str]:
    """Normalize a single phrase and return it as an ISO-8601 string."""
    return DateTimeNormalizer.to_iso(
        normalize_datetime(phrase, reference, category_hint, category_aware)
    )


def normalize_all(phrases: List[str], reference: ReferenceLike = None,
                  category_hint: Optional[str] = None,
                  category_aware: Optional[bool] = None) -> List[Tuple[str, Optional[datetime]]]:
    """
    Normalize a list of phrases against one shared reference.

    Args:
        phrases: Date phrases in their original order
        reference: Instant treated as "now" for every phrase

    Returns:
        List of (original, parsed) tuples in input order
    """
    if reference is None:
        reference = datetime.now()
    reference = DateTimeNormalizer.coerce_reference(reference)
    return [
        (phrase, DateTimeNormalizer.normalize(phrase, reference, category_hint, category_aware))
        for phrase in phrases
    ]
