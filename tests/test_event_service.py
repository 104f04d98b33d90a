"""
Tests for EventService orchestration with all external services mocked.
"""

import unittest
from unittest.mock import Mock
from datetime import datetime

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from event_service import EventService
from shared_utils import ExtractedEvent, ExtractionError, PageReadError


class TestEventService(unittest.TestCase):

    def setUp(self):
        self.ocr_reader = Mock()
        self.page_reader = Mock()
        self.extractor = Mock()
        self.extractor.extract.return_value = ExtractedEvent(
            title='Book Fair',
            dates=['3/1/24 10:00 am', 'March 2'],
            location='City Library',
            category='morning',
        )
        self.service = EventService(self.ocr_reader, self.page_reader, self.extractor)
        self.reference = datetime(2025, 6, 1, 12, 0)

    def test_process_image(self):
        self.ocr_reader.read_text.return_value = 'BOOK FAIR 3/1/24 10:00 am'

        record = self.service.process_image(b'jpeg-bytes', 'image/jpeg', self.reference)

        self.ocr_reader.read_text.assert_called_once_with(b'jpeg-bytes', 'image/jpeg')
        self.extractor.extract.assert_called_once_with('BOOK FAIR 3/1/24 10:00 am')
        self.assertEqual(record['source'], 'image')
        self.assertEqual(record['title'], 'Book Fair')
        self.assertEqual(record['datetime'], '2026-03-01T10:00:00')
        self.assertEqual(record['allDates'][1], {'original': 'March 2', 'parsed': '2026-03-02T00:00:00'})

    def test_process_image_rejects_non_images(self):
        with self.assertRaises(ExtractionError):
            self.service.process_image(b'%PDF', 'application/pdf', self.reference)
        self.ocr_reader.read_text.assert_not_called()

    def test_process_url(self):
        self.page_reader.read_text.return_value = 'Book Fair at City Library'

        record = self.service.process_url(' https://example.com/fair ', self.reference)

        self.page_reader.read_text.assert_called_once_with(' https://example.com/fair ')
        self.assertEqual(record['source'], 'url')
        self.assertEqual(record['url'], 'https://example.com/fair')
        self.assertEqual(record['location'], {'name': 'City Library'})

    def test_process_url_propagates_errors(self):
        self.page_reader.read_text.side_effect = PageReadError("404")
        with self.assertRaises(ExtractionError):
            self.service.process_url('https://example.com/missing', self.reference)

    def test_process_text_defaults_reference_to_now(self):
        record = self.service.process_text('Book Fair')
        self.assertIsNotNone(record['datetime'])
        self.assertGreaterEqual(record['datetime'][:10], datetime.now().date().isoformat())


if __name__ == '__main__':
    unittest.main()
