"""
Tests for the GPT extraction step and the JSON helpers it relies on.
"""

import unittest
from unittest.mock import Mock

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fetchers.enrichers.gpt_extractor import EventGPTExtractor
from shared_utils import ExtractedEvent, StructuringError, parse_json_response, truncate_content


def make_completion(content):
    """Build an object shaped like an OpenAI chat completion."""
    message = Mock()
    message.content = content
    choice = Mock()
    choice.message = message
    completion = Mock()
    completion.choices = [choice]
    return completion


class TestEventGPTExtractor(unittest.TestCase):

    def setUp(self):
        self.clients = Mock()
        self.extractor = EventGPTExtractor(clients=self.clients)

    def test_extract_parses_fenced_json(self):
        self.clients.openai.chat.completions.create.return_value = make_completion(
            '```json\n{"title": "Jazz Night", "dates": ["12/25 7:30 pm"], '
            '"location": "Blue Note", "category": "social", "ticket_url": "https://x"}\n```'
        )

        event = self.extractor.extract("JAZZ NIGHT 12/25 7:30 pm Blue Note")

        self.assertEqual(event.title, 'Jazz Night')
        self.assertEqual(event.dates, ['12/25 7:30 pm'])
        self.assertEqual(event.location, 'Blue Note')
        self.assertEqual(event.category, 'social')
        self.assertEqual(event.metadata, {'ticket_url': 'https://x'})
        self.assertEqual(event.raw_text, "JAZZ NIGHT 12/25 7:30 pm Blue Note")

    def test_extract_sends_text_to_model(self):
        self.clients.openai.chat.completions.create.return_value = make_completion('{"title": "A"}')

        self.extractor.extract("some flyer text")

        kwargs = self.clients.openai.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs['messages'][1], {"role": "user", "content": "some flyer text"})
        self.assertIn('"dates"', kwargs['messages'][0]['content'])

    def test_extract_without_openai_returns_raw_text(self):
        self.clients.openai = None

        event = self.extractor.extract("  Poster text  ")

        self.assertEqual(event.description, "Poster text")
        self.assertEqual(event.dates, [])

    def test_extract_empty_text(self):
        event = self.extractor.extract("")
        self.assertEqual(event.dates, [])
        self.clients.openai.chat.completions.create.assert_not_called()

    def test_invalid_json_raises(self):
        self.clients.openai.chat.completions.create.return_value = make_completion("not json")
        with self.assertRaises(StructuringError):
            self.extractor.extract("text")

    def test_empty_response_raises(self):
        self.clients.openai.chat.completions.create.return_value = make_completion("   ")
        with self.assertRaises(StructuringError):
            self.extractor.extract("text")

    def test_api_failure_raises(self):
        self.clients.openai.chat.completions.create.side_effect = RuntimeError("rate limited")
        with self.assertRaises(StructuringError):
            self.extractor.extract("text")


class TestExtractedEvent(unittest.TestCase):

    def test_from_dict_single_date_string(self):
        event = ExtractedEvent.from_dict({'title': 'A', 'dates': 'March 3'})
        self.assertEqual(event.dates, ['March 3'])

    def test_from_dict_null_dates(self):
        event = ExtractedEvent.from_dict({'title': 'A', 'dates': None})
        self.assertEqual(event.dates, [])

    def test_from_dict_drops_empty_dates(self):
        event = ExtractedEvent.from_dict({'dates': ['3/1', '', None, '3/2']})
        self.assertEqual(event.dates, ['3/1', '3/2'])


class TestJsonHelpers(unittest.TestCase):

    def test_parse_plain_json(self):
        self.assertEqual(parse_json_response('{"a": 1}'), {'a': 1})

    def test_parse_fenced_json(self):
        self.assertEqual(parse_json_response('```\n{"a": 1}\n```'), {'a': 1})

    def test_non_object_rejected(self):
        with self.assertRaises(StructuringError):
            parse_json_response('[1, 2]')

    def test_truncate_content(self):
        self.assertEqual(truncate_content("short", 10), "short")
        self.assertTrue(truncate_content("x" * 20, 10).startswith("x" * 10))
        self.assertTrue(truncate_content("x" * 20, 10).endswith("[CONTENT TRUNCATED]"))


if __name__ == '__main__':
    unittest.main()
