"""
Tests for the click CLI.
"""

import json
import unittest
from unittest.mock import Mock, patch

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from click.testing import CliRunner

from events_cli import cli
from shared_utils import PageReadError


class TestNormalizeCommand(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()

    def test_normalize_phrases(self):
        result = self.runner.invoke(cli, [
            'normalize', '12/25 7:30 pm', 'bad date string', '--reference', '2025-06-01T12:00'
        ])

        self.assertEqual(result.exit_code, 0)
        self.assertIn('2025-12-25T19:30:00', result.output)
        self.assertIn('could not parse', result.output)

    def test_category_aware_flag(self):
        result = self.runner.invoke(cli, [
            'normalize', '12/25', '--reference', '2025-06-01',
            '--category', 'business', '--category-aware'
        ])

        self.assertEqual(result.exit_code, 0)
        self.assertIn('2025-12-25T09:00:00', result.output)

    def test_nothing_parses(self):
        result = self.runner.invoke(cli, ['normalize', 'nope', '--reference', '2025-06-01'])
        self.assertEqual(result.exit_code, 1)

    def test_bad_reference(self):
        result = self.runner.invoke(cli, ['normalize', '12/25', '--reference', 'yesterday'])
        self.assertNotEqual(result.exit_code, 0)


class TestProcessCommand(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()
        self.service = Mock()
        patcher = patch('events_cli.get_event_service', return_value=self.service)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_requires_input(self):
        result = self.runner.invoke(cli, ['process'])
        self.assertNotEqual(result.exit_code, 0)

    def test_url_json_output(self):
        record = {
            'title': 'Jazz Night',
            'datetime': None,
            'location': {'name': ''},
            'description': None,
            'type': None,
            'allDates': [],
            'source': 'url',
        }
        self.service.process_url.return_value = record

        result = self.runner.invoke(cli, ['process', '--url', 'https://example.com', '--json'])

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(json.loads(result.output), record)

    def test_url_table_output(self):
        self.service.process_url.return_value = {
            'title': 'Jazz Night',
            'datetime': '2025-12-25T19:30:00',
            'location': {'name': 'Blue Note', 'address': '131 W 3rd St'},
            'description': 'Live jazz trio.',
            'type': 'social',
            'allDates': [{'original': '12/25 7:30 pm', 'parsed': '2025-12-25T19:30:00'}],
        }

        result = self.runner.invoke(cli, ['process', '--url', 'https://example.com'])

        self.assertEqual(result.exit_code, 0)
        self.assertIn('Jazz Night', result.output)
        self.assertIn('131 W 3rd St', result.output)
        self.assertIn('12/25 7:30 pm', result.output)

    def test_image(self):
        self.service.process_image.return_value = {
            'title': 'Flyer', 'datetime': None, 'location': {'name': ''},
            'description': None, 'type': None, 'allDates': [],
        }

        with self.runner.isolated_filesystem():
            with open('flyer.png', 'wb') as f:
                f.write(b'\x89PNG\r\n')
            result = self.runner.invoke(cli, ['process', '--image', 'flyer.png'])

        self.assertEqual(result.exit_code, 0)
        self.assertIn('not found - enter manually', result.output)
        args = self.service.process_image.call_args.args
        self.assertEqual(args[:2], (b'\x89PNG\r\n', 'image/png'))

    def test_extraction_failure(self):
        self.service.process_url.side_effect = PageReadError("404")

        result = self.runner.invoke(cli, ['process', '--url', 'https://example.com/missing'])

        self.assertEqual(result.exit_code, 1)
        self.assertIn('Extraction failed', result.output)


if __name__ == '__main__':
    unittest.main()
