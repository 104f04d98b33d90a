#!/usr/bin/env python3
"""
Event Extractor CLI - Command-line interface for event extraction.

This CLI provides:
- Normalizing free-text date phrases against a reference date
- Running the full extraction pipeline on an image or a URL
- Running the API server
"""

import click
import json
import mimetypes
import sys
import os
from typing import Optional, Tuple
from datetime import datetime
from tabulate import tabulate

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from date_normalizer import normalize_all, DateTimeNormalizer
from event_service import get_event_service
from shared_utils import ExtractionError
from config import BANNER_WIDTH, SECTION_SEPARATOR_WIDTH, API_HOST, API_PORT, MAX_DISPLAY_DESCRIPTION


def print_banner(text: str, width: int = BANNER_WIDTH):
    """Print a formatted banner."""
    print("=" * width)
    print(text.center(width))
    print("=" * width)


def print_section(text: str, width: int = SECTION_SEPARATOR_WIDTH):
    """Print a section separator."""
    print(f"\n{'-' * width}")
    print(text)
    print(f"{'-' * width}")


def parse_reference(value: Optional[str]) -> datetime:
    """Read --reference as an ISO date or datetime, defaulting to now."""
    if not value:
        return datetime.now()
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Not an ISO date/time: {value}", param_hint='--reference')


@click.group()
@click.version_option(version='1.0.0')
def cli():
    """Event Extractor CLI - Turn flyers and pages into event records."""
    pass


@cli.command()
@click.argument('phrases', nargs=-1, required=True)
@click.option('--reference', help='Reference date/time in ISO format (defaults to now)')
@click.option('--category', help='Event category hint (evening, morning, business...)')
@click.option('--category-aware', is_flag=True, help='Pick the default time from the category')
def normalize(phrases: Tuple[str, ...], reference: Optional[str], category: Optional[str],
              category_aware: bool):
    """Normalize date phrases to absolute timestamps."""
    reference_dt = parse_reference(reference)
    results = normalize_all(list(phrases), reference_dt, category, category_aware)

    rows = [
        [original, DateTimeNormalizer.to_iso(parsed) or 'could not parse']
        for original, parsed in results
    ]

    print(f"Reference: {reference_dt.isoformat()}")
    print(tabulate(rows, headers=['Original', 'Parsed'], tablefmt='grid'))

    if not any(parsed for _, parsed in results):
        sys.exit(1)


@cli.command()
@click.option('--image', 'image_path', type=click.Path(exists=True, dir_okay=False),
              help='Event image or flyer')
@click.option('--url', help='Event page URL')
@click.option('--reference', help='Reference date/time in ISO format (defaults to now)')
@click.option('--json', 'as_json', is_flag=True, help='Print the raw event record as JSON')
def process(image_path: Optional[str], url: Optional[str], reference: Optional[str], as_json: bool):
    """Extract an event from an image or a URL."""
    if not image_path and not url:
        raise click.UsageError("Provide --image or --url")

    reference_dt = parse_reference(reference)
    service = get_event_service()

    try:
        if image_path:
            content_type = mimetypes.guess_type(image_path)[0] or 'application/octet-stream'
            with open(image_path, 'rb') as f:
                record = service.process_image(f.read(), content_type, reference_dt)
        else:
            record = service.process_url(url, reference_dt)
    except ExtractionError as e:
        print(f"❌ Extraction failed: {e}")
        sys.exit(1)

    if as_json:
        print(json.dumps(record, indent=2))
        return

    print_banner(record['title'])
    print(f"Date & Time: {record['datetime'] or 'not found - enter manually'}")
    print(f"Location:    {record['location'].get('name') or 'TBD'}")
    if record['location'].get('address'):
        print(f"Address:     {record['location']['address']}")
    if record.get('type'):
        print(f"Type:        {record['type']}")
    if record.get('description'):
        print(f"\n{record['description'][:MAX_DISPLAY_DESCRIPTION]}")

    if record['allDates']:
        print_section("Dates found")
        rows = [[pair['original'], pair['parsed'] or 'could not parse'] for pair in record['allDates']]
        print(tabulate(rows, headers=['Original', 'Parsed'], tablefmt='grid'))


@cli.command()
@click.option('--host', default=API_HOST, help='Host to bind to')
@click.option('--port', default=API_PORT, help='Port to bind to')
@click.option('--reload', is_flag=True, help='Enable auto-reload for development')
def serve(host: str, port: int, reload: bool):
    """Run the FastAPI server."""
    print_banner("Starting Event Extractor API Server")
    print(f"Server: http://{host}:{port}")
    print(f"Docs: http://{host}:{port}/docs")
    print(f"Auto-reload: {'Enabled' if reload else 'Disabled'}")
    print("\nPress CTRL+C to stop the server\n")

    import uvicorn
    uvicorn.run(
        "backend:app",
        host=host,
        port=port,
        reload=reload
    )


if __name__ == '__main__':
    cli()
