"""
Page Reader - Fetches readable text from an event web page.

Firecrawl is used when an API key is configured since it renders
JavaScript-heavy pages. Otherwise the page is fetched with requests and
reduced to text with BeautifulSoup.
"""

from typing import Any, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from config import HTTP_TIMEOUT_STANDARD, MAX_CONTENT_FOR_PARSING
from shared_utils import HTTPClient, ServiceClients, PageReadError, logger, performance_monitor


def is_valid_page_url(url: str) -> bool:
    """Only absolute http(s) URLs are fetched."""
    if not url or not isinstance(url, str):
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def html_to_text(html: str) -> str:
    """Strip markup, scripts and styles, keeping one line per text block."""
    soup = BeautifulSoup(html, 'html.parser')

    for element in soup(["script", "style", "noscript", "svg"]):
        element.decompose()

    lines = (line.strip() for line in soup.get_text(separator='\n').splitlines())
    return '\n'.join(line for line in lines if line)


class PageReader:
    """Fetch a page and return its text content."""

    def __init__(self, http_client: Optional[HTTPClient] = None, clients: Optional[ServiceClients] = None):
        self.http_client = http_client or HTTPClient()
        self.clients = clients or ServiceClients()

    @performance_monitor
    def read_text(self, url: str) -> str:
        """
        Read the text of a web page.

        Args:
            url: Page URL

        Returns:
            Page text, truncated to MAX_CONTENT_FOR_PARSING characters

        Raises:
            PageReadError: if the URL is invalid or nothing readable was found
        """
        if not is_valid_page_url(url):
            raise PageReadError(f"Invalid URL: {url}")

        url = url.strip()
        text = ''

        if self.clients.firecrawl:
            try:
                text = self._read_with_firecrawl(url)
            except Exception as e:
                logger.log("warning", "Firecrawl failed, falling back to requests", url=url, error=str(e))

        if not text:
            text = self._read_with_requests(url)

        if not text.strip():
            raise PageReadError(f"No readable text found at {url}")

        logger.log("info", "Page read", url=url, characters=len(text))
        return text[:MAX_CONTENT_FOR_PARSING]

    def _read_with_firecrawl(self, url: str) -> str:
        result = self.clients.firecrawl.scrape_url(url)

        # Handle both dictionary and object response formats
        if isinstance(result, dict):
            data: Any = result.get('data', result)
        else:
            data = getattr(result, 'data', None) or result

        if isinstance(data, dict):
            markdown = data.get('markdown', '')
            html = data.get('html', '')
        else:
            markdown = getattr(data, 'markdown', '') or ''
            html = getattr(data, 'html', '') or ''

        if markdown:
            return markdown
        return html_to_text(html) if html else ''

    def _read_with_requests(self, url: str) -> str:
        try:
            response = self.http_client.get(url, timeout=HTTP_TIMEOUT_STANDARD)
            response.raise_for_status()
        except Exception as e:
            raise PageReadError(f"Failed to fetch {url}: {e}") from e

        return html_to_text(response.text)
