"""Feed scraping pipeline: fetch a feed, match its items and write them as CSV."""

import csv
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TextIO

import requests
from bs4 import BeautifulSoup, Tag

from .config import ScraperConfig
from .errors import ArtifactIOError, FetchError
from .logging_config import create_execution_logger
from .models import CSV_HEADER, FeedItem

ITEM_TAG = "item"

# (FeedItem attribute, child element name)
TEXT_FIELDS = (
    ("title", "title"),
    ("description", "description"),
    ("link", "link"),
    ("publication_date", "pubDate"),
    ("category", "category"),
)
IMAGE_TAG = "media:content"
IMAGE_ATTR = "url"


def qualified_name(tag: Tag) -> str:
    """Return a tag's name including its namespace prefix, if any."""
    if tag.prefix and ":" not in tag.name:
        return f"{tag.prefix}:{tag.name}"
    return tag.name


def find_child(element: Tag, name: str) -> Tag | None:
    """Return the first direct child element named ``name``."""
    for child in element.find_all(True, recursive=False):
        if qualified_name(child) == name:
            return child
    return None


class FeedScraper:
    """Scrapes <item> elements from a feed URL into CSV rows."""

    def __init__(
        self, config: ScraperConfig | None = None, execution_id: str | None = None
    ):
        """Initialize FeedScraper with configuration.

        Args:
            config: Scraper configuration (timeout, User-Agent, HTML cleaning)
            execution_id: Execution ID for logging context
        """
        self.config = config or ScraperConfig()
        self.logger = create_execution_logger("scraper", execution_id)
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": self.config.user_agent})

    def scrape(self, url: str, output_path: Path) -> int:
        """Scrape ``url`` and write its items to ``output_path``.

        The file is truncated first and always closed on the way out.

        Args:
            url: Feed URL to fetch
            output_path: CSV file to (over)write

        Returns:
            Number of data rows written

        Raises:
            ArtifactIOError: If the output file cannot be opened or the header written
            FetchError: If the feed cannot be fetched
        """
        self.logger.log_started(feed_url=url, output_path=str(output_path))

        try:
            stream = open(output_path, "w", newline="", encoding="utf-8")
        except OSError as e:
            self.logger.error(
                f"Failed to open output file {output_path}: {e}", error=str(e)
            )
            raise ArtifactIOError(
                f"Cannot open output file {output_path}: {e}", url=url
            ) from e

        with stream:
            rows = self.write_rows(self.iter_items(url), stream)

        self.logger.log_finished(success=True, feed_url=url, rows_written=rows)
        return rows

    def write_rows(self, items: Iterable[FeedItem], stream: TextIO) -> int:
        """Write the CSV header and one row per item to ``stream``.

        A row that fails to write is logged and skipped.

        Returns:
            Number of data rows written
        """
        writer = csv.writer(stream, lineterminator="\n")
        try:
            writer.writerow(CSV_HEADER)
        except (csv.Error, OSError) as e:
            self.logger.error(f"Failed to write CSV header: {e}", error=str(e))
            raise ArtifactIOError(f"Cannot write CSV header: {e}") from e

        matched = 0
        written = 0
        for item in items:
            matched += 1
            try:
                writer.writerow(item.to_row())
            except (csv.Error, OSError, UnicodeError) as e:
                self.logger.log_row_error(matched, e)
                continue
            written += 1

        self.logger.log_metrics(
            {
                "items_matched": matched,
                "rows_written": written,
                "rows_failed": matched - written,
            }
        )
        return written

    def iter_items(self, url: str) -> Iterator[FeedItem]:
        """Fetch ``url`` and yield one FeedItem per <item> element.

        Items are yielded in document order. A non-2xx response is still parsed.

        Raises:
            FetchError: If the request fails at the transport level
        """
        response = self.fetch(url)
        soup = BeautifulSoup(response.content, "xml")

        for element in soup.find_all(ITEM_TAG):
            yield self.extract_item(element)

    def fetch(self, url: str) -> requests.Response:
        """Issue the GET request for ``url``.

        Raises:
            FetchError: On connection, DNS, URL or timeout errors
        """
        self.logger.log_request(url)
        try:
            response = self.session.get(url, timeout=self.config.timeout)
        except (requests.RequestException, ValueError) as e:
            self.logger.error(
                f"Failed to fetch feed {url}: {e}", feed_url=url, error=str(e)
            )
            raise FetchError(f"Failed to fetch {url}: {e}", url=url) from e

        self.logger.log_response(url, response.status_code)
        return response

    def extract_item(self, element: Tag) -> FeedItem:
        """Extract the six CSV fields from one matched <item> element."""
        values = {}
        for attribute, child_name in TEXT_FIELDS:
            child = find_child(element, child_name)
            values[attribute] = child.get_text().strip() if child is not None else ""

        if self.config.clean_html:
            values["description"] = self.clean_html_content(values["description"])

        image = find_child(element, IMAGE_TAG)
        image_url = image.get(IMAGE_ATTR, "") if image is not None else ""
        if isinstance(image_url, list):
            image_url = " ".join(image_url)

        return FeedItem(image_url=image_url, **values)

    def clean_html_content(self, content: str) -> str:
        """Remove HTML tags from content and normalize whitespace.

        Args:
            content: Raw content that may contain HTML

        Returns:
            Clean text content without HTML tags
        """
        if not content:
            return ""

        if "<" not in content and ">" not in content:
            return " ".join(content.split())

        soup = BeautifulSoup(content, "html.parser")

        for script in soup(["script", "style"]):
            script.decompose()

        text = soup.get_text(separator=" ")
        return " ".join(text.split())

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
