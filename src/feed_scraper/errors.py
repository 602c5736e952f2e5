"""Error taxonomy for the feed scraper service."""


class ScrapeError(Exception):
    """Base class for failures that abort a scrape request."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class MalformedRequestError(ScrapeError):
    """Request body did not parse into a LinkRequest."""


class FetchError(ScrapeError):
    """Target URL could not be fetched."""


class ArtifactIOError(ScrapeError):
    """Output CSV could not be created, opened or written."""
