"""Feed-to-CSV scraper service."""

__version__ = "1.0.0"
