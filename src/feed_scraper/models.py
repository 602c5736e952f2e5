"""Data models for the feed scraper service."""

from dataclasses import dataclass

from pydantic import BaseModel

CSV_HEADER = (
    "Title",
    "Description",
    "Link To Article",
    "Publication Date",
    "Category",
    "Image URL",
)


class LinkRequest(BaseModel):
    """Body of a POST /getLink request."""

    url: str


@dataclass
class FeedItem:
    """Represents a single matched feed <item> element."""

    title: str = ""
    description: str = ""
    link: str = ""
    publication_date: str = ""
    category: str = ""
    image_url: str = ""

    def to_row(self) -> list[str]:
        """Return the item's values in CSV_HEADER order."""
        return [
            self.title,
            self.description,
            self.link,
            self.publication_date,
            self.category,
            self.image_url,
        ]
