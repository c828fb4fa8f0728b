from dataclasses import dataclass
from typing import Optional, Text
from urllib.parse import parse_qs, urlparse

from .errors import PaginationError

__all__ = [
    "Meta",
    "Pages",
    "Links",
    "Collection",
]


@dataclass
class Meta:
    total: int


@dataclass
class Pages:
    first: Optional[Text] = None
    prev: Optional[Text] = None
    next: Optional[Text] = None
    last: Optional[Text] = None


@dataclass
class Links:
    pages: Optional[Pages] = None


@dataclass
class Collection:
    meta: Optional[Meta] = None
    links: Optional[Links] = None

    def next_page(self) -> Optional[int]:
        """
        Number of the page that follows this one, or None if this is the
        last page. Missing links are not an error, they simply mean that
        there is nothing more to get.

        Raises
        ------
        PaginationError
            The "next" link exists but holds no usable page number
        """

        if not self.links or not self.links.pages or not self.links.pages.next:
            return None

        url = self.links.pages.next
        values = parse_qs(urlparse(url).query).get("page", [])

        try:
            return int(values[0])
        except (IndexError, ValueError) as e:
            raise PaginationError(f"cannot find next page number in {url!r}") from e
