from collections.abc import Sequence
from logging import getLogger
from typing import Callable, Iterable, List, Optional

from httpx import HTTPError

from ..droplet.models import Droplet, DropletPage
from ..errors import FetchError, PaginationError, PanelError

logger = getLogger("dopanel.panel")

PageGetter = Callable[[Optional[int]], DropletPage]


class DropletList(Sequence):
    """
    Ordered droplets as displayed by the panel. Records themselves are never
    touched, the list only gains or loses whole droplets.
    """

    def __init__(self, droplets: Iterable[Droplet] = ()):
        self._droplets: List[Droplet] = list(droplets)

    def __len__(self) -> int:
        return len(self._droplets)

    def __getitem__(self, index):
        return self._droplets[index]

    def __repr__(self):
        return f"DropletList({self._droplets!r})"

    def replace(self, droplets: Iterable[Droplet]) -> None:
        self._droplets = list(droplets)

    def clear(self) -> None:
        self._droplets = []

    def index_of(self, droplet_id: int) -> Optional[int]:
        for idx, droplet in enumerate(self._droplets):
            if droplet.id == droplet_id:
                return idx

        return None

    def swap_remove(self, index: int) -> Droplet:
        """
        Removes the droplet at `index` by moving the last droplet into its
        slot. Order is not kept, which is fine since the list gets replaced
        by the next refresh anyway.
        """

        removed = self._droplets[index]
        last = self._droplets.pop()

        if index < len(self._droplets):
            self._droplets[index] = last

        return removed


def fetch_all(list_page: PageGetter, max_pages: int = 1000) -> List[Droplet]:
    """
    Walks through all the pages of the droplets listing, starting from the
    first one, and returns the droplets in the order they arrived.

    Parameters
    ----------
    list_page
        Gets a page from its number (None for the first page) and tells
        which page comes next
    max_pages
        Safety limit against links that never end

    Raises
    ------
    FetchError
        Any page failed. The droplets of the previous pages are attached to
        the error, the original failure is its cause.
    """

    droplets: List[Droplet] = []
    page = None

    for _ in range(max_pages):
        try:
            result = list_page(page)
        except (HTTPError, ValueError, PanelError) as e:
            raise FetchError(str(e) or e.__class__.__name__, droplets) from e

        droplets.extend(result.droplets)

        if result.next_page is None:
            return droplets

        page = result.next_page

    logger.warning("Gave up listing droplets after %s pages", max_pages)
    e = PaginationError(f"more than {max_pages} pages of droplets")
    raise FetchError(str(e), droplets) from e
