from typing import Optional

from ..droplet.models import Droplet
from .collection import DropletList


class Selection:
    """
    Cursor into a droplet list. The cursor is clamped to the list on every
    move and after every mutation done through this class, but `current()`
    still checks bounds since the list can shrink behind its back.
    """

    def __init__(self, droplets: DropletList):
        self.droplets = droplets
        self.cursor = 0
        self.active = False

    def next(self) -> None:
        self.cursor += 1
        self.clamp()
        self.active = True

    def prev(self) -> None:
        self.cursor -= 1
        self.clamp()
        self.active = True

    def clear(self) -> None:
        """
        Drops the highlight, the cursor stays where it was
        """

        self.active = False

    def clamp(self) -> None:
        self.cursor = max(0, min(self.cursor, len(self.droplets) - 1))

    def current(self) -> Optional[Droplet]:
        if not self.droplets:
            return None

        if not 0 <= self.cursor < len(self.droplets):
            return None

        return self.droplets[self.cursor]

    def remove_current(self) -> Optional[Droplet]:
        if self.current() is None:
            return None

        removed = self.droplets.swap_remove(self.cursor)
        self.clamp()

        return removed

    def remove(self, droplet: Droplet) -> Optional[Droplet]:
        """
        Swap-removes a droplet wherever it currently sits, which is not
        necessarily under the cursor anymore.
        """

        idx = self.droplets.index_of(droplet.id)
        if idx is None:
            return None

        removed = self.droplets.swap_remove(idx)
        self.clamp()

        return removed
