"""Page stack standing in for the terminal screen the panel draws into."""

from collections import OrderedDict
from typing import Any, Callable, Optional, Text

from rich.align import Align
from rich.console import RenderableType


class Screen:
    def __init__(self, focus: Text = "droplets"):
        self.pages: "OrderedDict[Text, Any]" = OrderedDict()
        self.focus = focus

    def add_page(
        self,
        name: Text,
        renderable: RenderableType,
        on_close: Optional[Callable[[], None]] = None,
    ) -> None:
        """
        Shows a page on top of everything else and gives it the focus. A
        page with the same name gets replaced.
        """

        self.pages.pop(name, None)
        self.pages[name] = (renderable, on_close)
        self.focus = name

    def remove_page(self, name: Text) -> None:
        self.pages.pop(name, None)

    def has_page(self, name: Text) -> bool:
        return name in self.pages

    def escape(self) -> bool:
        """
        Closes the top page through its close handler. Returns False when
        there was no page to close.
        """

        if not self.pages:
            return False

        name = next(reversed(self.pages))
        _, on_close = self.pages[name]

        if on_close:
            on_close()
        else:
            self.remove_page(name)

        return True

    def compose(self, base: RenderableType) -> RenderableType:
        if not self.pages:
            return base

        renderable, _ = self.pages[next(reversed(self.pages))]
        return Align.center(renderable, vertical="middle")
