import threading
from enum import Enum
from logging import getLogger
from typing import Callable, List, Optional, Text

from httpx import HTTPError

from ..api import DoApi
from ..config import Settings
from ..droplet.api import DropletApi
from ..droplet.models import ActionKind, Droplet
from ..errors import ClientUnavailable, PanelError
from ..validations import api_token
from . import render
from .collection import DropletList, fetch_all
from .screen import Screen
from .selection import Selection

logger = getLogger("dopanel.panel")

INFO_PAGE = "info"
LIST_FOCUS = "droplets"


class FetchState(Enum):
    idle = "idle"
    fetching = "fetching"
    ready = "ready"
    failed = "failed"


# key -> (method, help)
KEYS = {
    "j": ("next", "Select next droplet"),
    "down": ("next", "Select next droplet"),
    "k": ("prev", "Select previous droplet"),
    "up": ("prev", "Select previous droplet"),
    "u": ("unselect", "Clear selection"),
    "r": ("refresh", "Refresh the list"),
    "ctrl-d": ("destroy", "Destroy droplet under the cursor, highlighted or not"),
    "b": ("reboot", "Reboot droplet"),
    "s": ("shutdown", "Shut down droplet"),
    "p": ("enable_private_networking", "Enable private networking"),
    "enter": ("show_info", "Show droplet details"),
    "esc": ("escape", "Close details or clear selection"),
}

# commands that call the API and should not run on the UI thread
BLOCKING_COMMANDS = {
    "refresh",
    "destroy",
    "reboot",
    "shutdown",
    "enable_private_networking",
}


def create_client(settings: Settings) -> Optional[DropletApi]:
    """
    Builds the droplets API client. Returns None when the token can't
    possibly work, in which case every fetch will fail until the panel is
    built again with a proper token.
    """

    if not api_token(settings.api_token):
        logger.error("No usable DigitalOcean API token, client not created")
        return None

    root = DoApi(
        api_token=settings.api_token,
        per_page=settings.per_page,
        timeout=settings.timeout,
    )

    return root.droplet


class DropletsWidget:
    """
    Keeps the list of droplets displayed by the panel in line with the
    account, tracks which one is selected and runs the actions on it.

    All the mutable state lives here and is only changed while holding
    `_lock`. Readers from another thread should go through `snapshot()`.
    """

    def __init__(
        self,
        client: Optional[DropletApi],
        settings: Settings,
        screen: Optional[Screen] = None,
    ):
        self.client = client
        self.settings = settings
        self.screen = screen or Screen(focus=LIST_FOCUS)

        self.droplets = DropletList()
        self.selection = Selection(self.droplets)
        self.item_count = 0
        self.err: Optional[Exception] = None
        self.state = FetchState.idle

        self.on_render: Optional[Callable[["DropletsWidget"], None]] = None

        self._lock = threading.RLock()
        self._in_flight = threading.Lock()

    # -- fetch / refresh ---------------------------------------------------

    def fetch(self) -> List[Droplet]:
        if self.client is None:
            raise ClientUnavailable("client could not be initialized")

        return fetch_all(self.client.list_page)

    def refresh(self) -> bool:
        """
        Lists all the droplets again and replaces the displayed ones. A
        failure empties the list and keeps the error for display instead.

        Returns False without doing anything if another refresh is still
        running.
        """

        if not self._in_flight.acquire(blocking=False):
            logger.debug("Refresh already in flight, skipping")
            return False

        try:
            with self._lock:
                self.state = FetchState.fetching

            try:
                droplets = self.fetch()
            except PanelError as e:
                logger.error("Could not list droplets: %s", e)

                with self._lock:
                    self.droplets.clear()
                    self.selection.clamp()
                    self.item_count = 0
                    self.err = e
                    self.state = FetchState.failed
            else:
                with self._lock:
                    self.droplets.replace(droplets)
                    self.selection.clamp()
                    self.item_count = len(self.droplets)
                    self.err = None
                    self.state = FetchState.ready

            self.display()

            return True
        finally:
            with self._lock:
                self.state = FetchState.idle

            self._in_flight.release()

    # -- selection ---------------------------------------------------------

    def current(self) -> Optional[Droplet]:
        with self._lock:
            return self.selection.current()

    def next(self) -> None:
        with self._lock:
            self.selection.next()

        self.display()

    def prev(self) -> None:
        with self._lock:
            self.selection.prev()

        self.display()

    def unselect(self) -> None:
        with self._lock:
            self.selection.clear()

        self.display()

    # -- droplet actions ---------------------------------------------------

    def _attempt(self, what: Text, droplet: Droplet, call: Callable[[], None]) -> None:
        """
        Runs the API call for an action. Failures are logged and dropped:
        the refresh that follows shows the actual state of the droplet.
        """

        try:
            call()
        except (HTTPError, ValueError, PanelError) as e:
            logger.warning("Could not %s droplet %s (%s): %s", what, droplet.name, droplet.id, e)

    def _client(self) -> DropletApi:
        if self.client is None:
            raise ClientUnavailable("client could not be initialized")

        return self.client

    def destroy(self) -> None:
        droplet = self.current()
        if droplet is None:
            return

        self._attempt("destroy", droplet, lambda: self._client().droplet_delete(droplet.id))

        with self._lock:
            self.selection.remove(droplet)

        self.refresh()

    def _action(self, kind: ActionKind) -> None:
        droplet = self.current()
        if droplet is None:
            return

        self._attempt(
            kind.value.replace("_", " "),
            droplet,
            lambda: self._client().droplet_action(droplet.id, kind),
        )

        self.refresh()

    def reboot(self) -> None:
        self._action(ActionKind.reboot)

    def shutdown(self) -> None:
        self._action(ActionKind.shutdown)

    def enable_private_networking(self) -> None:
        self._action(ActionKind.enable_private_networking)

    # -- details -----------------------------------------------------------

    def show_info(self) -> None:
        droplet = self.current()
        if droplet is None:
            return

        self.screen.add_page(INFO_PAGE, render.info_modal(droplet), self.close_info)
        self.display()

    def close_info(self) -> None:
        self.screen.remove_page(INFO_PAGE)
        self.screen.focus = LIST_FOCUS
        self.display()

    def escape(self) -> None:
        if not self.screen.escape():
            self.unselect()

    # -- keyboard ----------------------------------------------------------

    def handle_key(self, key: Text) -> bool:
        """
        Runs the command bound to a key. While the details are open, only
        escape does something. Returns True if the key was bound.
        """

        if self.screen.has_page(INFO_PAGE) and key != "esc":
            return False

        binding = KEYS.get(key)
        if binding is None:
            return False

        getattr(self, binding[0])()
        return True

    @staticmethod
    def help_text() -> Text:
        keys_by_method = {}
        help_by_method = {}

        for key, (method, text) in KEYS.items():
            keys_by_method.setdefault(method, []).append(key)
            help_by_method[method] = text

        return "\n".join(
            f"{'/'.join(keys):>10}  {help_by_method[method]}"
            for method, keys in keys_by_method.items()
        )

    # -- display -----------------------------------------------------------

    def snapshot(self) -> render.PanelSnapshot:
        with self._lock:
            return render.PanelSnapshot(
                title=self.settings.title,
                droplets=tuple(self.droplets),
                cursor=self.selection.cursor,
                active=self.selection.active,
                item_count=self.item_count,
                err=self.err,
                state=self.state.value,
            )

    def content(self) -> List[Text]:
        return render.content(self.snapshot())

    def render(self):
        return self.screen.compose(render.render_list(self.snapshot()))

    def display(self) -> None:
        if self.on_render is not None:
            self.on_render(self)
