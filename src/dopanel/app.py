"""Terminal entrypoint for the DigitalOcean droplets panel."""

import argparse
import json
import logging
import os
import sys
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Text

from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text as RichText
from typefit.serialize import SaneSerializer

from .config import resolve_settings
from .errors import PanelError
from .panel.widget import BLOCKING_COMMANDS, KEYS, DropletsWidget, create_client

logger = logging.getLogger("dopanel.app")

HELP_PAGE = "help"

ESCAPE_SEQUENCES = {
    "[A": "up",
    "[B": "down",
}

CONTROL_KEYS = {
    "\x03": "ctrl-c",
    "\x04": "ctrl-d",
    "\r": "enter",
    "\n": "enter",
}


def decode_key(ch: Text, following: Text = "") -> Text:
    """
    Turns raw terminal input into the key names of the bindings table.
    `following` holds what was read right after an escape character.
    """

    if ch == "\x1b":
        return ESCAPE_SEQUENCES.get(following, "esc")

    return CONTROL_KEYS.get(ch, ch)


def _poll_char(fd: int) -> Optional[Text]:
    import select

    r, _, _ = select.select([fd], [], [], 0)
    if r:
        try:
            return os.read(fd, 1).decode("utf-8", errors="ignore")
        except OSError:
            return None
    return None


def read_key(fd: int) -> Optional[Text]:
    ch = _poll_char(fd)
    if not ch:
        return None

    following = ""
    if ch == "\x1b":
        for _ in range(2):
            nxt = _poll_char(fd)
            if not nxt:
                break
            following += nxt

    return decode_key(ch, following)


def _log_failure(future: Future) -> None:
    exc = future.exception()
    if exc is not None:
        logger.error("Panel command failed", exc_info=exc)


def toggle_help(widget: DropletsWidget) -> None:
    if widget.screen.has_page(HELP_PAGE):
        widget.screen.remove_page(HELP_PAGE)
    else:
        widget.screen.add_page(
            HELP_PAGE,
            Panel(RichText(widget.help_text()), title="[bold]Keys[/bold]", border_style="cyan"),
        )

    widget.display()


def dispatch_key(widget: DropletsWidget, executor: ThreadPoolExecutor, key: Text) -> None:
    """
    Commands that talk to the API go to the worker so that the screen keeps
    answering, the others run right away.
    """

    if key == "?":
        toggle_help(widget)
        return

    method = KEYS.get(key, (None, None))[0]

    if method in BLOCKING_COMMANDS:
        executor.submit(widget.handle_key, key).add_done_callback(_log_failure)
    else:
        widget.handle_key(key)


def print_live(console: Console, widget: DropletsWidget, refresh_seconds: int) -> None:
    """
    Runs the interactive panel. Uses termios non-canonical mode instead of
    raw mode so that Rich's alternate screen keeps working over SSH.
    """

    old_settings = None
    has_termios = False
    fd = sys.stdin.fileno()

    try:
        import termios

        old_settings = termios.tcgetattr(fd)
        new = termios.tcgetattr(fd)
        new[3] &= ~(termios.ICANON | termios.ECHO)
        new[6][termios.VMIN] = 0
        new[6][termios.VTIME] = 0
        termios.tcsetattr(fd, termios.TCSADRAIN, new)
        has_termios = True
    except ImportError:
        logger.warning("No termios on this platform, keyboard disabled")
    except termios.error:
        logger.warning("Input is not a terminal, keyboard disabled")

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="dopanel")

    try:
        with Live(widget.render(), console=console, screen=True, auto_refresh=False) as live:
            widget.on_render = lambda w: live.update(w.render(), refresh=True)
            executor.submit(widget.refresh).add_done_callback(_log_failure)
            next_refresh = time.monotonic() + refresh_seconds

            while True:
                key = read_key(fd) if has_termios else None

                if key in ("q", "ctrl-c"):
                    raise KeyboardInterrupt

                if key:
                    dispatch_key(widget, executor, key)

                if time.monotonic() >= next_refresh:
                    executor.submit(widget.refresh).add_done_callback(_log_failure)
                    next_refresh = time.monotonic() + refresh_seconds

                time.sleep(0.1)
    except KeyboardInterrupt:
        pass
    finally:
        widget.on_render = None
        executor.shutdown(wait=False)

        if old_settings is not None:
            import termios

            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def print_json(widget: DropletsWidget) -> int:
    try:
        droplets = widget.fetch()
    except PanelError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    serializer = SaneSerializer()
    payload = [serializer.serialize(d) for d in droplets]
    print(json.dumps(payload, indent=2, default=str))
    return 0


def print_snapshot(console: Console, widget: DropletsWidget) -> int:
    widget.refresh()
    console.print(widget.render())
    return 0


def _setup_logging(level: Text, log_file: Optional[Text], live: bool) -> None:
    handlers: List[logging.Handler]

    if log_file:
        handlers = [logging.FileHandler(log_file)]
    elif live:
        handlers = [logging.NullHandler()]
    else:
        handlers = [logging.StreamHandler(sys.stderr)]

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def main(argv: Optional[List[Text]] = None) -> int:
    parser = argparse.ArgumentParser(description="DigitalOcean droplets panel")
    parser.add_argument("-l", "--live", action="store_true", help="Run the interactive panel")
    parser.add_argument("--json", action="store_true", help="Print the droplets as JSON")
    parser.add_argument("--config", help="Optional JSON config file")
    parser.add_argument("--token", help="DigitalOcean API token (defaults to $DO_API_TOKEN)")
    parser.add_argument("--refresh", type=int, help="Refresh interval seconds override")
    parser.add_argument("--per-page", type=int, help="Droplets requested per page")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    parser.add_argument("--log-file", help="Write logs to this file")
    args = parser.parse_args(argv)

    _setup_logging(args.log_level, args.log_file, args.live)

    try:
        settings = resolve_settings(
            args.config,
            {
                "api_token": args.token,
                "refresh_seconds": args.refresh,
                "per_page": args.per_page,
            },
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    widget = DropletsWidget(create_client(settings), settings)

    if args.json:
        return print_json(widget)

    console = Console()

    if args.live:
        print_live(console, widget, settings.refresh_seconds)
        return 0

    return print_snapshot(console, widget)


if __name__ == "__main__":
    raise SystemExit(main())
