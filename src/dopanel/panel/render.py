"""Rich rendering of the droplets panel and of the droplet details modal."""

from typing import List, NamedTuple, Optional, Text, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text as RichText

from ..droplet.models import Droplet

STATE_BORDER = {
    "ok": "cyan",
    "error": "red",
}

STATUS_STYLE = {
    "active": "green",
    "new": "yellow",
    "off": "red",
    "archive": "dim",
}


class PanelSnapshot(NamedTuple):
    title: Text
    droplets: Tuple[Droplet, ...]
    cursor: int
    active: bool
    item_count: int
    err: Optional[Exception]
    state: Text


def _or_dash(value) -> Text:
    if value is None or value == "" or value == []:
        return "-"

    return str(value)


def droplet_line(droplet: Droplet) -> Text:
    region = droplet.region.slug if droplet.region else None

    return " ".join(
        [
            droplet.name,
            f"[{droplet.status.value}]",
            _or_dash(region),
            _or_dash(droplet.public_ipv4),
        ]
    )


def content(snapshot: PanelSnapshot) -> List[Text]:
    """
    Display strings for the list, one per droplet, in the list order
    """

    return [droplet_line(d) for d in snapshot.droplets]


def render_list(snapshot: PanelSnapshot) -> Panel:
    title = f"[bold]{snapshot.title} ({snapshot.item_count})[/bold]"

    if snapshot.err is not None:
        return Panel(
            RichText(str(snapshot.err), style="red"),
            title=title,
            border_style=STATE_BORDER["error"],
        )

    if not snapshot.droplets:
        return Panel(
            RichText("No droplets", style="dim"),
            title=title,
            border_style=STATE_BORDER["ok"],
        )

    table = Table(box=None, show_header=True, expand=True, pad_edge=False)
    table.add_column("Name", no_wrap=True, overflow="ellipsis")
    table.add_column("Status", no_wrap=True)
    table.add_column("Region", no_wrap=True)
    table.add_column("Public IP", no_wrap=True)

    for idx, droplet in enumerate(snapshot.droplets):
        selected = snapshot.active and idx == snapshot.cursor
        status = droplet.status.value
        table.add_row(
            droplet.name,
            RichText(status, style=STATUS_STYLE.get(status, "default")),
            _or_dash(droplet.region.slug if droplet.region else None),
            _or_dash(droplet.public_ipv4),
            style="reverse" if selected else None,
        )

    return Panel(table, title=title, border_style=STATE_BORDER["ok"])


def properties_rows(droplet: Droplet) -> List[Tuple[Text, Text]]:
    image = droplet.image.name if droplet.image else None
    region = droplet.region.name if droplet.region else None

    return [
        ("Name", droplet.name),
        ("ID", str(droplet.id)),
        ("Status", droplet.status.value),
        ("Created", droplet.created_at.isoformat()),
        ("Region", _or_dash(region)),
        ("Size", _or_dash(droplet.size_slug)),
        ("Memory", f"{droplet.memory} MB"),
        ("vCPUs", str(droplet.vcpus)),
        ("Disk", f"{droplet.disk} GB"),
        ("Image", _or_dash(image)),
        ("Public IPv4", _or_dash(droplet.public_ipv4)),
        ("Private IPv4", _or_dash(droplet.private_ipv4)),
        ("VPC", _or_dash(droplet.vpc_uuid)),
        ("Tags", _or_dash(", ".join(droplet.tags))),
        ("Features", _or_dash(", ".join(droplet.features))),
        ("Locked", "yes" if droplet.locked else "no"),
    ]


def info_modal(droplet: Droplet) -> Panel:
    table = Table(box=None, show_header=False, expand=True, pad_edge=False)
    table.add_column("key", style="bold")
    table.add_column("value", style="default")

    for key, value in properties_rows(droplet):
        table.add_row(key, value)

    table.add_row("", "")
    table.add_row("", RichText("Esc to close", style="dim"))

    return Panel(
        table,
        title=f"  {droplet.name}  ",
        border_style="cyan",
        width=80,
    )
