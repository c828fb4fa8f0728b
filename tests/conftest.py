from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest

from dopanel.config import Settings
from dopanel.droplet.models import (
    ActionKind,
    Droplet,
    DropletPage,
    DropletStatus,
    Network,
    Networks,
    Region,
)


def make_droplet(droplet_id: int, name: Optional[str] = None, **kwargs) -> Droplet:
    return Droplet(
        id=droplet_id,
        name=name or f"droplet-{droplet_id}",
        memory=1024,
        vcpus=1,
        disk=25,
        locked=False,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        status=DropletStatus.active,
        **kwargs,
    )


def paged(*pages: List[Droplet]) -> List[DropletPage]:
    """
    Chains lists of droplets into pages that point to each other
    """

    return [
        DropletPage(list(droplets), idx + 2 if idx + 1 < len(pages) else None)
        for idx, droplets in enumerate(pages)
    ]


class FakeClient:
    """
    Stands in for DropletApi. Page N of a listing is `pages[N - 1]`, the
    first page being requested with None.
    """

    def __init__(self, pages: List[DropletPage] = ()):
        self.pages = list(pages)
        self.list_errors: Dict[int, Exception] = {}
        self.action_error: Optional[Exception] = None
        self.calls = []

    def list_page(self, page: Optional[int] = None) -> DropletPage:
        self.calls.append(("list_page", page))
        idx = (page or 1) - 1

        if idx in self.list_errors:
            raise self.list_errors[idx]

        return self.pages[idx]

    def droplet_delete(self, droplet_id: int) -> None:
        self.calls.append(("delete", droplet_id))

        if self.action_error:
            raise self.action_error

    def droplet_action(self, droplet_id: int, kind: ActionKind):
        self.calls.append((kind.value, droplet_id))

        if self.action_error:
            raise self.action_error

    def actions(self):
        return [c for c in self.calls if c[0] != "list_page"]


@pytest.fixture
def settings() -> Settings:
    return Settings(api_token="secret", title="Droplets")


@pytest.fixture
def droplets() -> List[Droplet]:
    return [
        make_droplet(
            1,
            "web",
            region=Region(slug="ams3", name="Amsterdam 3"),
            networks=Networks(
                v4=[
                    Network(ip_address="10.110.0.2", type="private"),
                    Network(ip_address="203.0.113.10", type="public"),
                ]
            ),
        ),
        make_droplet(2, "db"),
        make_droplet(3, "worker"),
    ]
