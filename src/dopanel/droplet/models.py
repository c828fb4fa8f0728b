from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional, Text, Union

from typefit.narrows import DateTime

from dopanel.models import Collection

__all__ = [
    "ActionKind",
    "DropletStatus",
    "Region",
    "Image",
    "Network",
    "Networks",
    "Droplet",
    "DropletCollection",
    "DropletPage",
    "Action",
]


class ActionKind(Enum):
    reboot = "reboot"
    shutdown = "shutdown"
    enable_private_networking = "enable_private_networking"


class DropletStatus(Enum):
    new = "new"
    active = "active"
    off = "off"
    archive = "archive"


@dataclass
class Region:
    slug: Text
    name: Text


@dataclass
class Image:
    id: int
    name: Text
    distribution: Optional[Text] = None
    slug: Optional[Text] = None


@dataclass
class Network:
    ip_address: Text
    type: Text
    netmask: Optional[Union[Text, int]] = None
    gateway: Optional[Text] = None


@dataclass
class Networks:
    v4: List[Network] = field(default_factory=list)
    v6: List[Network] = field(default_factory=list)


@dataclass(frozen=True)
class Droplet:
    id: int
    name: Text
    memory: int
    vcpus: int
    disk: int
    locked: bool
    created_at: DateTime
    status: DropletStatus
    size_slug: Optional[Text] = None
    region: Optional[Region] = None
    image: Optional[Image] = None
    networks: Optional[Networks] = None
    vpc_uuid: Optional[Text] = None
    tags: List[Text] = field(default_factory=list)
    features: List[Text] = field(default_factory=list)

    def _ipv4(self, kind: Text) -> Optional[Text]:
        if not self.networks:
            return None

        for network in self.networks.v4:
            if network.type == kind:
                return network.ip_address

    @property
    def public_ipv4(self) -> Optional[Text]:
        return self._ipv4("public")

    @property
    def private_ipv4(self) -> Optional[Text]:
        return self._ipv4("private")


@dataclass
class DropletCollection(Collection):
    droplets: List[Droplet] = field(default_factory=list)


class DropletPage(NamedTuple):
    droplets: List[Droplet]
    next_page: Optional[int] = None


@dataclass
class Action:
    id: int
    status: Text
    type: Text
    started_at: Optional[DateTime] = None
    completed_at: Optional[DateTime] = None
    resource_id: Optional[int] = None
    resource_type: Optional[Text] = None
