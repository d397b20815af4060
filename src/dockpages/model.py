"""
Data models for the resources shown on dockpages pages.

Every record is a plain dataclass fetched wholesale from the backend on each
refresh. Records are never patched in place: a refresh replaces the whole
snapshot, so these classes are frozen.

Data Classes:
  - PortMapping: One published/exposed container port
  - ContainerInfo: Container summary (id, image, command, ports, status)
  - ImageInfo: Image summary (id, repository name, tag, size)
  - VolumeInfo: Volume summary (name doubles as identifier)
  - NetworkInfo: Network summary (driver, scope, subnet)

Key Fields:
  - id: Opaque identifier handed back to the backend for actions
  - state/status: Lifecycle tag, used only for presentation
"""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class PortMapping:
    private_port: int
    ip: str = ""
    public_port: str = ""
    type: str = ""

    def __str__(self) -> str:
        return f"{self.ip}:{self.private_port}:{self.public_port}:{self.type}"


@dataclass(frozen=True)
class ContainerInfo:
    id: str
    short_id: str
    name: str
    image: str
    command: str = ""
    created: str = ""
    state: str = ""  # running, exited, paused, ...
    status: str = ""  # human readable, e.g. "Up 3 minutes"
    ports: Tuple[PortMapping, ...] = field(default_factory=tuple)

    @property
    def is_running(self) -> bool:
        return self.state == "running"


@dataclass(frozen=True)
class ImageInfo:
    id: str
    short_id: str
    name: str
    tag: str
    created: str
    size: str

    @property
    def reference(self) -> str:
        if self.name == "<none>":
            return self.id
        return f"{self.name}:{self.tag}"


@dataclass(frozen=True)
class VolumeInfo:
    id: str
    name: str
    driver: str
    mountpoint: str


@dataclass(frozen=True)
class NetworkInfo:
    id: str
    name: str
    driver: str
    scope: str
    subnet: str
