"""
Table layouts and help labels for each resource kind.

Each layout pairs column headers with a row formatter returning Rich Text
cells. Running containers are highlighted in green; nothing else is styled.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence, Tuple

from rich.text import Text

from .model import ContainerInfo, ImageInfo, NetworkInfo, VolumeInfo


@dataclass(frozen=True)
class TableLayout:
    columns: Tuple[str, ...]
    row: Callable[[Any], List[str]]

    def render_row(self, item: Any) -> List[Text]:
        style = "green" if getattr(item, "is_running", False) else ""
        return [Text(str(value), style=style) for value in self.row(item)]


def _container_row(c: ContainerInfo) -> List[str]:
    return [
        c.short_id,
        c.image,
        c.command,
        c.created,
        c.status,
        ", ".join(str(p) for p in c.ports),
        c.name,
    ]


def _image_row(i: ImageInfo) -> List[str]:
    return [i.short_id, i.name, i.tag, i.created, i.size]


def _volume_row(v: VolumeInfo) -> List[str]:
    return [v.name, v.driver, v.mountpoint]


def _network_row(n: NetworkInfo) -> List[str]:
    return [n.id[:12], n.name, n.driver, n.scope, n.subnet]


LAYOUTS: Dict[str, TableLayout] = {
    "Containers": TableLayout(
        ("ID", "Image", "Command", "Created", "Status", "Ports", "Names"), _container_row
    ),
    "Images": TableLayout(("ID", "Name", "Tag", "Created", "Size"), _image_row),
    "Volumes": TableLayout(("Name", "Driver", "Mountpoint"), _volume_row),
    "Networks": TableLayout(("ID", "Name", "Driver", "Scope", "Subnet"), _network_row),
}


def layout_for(page_name: str) -> TableLayout:
    return LAYOUTS[page_name]


def format_help(page_name: str, entries: Sequence[Tuple[str, str]]) -> str:
    """Footer help line, e.g. ``Containers  d: delete  r: run``."""
    parts = [f"{key}: {label}" for key, label in entries]
    return "  ".join([page_name] + parts)
