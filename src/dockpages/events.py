"""Key event helpers shared by pages, the dialog and the host."""

from enum import Enum
from typing import Iterable, Tuple


class MessageResponse(Enum):
    CONSUMED = "consumed"
    NOT_CONSUMED = "not_consumed"

    def __bool__(self) -> bool:
        return self is MessageResponse.CONSUMED


def parse_keys(spec: str) -> Tuple[str, ...]:
    """Split a comma-separated binding ("up,k") into key names."""
    return tuple(k.strip() for k in spec.split(",") if k.strip())


def format_keys(keys: Iterable[str]) -> str:
    return "/".join(keys)
