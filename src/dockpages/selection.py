"""
Selection list controller: a resource snapshot plus a selection index.

The snapshot is replaced wholesale on every refresh, there is no diffing, and
the backend's ordering is kept as-is. The index invariant holds after every
public call: when present it satisfies 0 <= index < len(snapshot), and it is
None whenever the snapshot is empty.
"""

import asyncio
import logging
from typing import Any, Dict, Generic, Optional, Sequence, Tuple, TypeVar

from .backend import ResourceBackend
from .errors import BackendError, BackendUnavailable

logger = logging.getLogger(__name__)

R = TypeVar("R")

FIRST = "first"
LAST = "last"


class ResourceList(Generic[R]):
    def __init__(self, backend: ResourceBackend, filters: Optional[Dict[str, Any]] = None):
        self._backend = backend
        self._filters = filters
        self._records: Tuple[R, ...] = ()
        self._index: Optional[int] = None
        self._started = 0
        self._applied = 0

    @property
    def records(self) -> Tuple[R, ...]:
        return self._records

    @property
    def index(self) -> Optional[int]:
        return self._index

    def __len__(self) -> int:
        return len(self._records)

    async def refresh(self) -> bool:
        """Replace the snapshot with a fresh fetch.

        Refreshes may overlap (a periodic tick and the resync after an
        action). Each one takes a ticket when its fetch starts, and a result
        is dropped when a later-started refresh has already been applied, so
        a slow fetch never puts a pre-mutation snapshot back. Returns whether
        the result was applied.

        On failure the previous snapshot and index are left untouched and
        BackendUnavailable is raised.
        """
        self._started += 1
        ticket = self._started
        try:
            records = await asyncio.to_thread(self._backend.list, self._filters)
        except BackendUnavailable:
            raise
        except BackendError as e:
            raise BackendUnavailable(f"unable to retrieve list of {self._backend.kind}s: {e}") from e
        if ticket < self._applied:
            logger.debug(f"Dropping stale {self._backend.kind} list (ticket {ticket} < {self._applied})")
            return False
        self._applied = ticket
        self.replace(records)
        return True

    def replace(self, records: Sequence[R]) -> None:
        self._records = tuple(records)
        self._reconcile()

    def reset(self) -> None:
        self._index = 0 if self._records else None

    def move(self, delta: int) -> None:
        if not self._records:
            return
        if self._index is None:
            self._index = 0
            return
        self._index = max(0, min(self._index + delta, len(self._records) - 1))

    def jump(self, to: str) -> None:
        if not self._records:
            return
        if to == FIRST:
            self._index = 0
        elif to == LAST:
            self._index = len(self._records) - 1
        else:
            raise ValueError(f"unknown jump target: {to!r}")

    def current(self) -> Optional[R]:
        if self._index is None or not 0 <= self._index < len(self._records):
            return None
        return self._records[self._index]

    def _reconcile(self) -> None:
        if not self._records:
            self._index = None
        elif self._index is not None and self._index >= len(self._records):
            logger.debug(f"Clamping selection {self._index} to {len(self._records) - 1}")
            self._index = len(self._records) - 1
