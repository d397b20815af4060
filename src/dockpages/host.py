"""
Host shell multiplexing resource pages.

Exactly one page is visible at a time. Keys go to the visible page first;
only keys it does not consume are considered for page switching. While the
visible page has its dialog open, no switching happens at all.
"""

import logging
from typing import Optional, Sequence, Tuple

from .events import MessageResponse
from .page import ResourcePage

logger = logging.getLogger(__name__)


class PageHost:
    def __init__(self, pages: Sequence[ResourcePage],
                 next_keys: Tuple[str, ...] = ("tab",),
                 prev_keys: Tuple[str, ...] = ("shift+tab",)):
        if not pages:
            raise ValueError("PageHost needs at least one page")
        self.pages = list(pages)
        self.next_keys = next_keys
        self.prev_keys = prev_keys
        self.active_index = 0

    @property
    def active(self) -> ResourcePage:
        return self.pages[self.active_index]

    def index_of(self, name: str) -> Optional[int]:
        for i, page in enumerate(self.pages):
            if page.name.lower() == name.lower():
                return i
        return None

    async def start(self, index: int = 0) -> None:
        self.active_index = index
        for i, page in enumerate(self.pages):
            if i != index:
                await page.set_invisible()
        await self.active.set_visible()

    async def switch_to(self, index: int) -> None:
        index %= len(self.pages)
        if index == self.active_index and self.active.visible:
            return
        logger.debug(f"Switching to page {self.pages[index].name}")
        await self.active.set_invisible()
        self.active_index = index
        await self.active.set_visible()

    async def update(self, key: str) -> MessageResponse:
        response = await self.active.update(key)
        if response is MessageResponse.CONSUMED or self.active.dialog.is_open:
            return response

        if key in self.next_keys:
            await self.switch_to(self.active_index + 1)
            return MessageResponse.CONSUMED
        if key in self.prev_keys:
            await self.switch_to(self.active_index - 1)
            return MessageResponse.CONSUMED
        if key.isdigit() and 1 <= int(key) <= len(self.pages):
            await self.switch_to(int(key) - 1)
            return MessageResponse.CONSUMED
        return MessageResponse.NOT_CONSUMED

    async def tick(self) -> None:
        await self.active.tick()
