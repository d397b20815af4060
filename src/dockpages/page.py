"""
Resource page: routes key events to the confirmation dialog or the list.

Every page, whatever the resource kind, implements the same contract so a
host can treat them uniformly:

    await page.update(key) -> MessageResponse
    await page.initialise()
    await page.set_visible()
    await page.set_invisible()
    await page.tick()          # periodic refresh

Routing is re-derived from the dialog state on each event:
  - Closed:   navigation keys move the selection; a confirm binding captures
              the selected record and opens the dialog; other bindings run
              through the executor straight away.
  - Open:     every key goes to the dialog, navigation is suspended.
  - Resolved: the page drains the dialog and submits the decision exactly
              once before returning.

Pages are configured rather than subclassed: see pages.py.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from .backend import ResourceBackend
from .dialog import BooleanOptions, ConfirmationDialog, DecisionOptions
from .errors import ActionInProgress, BackendUnavailable
from .events import MessageResponse
from .executor import ActionExecutor, ActionOutcome, PendingAction
from .selection import FIRST, LAST, ResourceList

logger = logging.getLogger(__name__)

R = TypeVar("R")

CONSUMED = MessageResponse.CONSUMED
NOT_CONSUMED = MessageResponse.NOT_CONSUMED


@dataclass(frozen=True)
class NavigationKeys:
    up: Tuple[str, ...] = ("up", "k")
    down: Tuple[str, ...] = ("down", "j")
    first: Tuple[str, ...] = ("g",)
    last: Tuple[str, ...] = ("G", "shift+g")


@dataclass(frozen=True)
class ActionBinding:
    """Binds keys to one backend capability.

    ``capability`` names the ResourceBackend method to call and is resolved
    when the key is pressed; ``label`` is what the user sees. Bindings with
    ``confirm`` set go through the dialog, ``prompt`` builds its question.
    """
    keys: Tuple[str, ...]
    capability: str
    label: str
    confirm: bool = False
    prompt: Optional[Callable[[Any], str]] = None


class ResourcePage(Generic[R]):
    def __init__(self, name: str, backend: ResourceBackend,
                 bindings: Sequence[ActionBinding],
                 decision_options: Type[DecisionOptions] = BooleanOptions,
                 navigation: Optional[NavigationKeys] = None,
                 filters: Optional[Dict[str, Any]] = None):
        self.name = name
        self.visible = False
        self.backend = backend
        self.bindings = tuple(bindings)
        self.navigation = navigation or NavigationKeys()
        self.resources: ResourceList[R] = ResourceList(backend, filters)
        self.dialog: ConfirmationDialog[DecisionOptions, PendingAction] = ConfirmationDialog(
            "Delete", decision_options
        )
        self.executor = ActionExecutor(self.resources)
        self.message = ""
        self.output: List[str] = []
        self.last_outcome: Optional[ActionOutcome] = None
        # set while self.message holds a refresh failure
        self._refresh_error: Optional[str] = None

        self._bindings_by_key: Dict[str, ActionBinding] = {}
        for binding in self.bindings:
            for key in binding.keys:
                self._bindings_by_key[key] = binding

    @property
    def help(self) -> List[Tuple[str, str]]:
        entries = [(binding.keys[0], binding.label) for binding in self.bindings if binding.keys]
        entries.append((self.navigation.first[0], "to-top"))
        entries.append((self.navigation.last[0], "to-bottom"))
        return entries

    async def update(self, key: str) -> MessageResponse:
        if not self.visible:
            return NOT_CONSUMED

        # a Resolved dialog never survives an event; drain anything left over
        if self.dialog.is_resolved and not await self._resolve():
            return NOT_CONSUMED

        if self.dialog.is_open:
            response = self.dialog.update(key)
            if self.dialog.is_resolved and not await self._resolve():
                return NOT_CONSUMED
            return response

        return await self._handle_idle(key)

    async def initialise(self) -> None:
        await self.resources.refresh()
        self.resources.reset()

    async def set_visible(self) -> None:
        self.visible = True
        try:
            await self.initialise()
        except BackendUnavailable as e:
            logger.error(f"Unable to initialise {self.name} page: {e}")
            self._set_refresh_error(str(e))
        else:
            self._clear_refresh_error()

    async def set_invisible(self) -> None:
        self.visible = False

    async def tick(self) -> None:
        """Periodic refresh, skipped while hidden or while an action runs.

        A tick whose fetch overlaps an action may finish after the action's
        own resync; ResourceList.refresh drops that stale result.
        """
        if not self.visible or self.executor.busy:
            return
        try:
            await self.resources.refresh()
        except BackendUnavailable as e:
            logger.warning(f"Periodic refresh of {self.name} failed: {e}")
            self._set_refresh_error(str(e))
        else:
            self._clear_refresh_error()

    def _set_refresh_error(self, text: str) -> None:
        self._refresh_error = text
        self.message = text

    def _clear_refresh_error(self) -> None:
        if self._refresh_error is None:
            return
        logger.info(f"{self.name} page refreshed again after: {self._refresh_error}")
        if self.message == self._refresh_error:
            self.message = ""
        self._refresh_error = None

    async def _handle_idle(self, key: str) -> MessageResponse:
        nav = self.navigation
        if key in nav.up:
            self.resources.move(-1)
            return CONSUMED
        if key in nav.down:
            self.resources.move(1)
            return CONSUMED
        if key in nav.first:
            self.resources.jump(FIRST)
            return CONSUMED
        if key in nav.last:
            self.resources.jump(LAST)
            return CONSUMED

        binding = self._bindings_by_key.get(key)
        if binding is None:
            return NOT_CONSUMED

        try:
            self.executor.ensure_idle()
        except ActionInProgress as e:
            logger.info(f"Rejected {binding.label} on {self.name}: {e}")
            self.message = f"Busy: {e}"
            return NOT_CONSUMED

        record = self.resources.current()
        if record is None:
            return NOT_CONSUMED

        action = PendingAction(
            verb=binding.label,
            target_id=record.id,
            call=getattr(self.backend, binding.capability),
            description=f"{binding.label} {self.backend.kind} {record.id[:12]}",
        )

        if binding.confirm:
            prompt = binding.prompt(record) if binding.prompt else f"{binding.label.capitalize()} {record.id[:12]}?"
            self.dialog.open(prompt, action)
            return CONSUMED

        try:
            outcome = await self.executor.run(action)
        except ActionInProgress as e:
            self.message = f"Busy: {e}"
            return NOT_CONSUMED
        self._record(outcome)
        return CONSUMED

    async def _resolve(self) -> bool:
        drained = self.dialog.drain()
        if drained is None:
            return True
        decision, action = drained
        try:
            outcome = await self.executor.submit(decision, action)
        except ActionInProgress as e:
            logger.warning(f"Rejected {action}: {e}")
            self.message = f"Busy: {e}"
            return False
        self._record(outcome)
        return True

    def _record(self, outcome: ActionOutcome) -> None:
        self.last_outcome = outcome
        self.message = outcome.message
        if outcome.ok and isinstance(outcome.result, list):
            self.output = list(outcome.result)
