"""
Action execution for resource pages.

A PendingAction is built the moment an action key is pressed: it binds the
backend call and the target identifier, so later reordering of the list
cannot redirect it to another resource. The ActionExecutor runs at most one
such action per page and refreshes the page's list after it.

Outcome handling:
  - success                  -> refresh immediately
  - NotFound / Conflict      -> failed, refresh to resync with the daemon
  - any other backend error  -> failed, snapshot left untouched
  - negative decision        -> discarded, no backend call, no refresh
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .dialog import DecisionOptions
from .errors import ActionInProgress, BackendError, BackendUnavailable, Conflict, NotFound
from .selection import ResourceList

logger = logging.getLogger(__name__)

COMPLETED = "completed"
FAILED = "failed"
DISCARDED = "discarded"


@dataclass(frozen=True)
class PendingAction:
    verb: str
    target_id: str
    call: Callable[..., Any]
    description: str = ""

    def __str__(self) -> str:
        return self.description or f"{self.verb} {self.target_id}"


@dataclass(frozen=True)
class ActionOutcome:
    action: PendingAction
    status: str
    error: Optional[BackendError] = None
    result: Any = None

    @property
    def ok(self) -> bool:
        return self.status == COMPLETED

    @property
    def message(self) -> str:
        if self.status == COMPLETED:
            return f"{self.action.verb.capitalize()} {self.action.target_id[:12]}: done"
        if self.status == DISCARDED:
            return f"{self.action.verb.capitalize()} cancelled"
        return f"{self.action.verb.capitalize()} {self.action.target_id[:12]} failed: {self.error}"


class ActionExecutor:
    def __init__(self, resources: ResourceList):
        self._resources = resources
        self._in_flight: Optional[PendingAction] = None

    @property
    def busy(self) -> bool:
        return self._in_flight is not None

    @property
    def in_flight(self) -> Optional[PendingAction]:
        return self._in_flight

    def ensure_idle(self) -> None:
        if self._in_flight is not None:
            raise ActionInProgress(f"{self._in_flight} is still running")

    async def submit(self, decision: DecisionOptions, action: PendingAction) -> ActionOutcome:
        """Run a drained dialog decision."""
        if not decision.affirmative:
            logger.info(f"Discarded {action}")
            return ActionOutcome(action, DISCARDED)
        return await self._execute(action, decision.call_kwargs)

    async def run(self, action: PendingAction) -> ActionOutcome:
        """Run an action that needs no confirmation."""
        return await self._execute(action, {})

    async def _execute(self, action: PendingAction, call_kwargs: Dict[str, Any]) -> ActionOutcome:
        self.ensure_idle()
        self._in_flight = action
        try:
            logger.info(f"Executing {action} {call_kwargs or ''}".rstrip())
            try:
                result = await asyncio.to_thread(action.call, action.target_id, **call_kwargs)
            except (NotFound, Conflict) as e:
                logger.warning(f"{action} failed: {e}")
                await self._refresh()
                return ActionOutcome(action, FAILED, error=e)
            except BackendError as e:
                logger.error(f"{action} failed: {e}")
                return ActionOutcome(action, FAILED, error=e)
            await self._refresh()
            return ActionOutcome(action, COMPLETED, result=result)
        finally:
            self._in_flight = None

    async def _refresh(self) -> None:
        try:
            await self._resources.refresh()
        except BackendUnavailable as e:
            logger.error(f"Refresh after action failed, keeping previous snapshot: {e}")
