"""
Generic confirmation dialog gating destructive actions.

The dialog is a three-state machine:

    Closed --open()--> Open(prompt, action) --update(key)--> Resolved(decision, action)
      ^                                                            |
      +---------------------------drain()--------------------------+

Resolved is transient: the owner drains it before handling the next event,
which hands back the decision together with the action captured at open()
time. That split is what guarantees the action runs exactly once.

The dialog is generic over the decision enumeration (any DecisionOptions
subclass) and over the pending action payload, which it never inspects.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, Tuple, Type, TypeVar, Union

from .errors import InvalidTransition
from .events import MessageResponse, format_keys

logger = logging.getLogger(__name__)


class DecisionOptions(Enum):
    """Base class for decision enumerations.

    Member values are ``(keys, affirmative, label)`` with an optional fourth
    element holding keyword arguments forwarded to the backend call.
    """

    def __init__(self, keys: Tuple[str, ...], affirmative: bool, label: str,
                 call_kwargs: Tuple[Tuple[str, Any], ...] = ()):
        self.keys = keys
        self.affirmative = affirmative
        self.label = label
        self._call_kwargs = call_kwargs

    @property
    def call_kwargs(self) -> Dict[str, Any]:
        return dict(self._call_kwargs)

    @classmethod
    def for_key(cls, key: str) -> Optional["DecisionOptions"]:
        for option in cls:
            if key in option.keys:
                return option
        return None

    @classmethod
    def hint(cls) -> str:
        return "    ".join(f"[{format_keys(o.keys)}] {o.label}" for o in cls)


class BooleanOptions(DecisionOptions):
    YES = (("y", "Y", "enter"), True, "Yes")
    NO = (("n", "N", "escape"), False, "No")


class DeleteImageOptions(DecisionOptions):
    YES = (("y", "Y", "enter"), True, "Yes")
    FORCE = (("f", "F"), True, "Force", (("force", True),))
    NO = (("n", "N", "escape"), False, "No")


D = TypeVar("D", bound=DecisionOptions)
P = TypeVar("P")


@dataclass(frozen=True)
class Closed:
    pass


@dataclass(frozen=True)
class Open(Generic[P]):
    prompt: str
    action: P


@dataclass(frozen=True)
class Resolved(Generic[D, P]):
    decision: D
    action: P


DialogState = Union[Closed, Open, Resolved]


class ConfirmationDialog(Generic[D, P]):
    def __init__(self, title: str, options: Type[D]):
        self.title = title
        self.options = options
        self._state: DialogState = Closed()

    @property
    def state(self) -> DialogState:
        return self._state

    @property
    def is_open(self) -> bool:
        return isinstance(self._state, Open)

    @property
    def is_resolved(self) -> bool:
        return isinstance(self._state, Resolved)

    @property
    def prompt(self) -> Optional[str]:
        if isinstance(self._state, Open):
            return self._state.prompt
        return None

    def open(self, prompt: str, action: P) -> None:
        if not isinstance(self._state, Closed):
            raise InvalidTransition(
                f"{self.title} dialog cannot open from {type(self._state).__name__}"
            )
        self._state = Open(prompt, action)
        logger.debug(f"{self.title} dialog opened: {prompt}")

    def update(self, key: str) -> MessageResponse:
        if not isinstance(self._state, Open):
            raise InvalidTransition(
                f"{self.title} dialog cannot take input while {type(self._state).__name__}"
            )
        decision = self.options.for_key(key)
        if decision is None:
            return MessageResponse.NOT_CONSUMED
        self._state = Resolved(decision, self._state.action)
        logger.debug(f"{self.title} dialog resolved: {decision.name}")
        return MessageResponse.CONSUMED

    def drain(self) -> Optional[Tuple[D, P]]:
        if not isinstance(self._state, Resolved):
            return None
        resolved = self._state
        self._state = Closed()
        return resolved.decision, resolved.action
