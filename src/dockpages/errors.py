"""
Exception hierarchy for dockpages.

Backend errors are recoverable: a page catches them, keeps its previous
snapshot on screen and lets the user retry. InvalidTransition signals misuse
of the dialog state machine and is never caught by the framework.
"""


class BackendError(Exception):
    """Base class for failures reported by a resource backend."""


class BackendUnavailable(BackendError):
    """The daemon could not be reached or refused to serve the request."""


class Unreachable(BackendUnavailable):
    pass


class Unauthorized(BackendUnavailable):
    pass


class NotFound(BackendError):
    """The target resource no longer exists."""


class Conflict(BackendError):
    """The target resource is in a state that forbids the operation."""


class Unsupported(BackendError):
    """The resource kind has no such capability (e.g. stopping an image)."""


class UnknownBackendError(BackendError):
    pass


class InvalidTransition(RuntimeError):
    """A dialog operation was called from a state that does not allow it."""


class ActionInProgress(RuntimeError):
    """A page already has a backend action in flight."""
