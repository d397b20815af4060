import threading

import pytest

from dockpages.backend import ResourceBackend
from dockpages.model import ContainerInfo


def container(cid, name=None, state="running"):
    return ContainerInfo(
        id=cid,
        short_id=cid[:12],
        name=name or f"{cid}-name",
        image="nginx:latest",
        state=state,
        status="Up 1 minute" if state == "running" else "Exited (0)",
    )


class FakeBackend(ResourceBackend):
    """In-memory backend recording every call.

    ``gate`` (a threading.Event) blocks mutating calls until set, which lets
    tests observe a page while an action is in flight. ``list_gate`` holds
    the next list() call only: the records are read when the call arrives
    and returned once the gate is set, like a slow daemon answer.
    """

    kind = "container"

    def __init__(self, records=()):
        self.records = list(records)
        self.calls = []
        self.list_error = None
        self.action_error = None
        self.gate = None
        self.entered = threading.Event()
        self.list_gate = None
        self.list_entered = threading.Event()
        self.attach_output = ["hello", "world"]

    def list(self, filters=None):
        self.calls.append(("list", filters))
        if self.list_error is not None:
            raise self.list_error
        records = list(self.records)
        gate, self.list_gate = self.list_gate, None
        if gate is not None:
            self.list_entered.set()
            gate.wait(5)
        return records

    def _mutate(self, name, resource_id, **kwargs):
        self.calls.append((name, resource_id, kwargs))
        self.entered.set()
        if self.gate is not None:
            self.gate.wait(5)
        if self.action_error is not None:
            raise self.action_error

    def remove(self, resource_id, force=False):
        self._mutate("remove", resource_id, force=force)
        self.records = [r for r in self.records if r.id != resource_id]

    def start(self, resource_id):
        self._mutate("start", resource_id)

    def stop(self, resource_id):
        self._mutate("stop", resource_id)

    def attach(self, resource_id):
        self._mutate("attach", resource_id)
        return list(self.attach_output)

    def mutations(self, name=None):
        return [c for c in self.calls if c[0] != "list" and (name is None or c[0] == name)]

    def list_calls(self):
        return [c for c in self.calls if c[0] == "list"]


@pytest.fixture
def three_containers():
    return [container("c1"), container("c2"), container("c3", state="exited")]


@pytest.fixture
def backend(three_containers):
    return FakeBackend(three_containers)
