import asyncio

import pytest

from dockpages.events import MessageResponse
from dockpages.host import PageHost
from dockpages.page import ActionBinding, ResourcePage

from conftest import FakeBackend, container


def make_page(name, records):
    backend = FakeBackend(records)
    bindings = [ActionBinding(("d",), "remove", "delete", confirm=True)]
    return ResourcePage(name, backend, bindings)


@pytest.fixture
def host():
    pages = [
        make_page("Containers", [container("c1"), container("c2")]),
        make_page("Images", [container("i1")]),
        make_page("Volumes", []),
    ]
    h = PageHost(pages)
    asyncio.run(h.start())
    return h


def test_start_makes_only_first_page_visible(host):
    assert [p.visible for p in host.pages] == [True, False, False]
    assert host.pages[1].backend.calls == []


def test_page_keys_go_to_active_page(host):
    assert asyncio.run(host.update("j")) is MessageResponse.CONSUMED
    assert host.active.resources.index == 1


def test_tab_cycles_pages_and_reinitialises(host):
    asyncio.run(host.update("tab"))
    assert host.active.name == "Images"
    assert [p.visible for p in host.pages] == [False, True, False]
    assert host.active.resources.current().id == "i1"

    asyncio.run(host.update("shift+tab"))
    asyncio.run(host.update("shift+tab"))
    assert host.active.name == "Volumes"


def test_digit_selects_page(host):
    assert asyncio.run(host.update("3")) is MessageResponse.CONSUMED
    assert host.active.name == "Volumes"
    assert asyncio.run(host.update("9")) is MessageResponse.NOT_CONSUMED


def test_no_page_switch_while_dialog_open(host):
    asyncio.run(host.update("d"))
    assert host.active.dialog.is_open

    assert asyncio.run(host.update("tab")) is MessageResponse.NOT_CONSUMED
    assert host.active.name == "Containers"


def test_tick_only_refreshes_visible_page(host):
    hidden = host.pages[1].backend
    asyncio.run(host.tick())
    assert hidden.calls == []
    assert len(host.pages[0].backend.list_calls()) == 2


def test_index_of_is_case_insensitive(host):
    assert host.index_of("images") == 1
    assert host.index_of("stats") is None


def test_host_requires_pages():
    with pytest.raises(ValueError):
        PageHost([])
