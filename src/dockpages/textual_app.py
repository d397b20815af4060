"""Textual-based UI for dockpages."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import DataTable, Header, Static, Tab, Tabs
from rich.markup import escape as rich_escape

from . import get_log_path
from .backend import DockerBackend
from .config import ConfigManager, config_manager
from .events import MessageResponse
from .host import PageHost
from .pages import build_pages
from .views import format_help, layout_for

logger = logging.getLogger(__name__)


class ResourceTable(DataTable, can_focus=False):
    """Display-only table; the selection is driven by the active page."""


class PageTabs(Tabs, can_focus=False):
    pass


class DashboardApp(App[None]):
    TITLE = "dockpages"
    SUB_TITLE = "Docker TUI"

    CSS = """
    Screen {
      layout: vertical;
    }

    #tabs {
      height: 1;
      padding: 0 1;
      background: $surface;
      color: $text;
    }

    #main {
      layout: vertical;
      height: 1fr;
    }

    #list {
      height: 1fr;
      border: round $accent;
    }

    #dialog {
      height: auto;
      border: round $warning;
      background: $surface;
      padding: 1 2;
    }

    #output {
      height: 10;
      border: round $accent;
      padding: 0 1;
      overflow: auto;
    }

    #help {
      height: 1;
      padding: 0 1;
      color: $text-muted;
    }

    #status {
      height: 1;
      padding: 0 1;
      background: $panel;
      color: $text;
    }
    """

    # priority so the screen's focus bindings never see tab/shift+tab
    BINDINGS = [
        Binding("tab", "page_key('tab')", "Next page", show=False, priority=True),
        Binding("shift+tab", "page_key('shift+tab')", "Previous page", show=False, priority=True),
    ]

    def __init__(self, config: Optional[ConfigManager] = None) -> None:
        super().__init__()
        self.config = config or config_manager
        cfg = self.config.get_config()
        self.docker_backend = DockerBackend(
            base_url=cfg.docker.base_url,
            timeout=cfg.docker.timeout,
            show_all_containers=cfg.docker.show_all_containers,
        )
        self.host = PageHost(
            build_pages(self.docker_backend, self.config),
            next_keys=self.config.get_keys("next_page"),
            prev_keys=self.config.get_keys("prev_page"),
        )
        self._rendered_page: Optional[str] = None
        self._refresh_in_flight = False
        self._syncing_tabs = False

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield PageTabs(
            *[Tab(page.name.upper(), id=page.name.lower()) for page in self.host.pages],
            id="tabs",
        )
        yield Vertical(
            ResourceTable(id="list", cursor_type="row", zebra_stripes=True),
            Static("", id="dialog"),
            Static("", id="output", markup=False),
            id="main",
        )
        yield Static("", id="help", markup=False)
        yield Static("", id="status", markup=False)

    async def on_mount(self) -> None:
        start_page = self.config.get_config().ui.start_page
        index = self.host.index_of(start_page)
        await self.host.start(index or 0)
        self.set_interval(self.config.get_refresh_interval(), self._tick)
        self._render()

    async def _tick(self) -> None:
        if self._refresh_in_flight:
            return
        self._refresh_in_flight = True
        try:
            await self.host.tick()
            self._render()
        finally:
            self._refresh_in_flight = False

    async def on_key(self, event: events.Key) -> None:
        # awaiting here keeps the UI non-interactive while a backend call runs
        response = await self.host.update(event.key)
        if response is MessageResponse.CONSUMED:
            event.stop()
        elif self.config.is_key_binding(event.key, "quit") and not self.host.active.dialog.is_open:
            self.exit()
            return
        self._render()

    async def action_page_key(self, key: str) -> None:
        await self.host.update(key)
        self._render()

    async def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        if self._syncing_tabs or event.tab.id is None:
            return
        index = self.host.index_of(event.tab.id)
        if index is not None and index != self.host.active_index:
            await self.host.switch_to(index)
            self._render()

    def _render(self) -> None:
        page = self.host.active
        layout = layout_for(page.name)

        table = self.query_one("#list", ResourceTable)
        if self._rendered_page != page.name:
            table.clear(columns=True)
            table.add_columns(*layout.columns)
            self._rendered_page = page.name
        else:
            table.clear()
        for record in page.resources.records:
            table.add_row(*layout.render_row(record))
        index = page.resources.index
        table.show_cursor = index is not None
        if index is not None:
            table.move_cursor(row=index)

        dialog = self.query_one("#dialog", Static)
        if page.dialog.is_open:
            dialog.update(rich_escape(
                f"{page.dialog.title}\n\n{page.dialog.prompt}\n\n{page.dialog.options.hint()}"
            ))
            dialog.display = True
        else:
            dialog.display = False

        output = self.query_one("#output", Static)
        output.update("\n".join(page.output))
        output.display = bool(page.output)

        self.query_one("#help", Static).update(format_help(page.name, page.help))
        self.query_one("#status", Static).update(page.message)

        tabs = self.query_one("#tabs", PageTabs)
        tab_id = page.name.lower()
        if tabs.active != tab_id:
            self._syncing_tabs = True
            try:
                tabs.active = tab_id
            finally:
                self._syncing_tabs = False


def setup_logging(config: ConfigManager) -> None:
    log_config = config.get_config().logging
    handler = RotatingFileHandler(
        config.get_custom_log_path() or get_log_path(),
        maxBytes=log_config.max_size_mb * 1024 * 1024,
        backupCount=log_config.backup_count,
    )
    logging.basicConfig(
        level=config.get_log_level(),
        handlers=[handler],
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    )


def run() -> None:
    setup_logging(config_manager)
    logger.info("dockpages starting")
    app = DashboardApp()
    app.run()
